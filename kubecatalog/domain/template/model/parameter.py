from typing import Any

from kubecatalog.domain.shared.model.value import ValueObject


class ParameterGroup(ValueObject):
    """One page of the scaffolder form: a JSON-Schema object.

    ``properties`` and ``dependencies`` are plain JSON-Schema data; their key
    order is the form rendering order.
    """

    title: str
    properties: dict[str, Any]
    required: list[str] | None = None
    dependencies: dict[str, Any] | None = None
    type: str = "object"

    @property
    def is_empty(self) -> bool:
        return not self.properties

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"title": self.title}
        if self.required is not None:
            out["required"] = list(self.required)
        out["properties"] = self.properties
        if self.dependencies is not None:
            out["dependencies"] = self.dependencies
        out["type"] = self.type
        return out
