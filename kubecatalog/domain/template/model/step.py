from typing import Any

from pydantic import ConfigDict, Field

from kubecatalog.domain.shared.model.value import ValueObject


class PipelineStep(ValueObject):
    """A scaffolder step.

    ``if_`` is a guard expression evaluated by the scaffolder, never here.
    Steps supplied by XRD authors may carry extra keys; they are kept.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="allow")

    id: str | None = None
    name: str | None = None
    action: str
    if_: str | None = Field(default=None, alias="if")
    input: dict[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        if self.id is not None:
            out["id"] = self.id
        if self.name is not None:
            out["name"] = self.name
        out["action"] = self.action
        if self.if_ is not None:
            out["if"] = self.if_
        if self.input is not None:
            out["input"] = self.input
        out.update(self.model_extra or {})
        return out


class OutputLink(ValueObject):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    title: str
    url: str
    if_: str | None = Field(default=None, alias="if")

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"title": self.title}
        if self.if_ is not None:
            out["if"] = self.if_
        out["url"] = self.url
        return out
