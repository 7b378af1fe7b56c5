"""OpenAPI v3 schema fragments as a closed set of node variants.

A node keeps every keyword it was parsed from, plus the original key order,
so ``to_dict()`` renders back an equivalent fragment. Child structures
(``properties``, ``required``, ``items``) live in typed fields.
"""

import copy
from typing import Annotated, Any, Literal, Union

from pydantic import Field

from kubecatalog.domain.shared.model.value import ValueObject

PRESERVE_UNKNOWN_FIELDS = "x-kubernetes-preserve-unknown-fields"


class _SchemaNodeBase(ValueObject):
    keywords: dict[str, Any] = Field(default_factory=dict)
    order: tuple[str, ...] = ()

    @property
    def declared_type(self) -> str | None:
        value = self.keywords.get("type")
        return value if isinstance(value, str) else None

    def keyword(self, key: str, default: Any = None) -> Any:
        return self.keywords.get(key, default)

    def _children(self) -> dict[str, Any]:
        return {}

    def to_dict(self) -> dict[str, Any]:
        """Render the fragment as plain data, in its original key order."""
        children = self._children()
        out: dict[str, Any] = {}
        for key in self.order:
            if key in self.keywords:
                out[key] = copy.deepcopy(self.keywords[key])
            elif key in children:
                out[key] = children[key]
        for key, value in self.keywords.items():
            if key not in out:
                out[key] = copy.deepcopy(value)
        for key, value in children.items():
            if key not in out:
                out[key] = value
        return out


class ScalarSchema(_SchemaNodeBase):
    """Strings, numbers, booleans, and anything without nested structure."""

    node: Literal["scalar"] = "scalar"


class PreserveUnknownSchema(_SchemaNodeBase):
    """An untyped free-form value (x-kubernetes-preserve-unknown-fields: true)."""

    node: Literal["preserve-unknown"] = "preserve-unknown"


class ArraySchema(_SchemaNodeBase):
    node: Literal["array"] = "array"
    items: "SchemaNode | None" = None

    def _children(self) -> dict[str, Any]:
        if self.items is None:
            return {}
        return {"items": self.items.to_dict()}


class ObjectSchema(_SchemaNodeBase):
    node: Literal["object"] = "object"
    properties: dict[str, "SchemaNode"] = Field(default_factory=dict)
    required: tuple[str, ...] = ()

    def _children(self) -> dict[str, Any]:
        children: dict[str, Any] = {}
        if self.properties or "properties" in self.order:
            children["properties"] = {k: v.to_dict() for k, v in self.properties.items()}
        if self.required or "required" in self.order:
            children["required"] = list(self.required)
        return children

    def property(self, name: str) -> "SchemaNode | None":
        return self.properties.get(name)


SchemaNode = Annotated[
    Union[ObjectSchema, ArraySchema, ScalarSchema, PreserveUnknownSchema],
    Field(discriminator="node"),
]

ArraySchema.model_rebuild()
ObjectSchema.model_rebuild()
