"""Conversion of OpenAPI v3 schema fragments into scaffolder form fields."""

import json
from typing import Any

from kubecatalog.domain.resource.model import (
    ObjectSchema,
    PreserveUnknownSchema,
    SchemaNode,
)
from kubecatalog.domain.shared.service import Service

TEXTAREA_ROWS = 10


class SchemaWalker(Service):
    """Walks a schema tree and renders form fields.

    - Untyped preserve-unknown-fields values become a free-text textarea.
    - Objects with properties recurse.
    - Everything else passes through, ``type`` defaulting to ``string``.

    ``required`` is stripped at every level below the caller; only the
    top-level list is meaningful to the form.
    """

    convert_defaults_to_placeholders: bool = False

    def walk(self, schema: ObjectSchema | None) -> dict[str, Any]:
        """Render the properties of ``schema``; an absent schema yields ``{}``."""
        if schema is None:
            return {}
        return {name: self.field(node) for name, node in schema.properties.items()}

    def required(self, schema: ObjectSchema | None) -> list[str]:
        """Top-level required names that survive as mandatory form fields."""
        if schema is None:
            return []
        return [
            name
            for name in schema.required
            if name in schema.properties
            and not isinstance(schema.properties[name], PreserveUnknownSchema)
        ]

    def field(self, node: SchemaNode) -> dict[str, Any]:
        if isinstance(node, PreserveUnknownSchema):
            out = node.to_dict()
            out.pop("required", None)
            out["type"] = "string"
            out["ui:widget"] = "textarea"
            out["ui:options"] = {"rows": TEXTAREA_ROWS}
            return out

        if isinstance(node, ObjectSchema) and (node.properties or "properties" in node.order):
            out = node.to_dict()
            out.pop("required", None)
            out["properties"] = self.walk(node)
            out.setdefault("type", "object")
            return out

        out = node.to_dict()
        out.pop("required", None)
        out.setdefault("type", "string")
        if self.convert_defaults_to_placeholders and "default" in out and out["type"] != "boolean":
            out["ui:placeholder"] = _placeholder(out.pop("default"))
        return out


def _placeholder(value: Any) -> str:
    if isinstance(value, str):
        return value
    return json.dumps(value)
