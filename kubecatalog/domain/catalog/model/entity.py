"""Catalog entities produced by a transform pass."""

from typing import Any, Literal

from kubecatalog.domain.shared.model.value import ValueObject
from kubecatalog.domain.template.model import OutputLink, ParameterGroup, PipelineStep

TEMPLATE_API_VERSION = "scaffolder.backstage.io/v1beta3"
API_API_VERSION = "backstage.io/v1alpha1"
MAX_NAME_LENGTH = 63


class EntityMetadata(ValueObject):
    name: str
    title: str
    description: str | None = None
    labels: dict[str, str] | None = None
    tags: list[str] | None = None
    annotations: dict[str, str] = {}

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"name": self.name, "title": self.title}
        if self.description is not None:
            out["description"] = self.description
        if self.labels is not None:
            out["labels"] = dict(self.labels)
        if self.tags is not None:
            out["tags"] = list(self.tags)
        out["annotations"] = dict(self.annotations)
        return out


class TemplateSpec(ValueObject):
    type: str
    parameters: list[ParameterGroup]
    steps: list[PipelineStep]
    links: list[OutputLink]

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type,
            "parameters": [p.to_dict() for p in self.parameters],
            "steps": [s.to_dict() for s in self.steps],
            "output": {"links": [link.to_dict() for link in self.links]},
        }


class ApiSpec(ValueObject):
    type: str = "openapi"
    lifecycle: str = "production"
    owner: str = "kubernetes-auto-ingested"
    system: str = "kubernets-auto-ingested"
    definition: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type,
            "lifecycle": self.lifecycle,
            "owner": self.owner,
            "system": self.system,
            "definition": self.definition,
        }


class TemplateEntity(ValueObject):
    api_version: str = TEMPLATE_API_VERSION
    kind: Literal["Template"] = "Template"
    metadata: EntityMetadata
    spec: TemplateSpec

    @property
    def name(self) -> str:
        return self.metadata.name

    def to_dict(self) -> dict[str, Any]:
        return {
            "apiVersion": self.api_version,
            "kind": self.kind,
            "metadata": self.metadata.to_dict(),
            "spec": self.spec.to_dict(),
        }


class ApiEntity(ValueObject):
    api_version: str = API_API_VERSION
    kind: Literal["API"] = "API"
    metadata: EntityMetadata
    spec: ApiSpec

    @property
    def name(self) -> str:
        return self.metadata.name

    def to_dict(self) -> dict[str, Any]:
        return {
            "apiVersion": self.api_version,
            "kind": self.kind,
            "metadata": self.metadata.to_dict(),
            "spec": self.spec.to_dict(),
        }


Entity = TemplateEntity | ApiEntity
