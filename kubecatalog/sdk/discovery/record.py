"""Records handed over by discovery backends."""

from typing import Any

from pydantic import BaseModel, Field


class ClusterRef(BaseModel, frozen=True):
    """A cluster a resource was discovered on."""

    name: str  # e.g., "prod-eu-1"
    url: str  # Cluster identifier used as the OpenAPI server URL


class DiscoveredResource(BaseModel, frozen=True):
    """A raw XRD or CRD manifest plus what discovery learned about it.

    The manifest is kept untyped here; it is validated and turned into a
    ResourceDescriptor by the transform service.
    """

    manifest: dict[str, Any]  # The CompositeResourceDefinition / CustomResourceDefinition
    clusters: list[ClusterRef] = Field(default_factory=list)
    compositions: list[str] = Field(default_factory=list)  # Composition names (XRDs only)
    generated_crd: dict[str, Any] | None = None  # CRD Crossplane generated for an XRD

    @property
    def name(self) -> str:
        metadata = self.manifest.get("metadata")
        if isinstance(metadata, dict) and metadata.get("name"):
            return str(metadata["name"])
        return "unknown"
