from kubecatalog.domain.resource.model.schema import ObjectSchema, SchemaNode
from kubecatalog.domain.resource.model.value import ResourceType
from kubecatalog.domain.shared.model.value import ValueObject
from kubecatalog.sdk.discovery.record import ClusterRef


class CompositeType(ValueObject):
    """The composite resource type an XRD defines; compositions reference it."""

    api_version: str
    kind: str


class VersionDescriptor(ValueObject):
    """One entry of ``spec.versions``."""

    name: str
    served: bool = True
    storage: bool = False
    openapi_schema: SchemaNode | None = None  # schema.openAPIV3Schema

    @property
    def root(self) -> ObjectSchema | None:
        return self.openapi_schema if isinstance(self.openapi_schema, ObjectSchema) else None

    @property
    def spec_schema(self) -> ObjectSchema | None:
        """The ``spec`` property of the root schema, when it is an object."""
        if self.root is None:
            return None
        spec = self.root.property("spec")
        return spec if isinstance(spec, ObjectSchema) else None

    def schema_properties(self) -> dict:
        """Top-level schema properties rendered as plain data ({} when absent)."""
        if self.root is None:
            return {}
        return {name: node.to_dict() for name, node in self.root.properties.items()}

    @property
    def extra_steps(self) -> object | None:
        """Default of the top-level ``steps`` property (a YAML list of extra steps)."""
        if self.root is None:
            return None
        steps = self.root.property("steps")
        return steps.keyword("default") if steps is not None else None


class ResourceDescriptor(ValueObject):
    """A validated XRD or CRD.

    ``clusters`` lists every cluster the resource was seen on; the first one
    is the origin cluster.
    """

    resource_type: ResourceType
    api_version: str
    name: str
    group: str
    kind: str
    plural: str
    singular: str
    claim_kind: str | None = None
    claim_plural: str | None = None
    declared_scope: str | None = None  # spec.scope exactly as written, None when absent
    versions: tuple[VersionDescriptor, ...]
    clusters: tuple[ClusterRef, ...]
    labels: dict[str, str] = {}
    annotations: dict[str, str] = {}
    compositions: tuple[str, ...] = ()
    default_composition: str | None = None
    generated_crd: "ResourceDescriptor | None" = None

    @property
    def is_xrd(self) -> bool:
        return self.resource_type == ResourceType.XRD

    @property
    def is_crd(self) -> bool:
        return self.resource_type == ResourceType.CRD

    @property
    def cluster_name(self) -> str:
        return self.clusters[0].name

    @property
    def cluster_names(self) -> list[str]:
        return [cluster.name for cluster in self.clusters]

    @property
    def served_versions(self) -> list[VersionDescriptor]:
        return [v for v in self.versions if v.served]

    @property
    def storage_versions(self) -> list[VersionDescriptor]:
        return [v for v in self.versions if v.storage]

    def version(self, name: str) -> VersionDescriptor | None:
        return next((v for v in self.versions if v.name == name), None)


ResourceDescriptor.model_rebuild()
