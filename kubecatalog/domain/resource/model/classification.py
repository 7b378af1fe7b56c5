from kubecatalog.domain.resource.model.value import CrossplaneVersion
from kubecatalog.domain.shared.model.value import ValueObject


class ScopeClassification(ValueObject):
    """Derived scope facts for one descriptor. Recomputed on every call, never stored."""

    is_v2: bool
    scope: str
    uses_claims: bool
    is_direct_xr: bool
    include_namespace: bool
    resource_kind: str
    resource_plural: str

    @property
    def crossplane_version(self) -> str:
        return (CrossplaneVersion.V2 if self.is_v2 else CrossplaneVersion.V1).value
