"""Scope classification of XRDs and CRDs.

Total functions: a missing or unknown scope falls back to a default instead
of failing, and every caller relies on that.

Crossplane XRDs:
    v1 XRDs never declare ``spec.scope``; they are cluster scoped and always
    accessed through a namespaced claim. v2 XRDs declare one of ``Cluster``,
    ``Namespaced`` (both created directly, no claim) or ``LegacyCluster``
    (v1-style claim access).

CRDs:
    Classified from ``spec.scope`` alone (default ``Cluster``); they never use
    claims.
"""

from kubecatalog.domain.resource.model import ResourceDescriptor, Scope, ScopeClassification

_DIRECT_SCOPES = (Scope.CLUSTER, Scope.NAMESPACED)


def is_v2(descriptor: ResourceDescriptor) -> bool:
    return descriptor.declared_scope is not None


def scope(descriptor: ResourceDescriptor) -> str:
    return descriptor.declared_scope or Scope.CLUSTER.value


def is_direct_xr(descriptor: ResourceDescriptor) -> bool:
    return is_v2(descriptor) and scope(descriptor) in _DIRECT_SCOPES


def uses_claims(descriptor: ResourceDescriptor) -> bool:
    return not is_direct_xr(descriptor)


def include_namespace(descriptor: ResourceDescriptor) -> bool:
    return not is_v2(descriptor) or scope(descriptor) in (Scope.NAMESPACED, Scope.LEGACY_CLUSTER)


def resource_kind(descriptor: ResourceDescriptor) -> str:
    """Kind users create: the claim kind when claims are used, else the XR kind."""
    if uses_claims(descriptor):
        return descriptor.claim_kind or descriptor.kind
    return descriptor.kind


def resource_plural(descriptor: ResourceDescriptor) -> str:
    if uses_claims(descriptor):
        return descriptor.claim_plural or descriptor.plural
    return descriptor.plural


def crd_scope(descriptor: ResourceDescriptor) -> str:
    return descriptor.declared_scope or Scope.CLUSTER.value


def crd_include_namespace(descriptor: ResourceDescriptor) -> bool:
    return crd_scope(descriptor) == Scope.NAMESPACED


def classify(descriptor: ResourceDescriptor) -> ScopeClassification:
    """Classify a descriptor, dispatching on XRD versus CRD."""
    if descriptor.is_crd:
        return ScopeClassification(
            is_v2=False,
            scope=crd_scope(descriptor),
            uses_claims=False,
            is_direct_xr=False,
            include_namespace=crd_include_namespace(descriptor),
            resource_kind=descriptor.kind,
            resource_plural=descriptor.plural,
        )
    return ScopeClassification(
        is_v2=is_v2(descriptor),
        scope=scope(descriptor),
        uses_claims=uses_claims(descriptor),
        is_direct_xr=is_direct_xr(descriptor),
        include_namespace=include_namespace(descriptor),
        resource_kind=resource_kind(descriptor),
        resource_plural=resource_plural(descriptor),
    )
