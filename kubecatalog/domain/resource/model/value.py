from enum import StrEnum


class ResourceType(StrEnum):
    XRD = "xrd"
    CRD = "crd"


class Scope(StrEnum):
    CLUSTER = "Cluster"
    NAMESPACED = "Namespaced"
    LEGACY_CLUSTER = "LegacyCluster"


class CrossplaneVersion(StrEnum):
    V1 = "v1"
    V2 = "v2"


XRD_API_GROUP = "apiextensions.crossplane.io"
CRD_API_GROUP = "apiextensions.k8s.io"
XRD_KIND = "CompositeResourceDefinition"
CRD_KIND = "CustomResourceDefinition"
