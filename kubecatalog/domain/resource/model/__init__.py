from kubecatalog.domain.resource.model.classification import ScopeClassification
from kubecatalog.domain.resource.model.descriptor import (
    CompositeType,
    ResourceDescriptor,
    VersionDescriptor,
)
from kubecatalog.domain.resource.model.schema import (
    ArraySchema,
    ObjectSchema,
    PreserveUnknownSchema,
    ScalarSchema,
    SchemaNode,
)
from kubecatalog.domain.resource.model.value import (
    CrossplaneVersion,
    ResourceType,
    Scope,
)

__all__ = [
    "ArraySchema",
    "CompositeType",
    "CrossplaneVersion",
    "ObjectSchema",
    "PreserveUnknownSchema",
    "ResourceDescriptor",
    "ResourceType",
    "ScalarSchema",
    "SchemaNode",
    "Scope",
    "ScopeClassification",
    "VersionDescriptor",
]
