from kubecatalog.domain.catalog.model.entity import (
    MAX_NAME_LENGTH,
    ApiEntity,
    ApiSpec,
    Entity,
    EntityMetadata,
    TemplateEntity,
    TemplateSpec,
)

__all__ = [
    "MAX_NAME_LENGTH",
    "ApiEntity",
    "ApiSpec",
    "Entity",
    "EntityMetadata",
    "TemplateEntity",
    "TemplateSpec",
]
