"""Error hierarchy for kubecatalog.

Error layers:
- KubeCatalogError: Base class for all kubecatalog errors
- DomainError: Malformed input resources and entities that cannot be emitted.
  Caught per resource by the transform service and turned into warnings.
- InfrastructureError: Discovery and configuration failures. These surface
  to the caller (the CLI prints them and exits non-zero).
"""


class KubeCatalogError(Exception):
    """Base class for all kubecatalog errors."""

    def __init__(self, message: str, code: str | None = None) -> None:
        self.message = message
        self.code = code or self.__class__.__name__
        super().__init__(message)


# =============================================================================
# Domain Errors (per-resource, recoverable)
# =============================================================================


class DomainError(KubeCatalogError):
    """Base class for domain errors."""


class InvalidResourceError(DomainError):
    """A discovered manifest is missing fields required to build entities."""

    def __init__(self, message: str, resource: str | None = None) -> None:
        super().__init__(message, code="INVALID_RESOURCE")
        self.resource = resource


class InvalidSchemaError(DomainError):
    """An OpenAPI schema fragment has the wrong shape."""

    def __init__(self, message: str, path: str | None = None) -> None:
        super().__init__(message, code="INVALID_SCHEMA")
        self.path = path


class EntityNameTooLongError(DomainError):
    """A generated entity name exceeds the catalog name limit."""

    def __init__(self, name: str, kind: str, limit: int = 63) -> None:
        super().__init__(
            f"The entity {name} of type {kind} can't be ingested as its auto generated "
            f"name would be over {limit} characters long. Please consider changing "
            "the naming conventions via the entity_name_prefix setting or shorten "
            "the names in the relevant sources of info to allow this resource to "
            "be ingested.",
            code="NAME_TOO_LONG",
        )
        self.name = name
        self.kind = kind
        self.limit = limit


# =============================================================================
# Infrastructure Errors (fatal to the caller)
# =============================================================================


class InfrastructureError(KubeCatalogError):
    """Base class for infrastructure/system errors."""


class ConfigurationError(InfrastructureError):
    """System misconfiguration detected."""


class DiscoveryError(InfrastructureError):
    """A discovery backend failed to produce resources."""
