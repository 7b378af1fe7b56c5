"""Discovery backend lookup via entry points."""

from __future__ import annotations

import logging
from importlib.metadata import entry_points
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ValidationError

from kubecatalog.domain.shared.error import ConfigurationError
from kubecatalog.sdk.discovery.discovery import ResourceDiscovery

if TYPE_CHECKING:
    from kubecatalog.config import DiscoveryConfig

logger = logging.getLogger(__name__)

ENTRY_POINT_GROUP = "kubecatalog.discovery"


def discover_backends() -> dict[str, type[ResourceDiscovery]]:
    """Discover available discovery backends via entry points.

    Returns:
        Dict mapping backend names to their classes.

    Example pyproject.toml entry:
        [project.entry-points."kubecatalog.discovery"]
        file = "kubecatalog.infrastructure.discovery.file:FileDiscovery"
    """
    backends: dict[str, type[ResourceDiscovery]] = {}

    for ep in entry_points(group=ENTRY_POINT_GROUP):
        try:
            cls = ep.load()
            _validate_backend_class(cls, ep.name)
            backends[ep.name] = cls
            logger.debug("Discovered discovery backend: %s -> %s", ep.name, cls.__name__)
        except Exception as e:
            logger.warning("Failed to load discovery backend '%s': %s", ep.name, e)

    return backends


def _validate_backend_class(cls: Any, name: str) -> None:
    """Raises TypeError if a class doesn't conform to the ResourceDiscovery protocol."""
    if not isinstance(cls, type):
        raise TypeError(f"Discovery backend {name} must be a class, got {type(cls).__name__}")
    if not hasattr(cls, "name"):
        raise TypeError(f"Discovery backend {name} missing 'name' class attribute")
    if not hasattr(cls, "config_class"):
        raise TypeError(f"Discovery backend {name} missing 'config_class' class attribute")
    if not issubclass(cls.config_class, BaseModel):
        raise TypeError(f"Discovery backend {name} config_class must be a Pydantic BaseModel")


class DiscoveryConfigError(ConfigurationError):
    """Raised when a discovery backend's configuration fails validation."""

    def __init__(self, backend: str, validation_error: ValidationError) -> None:
        self.backend = backend
        self.validation_error = validation_error
        super().__init__(self._format_message(), code="INVALID_DISCOVERY_CONFIG")

    def _format_message(self) -> str:
        lines = [f"Invalid config for discovery backend '{self.backend}':"]
        for err in self.validation_error.errors():
            loc = ".".join(str(x) for x in err.get("loc", []))
            msg = err.get("msg", "Unknown error")
            lines.append(f"  - {loc}: {msg}")
        return "\n".join(lines)


def create_discovery(
    config: DiscoveryConfig,
    available: dict[str, type[ResourceDiscovery]] | None = None,
) -> ResourceDiscovery:
    """Instantiate the configured backend with validated configuration.

    Raises:
        ConfigurationError: If the backend is unknown.
        DiscoveryConfigError: If its configuration doesn't match the schema.
    """
    if available is None:
        available = discover_backends()

    backend_cls = available.get(config.backend)
    if backend_cls is None:
        names = ", ".join(sorted(available)) or "(none)"
        raise ConfigurationError(
            f"Unknown discovery backend '{config.backend}'. Available: {names}"
        )

    try:
        backend_config = backend_cls.config_class.model_validate(config.config)
    except ValidationError as e:
        raise DiscoveryConfigError(config.backend, e) from e

    return backend_cls(backend_config)
