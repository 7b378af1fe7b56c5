from kubecatalog.infrastructure.discovery.registry import (
    DiscoveryConfigError,
    create_discovery,
    discover_backends,
)

__all__ = ["DiscoveryConfigError", "create_discovery", "discover_backends"]
