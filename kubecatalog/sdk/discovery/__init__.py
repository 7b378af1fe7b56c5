"""Discovery SDK - Protocols and types for pluggable resource discovery backends."""

from kubecatalog.sdk.discovery.config import DiscoveryBackendConfig
from kubecatalog.sdk.discovery.discovery import ResourceDiscovery
from kubecatalog.sdk.discovery.record import ClusterRef, DiscoveredResource

__all__ = [
    "ClusterRef",
    "DiscoveredResource",
    "DiscoveryBackendConfig",
    "ResourceDiscovery",
]
