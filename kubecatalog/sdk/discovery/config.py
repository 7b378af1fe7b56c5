"""Base configuration for discovery backends."""

from pydantic import BaseModel


class DiscoveryBackendConfig(BaseModel):
    """Base configuration for discovery backends.

    Extend this class for backend-specific configuration.
    """

    pass
