"""Discovery protocol for pluggable resource discovery backends."""

from typing import ClassVar, Protocol

from pydantic import BaseModel

from kubecatalog.sdk.discovery.record import DiscoveredResource


class ResourceDiscovery(Protocol):
    """Protocol for pluggable discovery backends.

    Implement this protocol to feed XRDs and CRDs from a new place (a live
    cluster, a git checkout, an archive of manifests). Backends own all
    fetching, authentication, pagination and retries.

    Class attributes:
        name: Unique identifier for this backend (e.g., 'file').
            Must match the entry point name.
        config_class: Pydantic model for validating configuration.
    """

    name: ClassVar[str]
    config_class: ClassVar[type[BaseModel]]

    def __init__(self, config: BaseModel) -> None:
        """Initialize the backend with validated configuration."""
        ...

    def discover(self) -> list[DiscoveredResource]:
        """Return every XRD and CRD the backend can see.

        Resources seen on several clusters are returned once, with every
        cluster listed in ``clusters``.

        Raises:
            DiscoveryError: If the source cannot be read.
        """
        ...
