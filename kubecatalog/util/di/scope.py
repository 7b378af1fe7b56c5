"""Custom Dishka scopes for kubecatalog."""

from dishka import BaseScope, new_scope


class Scope(BaseScope):  # type: ignore[misc]  # BaseScope is designed to be subclassed
    """kubecatalog dependency injection scopes.

    Hierarchy: APP -> RUN

    - APP: Process lifetime (configuration, discovery backend)
    - RUN: One transform pass
    """

    APP = new_scope("APP")
    RUN = new_scope("RUN")
