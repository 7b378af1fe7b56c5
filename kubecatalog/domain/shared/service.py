from dataclasses import dataclass
from typing import dataclass_transform


@dataclass_transform(kw_only_default=True)
class _ServiceMeta(type):
    """Turns every Service subclass into a keyword-only dataclass."""

    def __new__(mcs, name: str, bases: tuple, namespace: dict):
        cls = super().__new__(mcs, name, bases, namespace)
        if any(isinstance(b, mcs) for b in bases):
            return dataclass(cls, kw_only=True)
        return cls


class Service(metaclass=_ServiceMeta):
    """Base class for domain services.

    Collaborators and resolved options are declared as annotated class
    attributes and passed by keyword at construction time.
    """
