"""Global test fixtures."""

import os
from typing import Any

import pytest

from kubecatalog.config import Config
from kubecatalog.domain.resource.service.parser import parse_manifest

# Keep a developer's own config file out of the test run
os.environ.pop("KUBECATALOG_CONFIG_FILE", None)
os.environ.pop("KUBECATALOG_LOG_FILE", None)


def _make_version(
    name: str = "v1alpha1",
    spec_properties: dict[str, Any] | None = None,
    required: list[str] | None = None,
    served: bool | None = True,
    storage: bool | None = None,
    with_schema: bool = True,
    extra_properties: dict[str, Any] | None = None,
) -> dict[str, Any]:
    version: dict[str, Any] = {"name": name}
    if served is not None:
        version["served"] = served
    if storage is not None:
        version["storage"] = storage
    if with_schema:
        spec: dict[str, Any] = {
            "type": "object",
            "properties": spec_properties if spec_properties is not None else {"size": {"type": "integer"}},
        }
        if required:
            spec["required"] = required
        properties: dict[str, Any] = {"spec": spec}
        if extra_properties:
            properties.update(extra_properties)
        version["schema"] = {"openAPIV3Schema": {"type": "object", "properties": properties}}
    return version


def _make_xrd(
    name: str = "xdatabases.example.org",
    group: str = "example.org",
    kind: str = "XDatabase",
    plural: str = "xdatabases",
    claim_kind: str | None = "Database",
    claim_plural: str | None = "databases",
    scope: str | None = None,
    versions: list[dict[str, Any]] | None = None,
    annotations: dict[str, str] | None = None,
    api_version: str = "apiextensions.crossplane.io/v1",
    default_composition: str | None = None,
) -> dict[str, Any]:
    spec: dict[str, Any] = {
        "group": group,
        "names": {"kind": kind, "plural": plural},
    }
    if claim_kind:
        spec["claimNames"] = {"kind": claim_kind, "plural": claim_plural}
    if scope is not None:
        spec["scope"] = scope
    if default_composition:
        spec["defaultCompositionRef"] = {"name": default_composition}
    spec["versions"] = versions if versions is not None else [_make_version()]

    metadata: dict[str, Any] = {"name": name}
    if annotations:
        metadata["annotations"] = annotations
    return {
        "apiVersion": api_version,
        "kind": "CompositeResourceDefinition",
        "metadata": metadata,
        "spec": spec,
    }


def _make_crd(
    name: str = "certificates.cert-manager.io",
    group: str = "cert-manager.io",
    kind: str = "Certificate",
    plural: str = "certificates",
    singular: str = "certificate",
    scope: str | None = "Namespaced",
    versions: list[dict[str, Any]] | None = None,
    labels: dict[str, str] | None = None,
) -> dict[str, Any]:
    spec: dict[str, Any] = {
        "group": group,
        "names": {"kind": kind, "plural": plural, "singular": singular},
    }
    if scope is not None:
        spec["scope"] = scope
    spec["versions"] = (
        versions if versions is not None else [_make_version(name="v1", storage=True)]
    )
    metadata: dict[str, Any] = {"name": name}
    if labels:
        metadata["labels"] = labels
    return {
        "apiVersion": "apiextensions.k8s.io/v1",
        "kind": "CustomResourceDefinition",
        "metadata": metadata,
        "spec": spec,
    }


@pytest.fixture
def make_version():
    return _make_version


@pytest.fixture
def make_xrd():
    return _make_xrd


@pytest.fixture
def make_crd():
    return _make_crd


@pytest.fixture
def descriptor_of():
    """Parse a raw manifest into a ResourceDescriptor."""
    return parse_manifest


@pytest.fixture
def config() -> Config:
    return Config(
        generic_crd_templates={"crds": ["certificates.cert-manager.io"]},
    )
