"""Validating parse of raw XRD/CRD manifests into ResourceDescriptors.

The transform engine only ever sees the checked model built here; every
structural defect is reported as an InvalidResourceError so the caller can
skip the one resource and keep going.
"""

import logging
from typing import Any

from pydantic import ValidationError

from kubecatalog.domain.resource.model import (
    ArraySchema,
    CompositeType,
    ObjectSchema,
    PreserveUnknownSchema,
    ResourceDescriptor,
    ResourceType,
    ScalarSchema,
    SchemaNode,
    VersionDescriptor,
)
from kubecatalog.domain.resource.model.schema import PRESERVE_UNKNOWN_FIELDS
from kubecatalog.domain.resource.model.value import (
    CRD_API_GROUP,
    CRD_KIND,
    XRD_API_GROUP,
    XRD_KIND,
)
from kubecatalog.domain.shared.error import InvalidResourceError, InvalidSchemaError
from kubecatalog.sdk.discovery.record import ClusterRef, DiscoveredResource

logger = logging.getLogger(__name__)

DEFAULT_XRD_CLUSTER = "kubetopus"
DEFAULT_CRD_CLUSTER = "default"


def detect_resource_type(manifest: dict[str, Any]) -> ResourceType | None:
    """Tell XRDs from CRDs by apiVersion group or kind; None for anything else."""
    api_version = str(manifest.get("apiVersion", ""))
    kind = manifest.get("kind")
    if api_version.startswith(f"{XRD_API_GROUP}/") or kind == XRD_KIND:
        return ResourceType.XRD
    if api_version.startswith(f"{CRD_API_GROUP}/") or kind == CRD_KIND:
        return ResourceType.CRD
    return None


def parse_schema(raw: Any, path: str = "") -> SchemaNode:
    """Turn an OpenAPI v3 fragment into a SchemaNode.

    Raises:
        InvalidSchemaError: If the fragment, its properties or its required
            list have the wrong shape.
    """
    if not isinstance(raw, dict):
        raise InvalidSchemaError(
            f"Schema at '{path or '<root>'}' must be a mapping, got {type(raw).__name__}",
            path=path,
        )

    order = tuple(raw.keys())
    declared_type = raw.get("type")

    if raw.get(PRESERVE_UNKNOWN_FIELDS) is True and not declared_type:
        return PreserveUnknownSchema(keywords=dict(raw), order=order)

    if declared_type == "object" or (declared_type is None and "properties" in raw):
        raw_properties = raw.get("properties", {})
        if raw_properties is None:
            raw_properties = {}
        if not isinstance(raw_properties, dict):
            raise InvalidSchemaError(f"'properties' at '{path}' must be a mapping", path=path)
        raw_required = raw.get("required", [])
        if raw_required is None:
            raw_required = []
        if not isinstance(raw_required, list) or not all(isinstance(r, str) for r in raw_required):
            raise InvalidSchemaError(f"'required' at '{path}' must be a list of names", path=path)

        properties = {
            name: parse_schema(value, f"{path}.{name}" if path else name)
            for name, value in raw_properties.items()
        }
        keywords = {k: v for k, v in raw.items() if k not in ("properties", "required")}
        return ObjectSchema(
            keywords=keywords,
            order=order,
            properties=properties,
            required=tuple(raw_required),
        )

    if declared_type == "array" and isinstance(raw.get("items"), dict):
        keywords = {k: v for k, v in raw.items() if k != "items"}
        return ArraySchema(
            keywords=keywords,
            order=order,
            items=parse_schema(raw["items"], f"{path}[]"),
        )

    return ScalarSchema(keywords=dict(raw), order=order)


def _parse_version(raw: Any, resource: str) -> VersionDescriptor:
    if not isinstance(raw, dict):
        raise InvalidResourceError(f"Version entry of {resource} must be a mapping", resource)
    name = raw.get("name")
    if not name:
        raise InvalidResourceError(f"Version entry of {resource} has no name", resource)

    openapi_schema = None
    schema = raw.get("schema")
    if isinstance(schema, dict) and schema.get("openAPIV3Schema") is not None:
        try:
            openapi_schema = parse_schema(schema["openAPIV3Schema"])
        except InvalidSchemaError as e:
            raise InvalidResourceError(
                f"Invalid schema in version {name} of {resource}: {e.message}", resource
            ) from e

    return VersionDescriptor(
        name=str(name),
        served=raw.get("served", True) is not False,
        storage=raw.get("storage", False) is True,
        openapi_schema=openapi_schema,
    )


def _string_map(raw: Any) -> dict[str, str]:
    if not isinstance(raw, dict):
        return {}
    return {str(k): str(v) for k, v in raw.items()}


def composite_type(manifest: dict[str, Any]) -> CompositeType | None:
    """The composite type an XRD defines, preferring what Crossplane reports.

    Falls back to {group}/{first version} and spec.names.kind. Works on raw
    manifests so discovery backends can match compositions before parsing.
    """
    status = manifest.get("status")
    controllers = status.get("controllers") if isinstance(status, dict) else None
    reported = controllers.get("compositeResourceType") if isinstance(controllers, dict) else None
    if isinstance(reported, dict) and reported.get("apiVersion") and reported.get("kind"):
        return CompositeType(api_version=str(reported["apiVersion"]), kind=str(reported["kind"]))

    spec = manifest.get("spec")
    if not isinstance(spec, dict):
        return None
    names = spec.get("names")
    versions = spec.get("versions")
    if not isinstance(names, dict) or not names.get("kind") or not spec.get("group"):
        return None
    if not isinstance(versions, list) or not versions or not isinstance(versions[0], dict):
        return None
    return CompositeType(
        api_version=f"{spec['group']}/{versions[0].get('name')}",
        kind=str(names["kind"]),
    )


def parse_manifest(
    manifest: Any,
    clusters: list[ClusterRef] | None = None,
    compositions: list[str] | None = None,
    generated_crd: dict[str, Any] | None = None,
) -> ResourceDescriptor:
    """Parse one raw XRD/CRD manifest.

    Raises:
        InvalidResourceError: On any structural defect (missing metadata,
            spec, group, kind, or an empty versions list).
    """
    if not isinstance(manifest, dict):
        raise InvalidResourceError("Resource manifest must be a mapping")

    metadata = manifest.get("metadata")
    if not isinstance(metadata, dict) or not metadata.get("name"):
        raise InvalidResourceError("Resource is missing metadata.name")
    name = str(metadata["name"])

    resource_type = detect_resource_type(manifest)
    if resource_type is None:
        raise InvalidResourceError(
            f"Resource {name} is neither a CompositeResourceDefinition nor a "
            f"CustomResourceDefinition (apiVersion={manifest.get('apiVersion')})",
            name,
        )

    spec = manifest.get("spec")
    if not isinstance(spec, dict):
        raise InvalidResourceError(f"Resource {name} has no spec", name)
    if not spec.get("group"):
        raise InvalidResourceError(f"Resource {name} has no spec.group", name)
    names = spec.get("names")
    if not isinstance(names, dict) or not names.get("kind"):
        raise InvalidResourceError(f"Resource {name} has no spec.names.kind", name)

    raw_versions = spec.get("versions")
    if not isinstance(raw_versions, list) or not raw_versions:
        raise InvalidResourceError(f"Resource {name} has a missing or empty versions array", name)
    versions = tuple(_parse_version(v, name) for v in raw_versions)

    kind = str(names["kind"])
    claim_names = spec.get("claimNames") if resource_type == ResourceType.XRD else None
    claim_names = claim_names if isinstance(claim_names, dict) else {}

    if not clusters:
        default = DEFAULT_XRD_CLUSTER if resource_type == ResourceType.XRD else DEFAULT_CRD_CLUSTER
        clusters = [ClusterRef(name=default, url=default)]

    default_ref = spec.get("defaultCompositionRef") or {}
    default_ref = default_ref if isinstance(default_ref, dict) else {}
    _check_optional_string(claim_names.get("kind"), name, "spec.claimNames.kind")
    _check_optional_string(claim_names.get("plural"), name, "spec.claimNames.plural")
    _check_optional_string(default_ref.get("name"), name, "spec.defaultCompositionRef.name")

    generated = None
    if generated_crd is not None:
        try:
            generated = parse_manifest(generated_crd, clusters=clusters)
        except (InvalidResourceError, InvalidSchemaError) as e:
            # Fall back to the XRD schema
            logger.warning("Ignoring generated CRD for XRD %s: %s", name, e.message)

    try:
        return ResourceDescriptor(
            resource_type=resource_type,
            api_version=str(manifest.get("apiVersion", "")),
            name=name,
            group=str(spec["group"]),
            kind=kind,
            plural=str(names.get("plural") or f"{kind.lower()}s"),
            singular=str(names.get("singular") or kind.lower()),
            claim_kind=claim_names.get("kind"),
            claim_plural=claim_names.get("plural"),
            declared_scope=str(spec["scope"]) if spec.get("scope") else None,
            versions=versions,
            clusters=tuple(clusters),
            labels=_string_map(metadata.get("labels")),
            annotations=_string_map(metadata.get("annotations")),
            compositions=tuple(compositions or ()),
            default_composition=default_ref.get("name"),
            generated_crd=generated,
        )
    except ValidationError as e:
        raise InvalidResourceError(f"Resource {name} is invalid: {e}", name) from e


def _check_optional_string(value: Any, name: str, field: str) -> None:
    if value is not None and not isinstance(value, str):
        raise InvalidResourceError(f"Resource {name} has a non-string {field}", name)


def parse_resource(record: DiscoveredResource) -> ResourceDescriptor:
    """Parse a record handed over by a discovery backend."""
    descriptor = parse_manifest(
        record.manifest,
        clusters=record.clusters,
        compositions=record.compositions,
        generated_crd=record.generated_crd,
    )
    logger.debug(
        "Parsed %s %s (%d versions, clusters=%s)",
        descriptor.resource_type,
        descriptor.name,
        len(descriptor.versions),
        descriptor.cluster_names,
    )
    return descriptor
