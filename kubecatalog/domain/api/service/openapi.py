"""OpenAPI 3.0 documents for one served version of an XRD or CRD."""

from typing import Any

from kubecatalog.domain.resource.model import ResourceDescriptor, Scope, VersionDescriptor
from kubecatalog.domain.resource.service import classifier
from kubecatalog.domain.shared.service import Service

OPENAPI_VERSION = "3.0.0"
RESOURCE_REF = "#/components/schemas/Resource"

CLUSTER_TAG = "Cluster Scoped Operations"
NAMESPACE_TAG = "Namespace Scoped Operations"
OBJECT_TAG = "Specific Object Scoped Operations"


def _path_param(name: str) -> dict[str, Any]:
    return {"name": name, "in": "path", "required": True, "schema": {"type": "string"}}


def _list_response(description: str) -> dict[str, Any]:
    return {
        "200": {
            "description": description,
            "content": {
                "application/json": {
                    "schema": {"type": "array", "items": {"$ref": RESOURCE_REF}},
                },
            },
        },
    }


def _resource_body() -> dict[str, Any]:
    return {
        "required": True,
        "content": {
            "application/json": {"schema": {"type": "object", "$ref": RESOURCE_REF}},
        },
    }


class OpenAPIDocAssembler(Service):
    """Builds list/get/create/update/delete paths at the resource's scope.

    Operation ids (``list{plural}AllNamespaces``, ``list{plural}``,
    ``get{Kind}``, ``createResource``, ``updateResource``,
    ``deleteResource``) are consumed by API clients and must stay stable.
    """

    def build(self, descriptor: ResourceDescriptor, version: VersionDescriptor) -> dict[str, Any]:
        classification = classifier.classify(descriptor)
        plural = classification.resource_plural
        kind = classification.resource_kind

        if descriptor.is_xrd:
            namespaced = classification.include_namespace
        else:
            namespaced = classification.scope == Scope.NAMESPACED

        if namespaced:
            paths = self.namespaced_paths(descriptor.group, version.name, plural, kind)
        else:
            paths = self.cluster_paths(descriptor.group, version.name, plural, kind)

        return {
            "openapi": OPENAPI_VERSION,
            "info": {"title": f"{plural}.{descriptor.group}", "version": version.name},
            "servers": [{"url": c.url, "description": c.name} for c in descriptor.clusters],
            "tags": [
                {"name": CLUSTER_TAG, "description": "Operations on the cluster level"},
                {"name": NAMESPACE_TAG, "description": "Operations on the namespace level"},
                {"name": OBJECT_TAG, "description": "Operations on a specific resource"},
            ],
            "paths": paths,
            "components": {
                "schemas": {
                    "Resource": {
                        "type": "object",
                        "properties": self.schema_properties(descriptor, version),
                    },
                },
                "securitySchemes": {
                    "bearerHttpAuthentication": {
                        "description": "Bearer token using a JWT",
                        "type": "http",
                        "scheme": "bearer",
                        "bearerFormat": "JWT",
                    },
                },
            },
            "security": [{"bearerHttpAuthentication": []}],
        }

    def schema_properties(
        self, descriptor: ResourceDescriptor, version: VersionDescriptor
    ) -> dict[str, Any]:
        """Properties of the Resource schema.

        For XRDs the CRD Crossplane generated wins: the version with the same
        name, else its storage version, else its first version.
        """
        generated = descriptor.generated_crd
        if generated is not None:
            candidate = (
                generated.version(version.name)
                or next(iter(generated.storage_versions), None)
                or generated.versions[0]
            )
            properties = candidate.schema_properties()
            if properties:
                return properties
        return version.schema_properties()

    def namespaced_paths(self, group: str, version: str, plural: str, kind: str) -> dict[str, Any]:
        base = f"/apis/{group}/{version}"
        by_name = [_path_param("namespace"), _path_param("name")]
        return {
            f"{base}/{plural}": {
                "get": {
                    "tags": [CLUSTER_TAG],
                    "summary": f"List all {plural} in all namespaces",
                    "operationId": f"list{plural}AllNamespaces",
                    "responses": _list_response(f"List of {plural} in all namespaces"),
                },
            },
            f"{base}/namespaces/{{namespace}}/{plural}": {
                "get": {
                    "tags": [NAMESPACE_TAG],
                    "summary": f"List all {plural} in a namespace",
                    "operationId": f"list{plural}",
                    "parameters": [_path_param("namespace")],
                    "responses": _list_response(f"List of {plural}"),
                },
                "post": {
                    "tags": [NAMESPACE_TAG],
                    "summary": "Create a resource",
                    "operationId": "createResource",
                    "parameters": [_path_param("namespace")],
                    "requestBody": _resource_body(),
                    "responses": {"201": {"description": "Resource created"}},
                },
            },
            f"{base}/namespaces/{{namespace}}/{plural}/{{name}}": self._object_operations(
                kind, by_name
            ),
        }

    def cluster_paths(self, group: str, version: str, plural: str, kind: str) -> dict[str, Any]:
        base = f"/apis/{group}/{version}"
        return {
            f"{base}/{plural}": {
                "get": {
                    "tags": [CLUSTER_TAG],
                    "summary": f"List all {plural} in all namespaces",
                    "operationId": f"list{plural}AllNamespaces",
                    "responses": _list_response(f"List of {plural} in all namespaces"),
                },
                "post": {
                    "tags": [CLUSTER_TAG],
                    "summary": "Create a resource",
                    "operationId": "createResource",
                    "parameters": [],
                    "requestBody": _resource_body(),
                    "responses": {"201": {"description": "Resource created"}},
                },
            },
            f"{base}/{plural}/{{name}}": self._object_operations(kind, [_path_param("name")]),
        }

    def _object_operations(self, kind: str, parameters: list[dict[str, Any]]) -> dict[str, Any]:
        return {
            "get": {
                "tags": [OBJECT_TAG],
                "summary": f"Get a {kind}",
                "operationId": f"get{kind}",
                "parameters": [dict(p) for p in parameters],
                "responses": {
                    "200": {
                        "description": "Resource details",
                        "content": {
                            "application/json": {"schema": {"type": "object", "$ref": RESOURCE_REF}},
                        },
                    },
                },
            },
            "put": {
                "tags": [OBJECT_TAG],
                "summary": "Update a resource",
                "operationId": "updateResource",
                "parameters": [dict(p) for p in parameters],
                "requestBody": _resource_body(),
                "responses": {"200": {"description": "Resource updated"}},
            },
            "delete": {
                "tags": [OBJECT_TAG],
                "summary": "Delete a resource",
                "operationId": "deleteResource",
                "parameters": [dict(p) for p in parameters],
                "responses": {"200": {"description": "Resource deleted"}},
            },
        }
