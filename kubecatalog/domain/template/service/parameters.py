"""Assembly of the ordered scaffolder form (``spec.parameters``).

Group order is fixed: resource metadata, resource spec, Crossplane
settings (XRDs only), creation settings. Empty groups are dropped without
disturbing the order of the rest.
"""

from typing import Any

from kubecatalog.config import PublishPhaseConfig
from kubecatalog.domain.resource.model import ResourceDescriptor, VersionDescriptor
from kubecatalog.domain.resource.service import classifier
from kubecatalog.domain.shared.model.value import ValueObject
from kubecatalog.domain.shared.service import Service
from kubecatalog.domain.template.model import ParameterGroup
from kubecatalog.domain.template.model.publish import allowed_hosts
from kubecatalog.domain.template.service.schema_walker import SchemaWalker

DNS_LABEL_PATTERN = "^[a-z0-9]([-a-z0-9]*[a-z0-9])?$"
DNS_LABEL_MAX_LENGTH = 63

MANIFEST_LAYOUT_HELP = (
    "Choose how the manifest should be generated in the repo.\n"
    "* Cluster-scoped - a manifest is created for each selected cluster under the root "
    "directory of the clusters name\n"
    "* namespace-scoped - a manifest is created for the resource under the root directory "
    "with the namespace name\n"
    "* custom - a manifest is created under the specified base path"
)


class ParameterNames(ValueObject):
    """Form field names the generated steps refer back to."""

    name: str
    namespace: str
    owner: str = "owner"


XRD_PARAMETER_NAMES = ParameterNames(name="xrName", namespace="xrNamespace")
CRD_PARAMETER_NAMES = ParameterNames(name="name", namespace="namespace")


class ParameterAssembler(Service):
    publish: PublishPhaseConfig
    convert_defaults_to_placeholders: bool = False

    def build(self, descriptor: ResourceDescriptor, version: VersionDescriptor) -> list[ParameterGroup]:
        classification = classifier.classify(descriptor)
        groups: list[ParameterGroup | None] = []

        if descriptor.is_xrd:
            groups.append(
                self.metadata_group(
                    XRD_PARAMETER_NAMES,
                    include_namespace=classification.include_namespace,
                    owner_required=True,
                )
            )
            groups.append(self.spec_group(version))
            if classification.uses_claims:
                groups.append(self.claim_settings_group(descriptor))
            else:
                groups.append(self.direct_xr_settings_group(descriptor))
        else:
            groups.append(
                self.metadata_group(
                    CRD_PARAMETER_NAMES,
                    include_namespace=classification.include_namespace,
                    owner_required=False,
                )
            )
            groups.append(self.spec_group(version))

        groups.append(self.creation_settings_group(descriptor))
        return [g for g in groups if g is not None and not g.is_empty]

    def metadata_group(
        self, names: ParameterNames, include_namespace: bool, owner_required: bool
    ) -> ParameterGroup:
        properties: dict[str, Any] = {
            names.name: {
                "title": "Name",
                "description": "The name of the resource",
                "pattern": DNS_LABEL_PATTERN,
                "maxLength": DNS_LABEL_MAX_LENGTH,
                "type": "string",
            },
        }
        required = [names.name]
        if include_namespace:
            properties[names.namespace] = {
                "title": "Namespace",
                "description": "The namespace in which to create the resource",
                "pattern": DNS_LABEL_PATTERN,
                "maxLength": DNS_LABEL_MAX_LENGTH,
                "type": "string",
            }
            required.append(names.namespace)
        properties[names.owner] = {
            "title": "Owner",
            "description": "The owner of the resource",
            "type": "string",
            "ui:field": "OwnerPicker",
            "ui:options": {"catalogFilter": {"kind": "Group"}},
        }
        if owner_required:
            required.append(names.owner)

        return ParameterGroup(title="Resource Metadata", required=required, properties=properties)

    def spec_group(self, version: VersionDescriptor) -> ParameterGroup | None:
        """Fields derived from the version's ``spec`` schema; None when there are none."""
        walker = SchemaWalker(convert_defaults_to_placeholders=self.convert_defaults_to_placeholders)
        spec_schema = version.spec_schema
        properties = walker.walk(spec_schema)
        if not properties:
            return None
        required = walker.required(spec_schema)
        return ParameterGroup(
            title="Resource Spec",
            required=required or None,
            properties=properties,
        )

    def claim_settings_group(self, descriptor: ResourceDescriptor) -> ParameterGroup:
        properties: dict[str, Any] = {
            "writeConnectionSecretToRef": {
                "title": "Crossplane Configuration Details",
                "properties": {
                    "name": {"title": "Connection Secret Name", "type": "string"},
                },
                "type": "object",
            },
            "compositeDeletePolicy": {
                "title": "Composite Delete Policy",
                "default": "Background",
                "enum": ["Background", "Foreground"],
                "type": "string",
            },
            "compositionUpdatePolicy": {
                "title": "Composition Update Policy",
                "enum": ["Automatic", "Manual"],
                "type": "string",
            },
            "compositionSelectionStrategy": self._selection_strategy(descriptor),
        }
        return ParameterGroup(
            title="Crossplane Settings",
            properties=properties,
            dependencies=self._composition_dependencies(descriptor),
        )

    def direct_xr_settings_group(self, descriptor: ResourceDescriptor) -> ParameterGroup:
        return ParameterGroup(
            title="Crossplane Settings",
            properties={"compositionSelectionStrategy": self._selection_strategy(descriptor)},
            dependencies=self._composition_dependencies(descriptor),
        )

    def _selection_strategy(self, descriptor: ResourceDescriptor) -> dict[str, Any]:
        strategies = ["runtime"]
        if descriptor.compositions:
            strategies.append("direct-reference")
        strategies.append("label-selector")
        return {
            "title": "Composition Selection Strategy",
            "description": "How the composition should be selected.",
            "enum": strategies,
            "default": "runtime",
            "type": "string",
        }

    def _composition_dependencies(self, descriptor: ResourceDescriptor) -> dict[str, Any]:
        branches: list[dict[str, Any]] = [
            {"properties": {"compositionSelectionStrategy": {"enum": ["runtime"]}}},
        ]
        if descriptor.compositions:
            composition_name: dict[str, Any] = {
                "type": "string",
                "title": "Select A Composition By Name",
                "enum": list(descriptor.compositions),
            }
            if descriptor.default_composition:
                composition_name["default"] = descriptor.default_composition
            branches.append(
                {
                    "properties": {
                        "compositionSelectionStrategy": {"enum": ["direct-reference"]},
                        "compositionRef": {
                            "title": "Composition Reference",
                            "properties": {"name": composition_name},
                            "required": ["name"],
                            "type": "object",
                        },
                    },
                }
            )
        branches.append(
            {
                "properties": {
                    "compositionSelectionStrategy": {"enum": ["label-selector"]},
                    "compositionSelector": {
                        "title": "Composition Selector",
                        "properties": {
                            "matchLabels": {
                                "title": "Match Labels",
                                "additionalProperties": {"type": "string"},
                                "type": "object",
                            },
                        },
                        "required": ["matchLabels"],
                        "type": "object",
                    },
                },
            }
        )
        return {"compositionSelectionStrategy": {"oneOf": branches}}

    def creation_settings_group(self, descriptor: ResourceDescriptor) -> ParameterGroup:
        git_properties: dict[str, Any] = {"pushToGit": {"enum": [True]}}
        if self.publish.allow_repo_selection:
            git_properties["repoUrl"] = {
                "type": "string",
                "description": "Name of repository",
                "ui:field": "RepoUrlPicker",
                "ui:options": {
                    "allowedHosts": allowed_hosts(self.publish.target, self.publish.allowed_targets),
                },
            }
            git_properties["targetBranch"] = {
                "type": "string",
                "description": "Target Branch for the PR",
                "default": self.publish.git.target_branch or "main",
            }
        git_properties["manifestLayout"] = {
            "type": "string",
            "description": "Layout of the manifest",
            "default": "cluster-scoped",
            "ui:help": MANIFEST_LAYOUT_HELP,
            "enum": ["cluster-scoped", "namespace-scoped", "custom"],
        }

        return ParameterGroup(
            title="Creation Settings",
            properties={
                "pushToGit": {
                    "title": "Push Manifest to GitOps Repository",
                    "type": "boolean",
                    "default": True,
                },
            },
            dependencies={
                "pushToGit": {
                    "oneOf": [
                        {"properties": {"pushToGit": {"enum": [False]}}},
                        {
                            "properties": git_properties,
                            "dependencies": self._manifest_layout_dependencies(descriptor),
                        },
                    ],
                },
            },
        )

    def _manifest_layout_dependencies(self, descriptor: ResourceDescriptor) -> dict[str, Any]:
        return {
            "manifestLayout": {
                "oneOf": [
                    {
                        "properties": {
                            "manifestLayout": {"enum": ["cluster-scoped"]},
                            "clusters": {
                                "title": "Target Clusters",
                                "description": "The target clusters to apply the resource to",
                                "type": "array",
                                "minItems": 1,
                                "items": {"enum": descriptor.cluster_names, "type": "string"},
                                "uniqueItems": True,
                                "ui:widget": "checkboxes",
                            },
                        },
                        "required": ["clusters"],
                    },
                    {
                        "properties": {
                            "manifestLayout": {"enum": ["custom"]},
                            "basePath": {
                                "type": "string",
                                "description": "Base path in GitOps repository to push the manifest to",
                            },
                        },
                        "required": ["basePath"],
                    },
                    {"properties": {"manifestLayout": {"enum": ["namespace-scoped"]}}},
                ],
            },
        }
