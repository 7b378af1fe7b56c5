"""Assembly of the ordered scaffolder pipeline (``spec.steps``).

Step ids are referenced by later steps and by output links, so they are
fixed: ``generateManifest``, ``moveNamespacedManifest``,
``moveCustomManifest`` and ``create-pull-request``.
"""

import logging
from typing import Any

import yaml
from pydantic import ValidationError

from kubecatalog.config import PublishPhaseConfig
from kubecatalog.domain.resource.model import ResourceDescriptor, VersionDescriptor
from kubecatalog.domain.resource.service import classifier
from kubecatalog.domain.shared.model.diagnostic import TransformWarning
from kubecatalog.domain.shared.service import Service
from kubecatalog.domain.template.model import PipelineStep
from kubecatalog.domain.template.model.publish import publish_action
from kubecatalog.domain.template.service.parameters import (
    CRD_PARAMETER_NAMES,
    XRD_PARAMETER_NAMES,
    ParameterNames,
)

logger = logging.getLogger(__name__)

CLAIM_TEMPLATE_ACTION = "terasky:claim-template"
RESOURCE_TEMPLATE_ACTION = "terasky:crd-template"
RENAME_ACTION = "fs:rename"

GENERATED_MANIFEST_PATH = "${{ steps.generateManifest.output.filePaths[0] }}"
TARGET_CLUSTERS = (
    "${{ parameters.clusters if parameters.manifestLayout === 'cluster-scoped' "
    "and parameters.pushToGit else ['temp'] }}"
)

# Form fields that steer the pipeline and never belong in the manifest body
_PIPELINE_PARAMS = [
    "compositionSelectionStrategy",
    "pushToGit",
    "basePath",
    "manifestLayout",
    "_editData",
    "targetBranch",
    "repoUrl",
    "clusters",
]

PLACEHOLDER_API_VERSION = "{API_VERSION}"
PLACEHOLDER_KIND = "{KIND}"


class StepAssembler(Service):
    publish: PublishPhaseConfig

    def build(
        self,
        descriptor: ResourceDescriptor,
        version: VersionDescriptor,
        warnings: list[TransformWarning] | None = None,
    ) -> list[PipelineStep]:
        """Build the steps for one served version.

        Extra steps declared by an XRD version are appended last; ones that
        cannot be read are dropped and reported through ``warnings``.
        """
        classification = classifier.classify(descriptor)
        api_version = f"{descriptor.group}/{version.name}"
        kind = classification.resource_kind
        names = XRD_PARAMETER_NAMES if descriptor.is_xrd else CRD_PARAMETER_NAMES

        if descriptor.is_xrd:
            exclude = ["owner", *_PIPELINE_PARAMS, names.name]
            action = RESOURCE_TEMPLATE_ACTION if classification.is_direct_xr else CLAIM_TEMPLATE_ACTION
        else:
            exclude = [*_PIPELINE_PARAMS, names.name]
            action = RESOURCE_TEMPLATE_ACTION
        if classification.include_namespace:
            exclude.append(names.namespace)
        if descriptor.is_crd:
            exclude.append(names.owner)

        steps = [
            self.generate_manifest(
                action=action,
                names=names,
                include_namespace=classification.include_namespace,
                include_owner=descriptor.is_xrd,
                exclude=exclude,
                api_version=api_version,
                kind=kind,
            )
        ]
        if classification.include_namespace:
            steps.append(self.move_namespaced_manifest(names.namespace))
        steps.append(self.move_custom_manifest(names.name))

        pull_request = self.create_pull_request(names.name, kind)
        if pull_request is not None:
            steps.append(pull_request)

        if descriptor.is_xrd:
            steps.extend(self.extra_steps(descriptor, version, api_version, kind, warnings))
        return steps

    def generate_manifest(
        self,
        action: str,
        names: ParameterNames,
        include_namespace: bool,
        include_owner: bool,
        exclude: list[str],
        api_version: str,
        kind: str,
    ) -> PipelineStep:
        step_input: dict[str, Any] = {
            "parameters": "${{ parameters }}",
            "nameParam": names.name,
        }
        if include_namespace:
            step_input["namespaceParam"] = names.namespace
        if include_owner:
            step_input["ownerParam"] = names.owner
        step_input["excludeParams"] = exclude
        step_input["apiVersion"] = api_version
        step_input["kind"] = kind
        step_input["clusters"] = TARGET_CLUSTERS
        step_input["removeEmptyParams"] = True

        return PipelineStep(
            id="generateManifest",
            name="Generate Kubernetes Resource Manifest",
            action=action,
            input=step_input,
        )

    def move_namespaced_manifest(self, namespace_param: str) -> PipelineStep:
        target = (
            f"./${{{{ parameters.{namespace_param} }}}}"
            "/${{ steps.generateManifest.input.kind }}"
            "/${{ steps.generateManifest.output.filePaths[0].split('/').pop() }}"
        )
        return PipelineStep(
            id="moveNamespacedManifest",
            name="Move and Rename Manifest",
            action=RENAME_ACTION,
            if_="${{ parameters.manifestLayout === 'namespace-scoped' }}",
            input={"files": [{"from": GENERATED_MANIFEST_PATH, "to": target}]},
        )

    def move_custom_manifest(self, name_param: str) -> PipelineStep:
        target = f"./${{{{ parameters.basePath }}}}/${{{{ parameters.{name_param} }}}}.yaml"
        return PipelineStep(
            id="moveCustomManifest",
            name="Move and Rename Manifest",
            action=RENAME_ACTION,
            if_="${{ parameters.manifestLayout === 'custom' }}",
            input={"files": [{"from": GENERATED_MANIFEST_PATH, "to": target}]},
        )

    def create_pull_request(self, name_param: str, kind: str) -> PipelineStep | None:
        """The publish step, None when the target is ``yaml``."""
        publish = publish_action(self.publish.target)
        if publish is None:
            return None

        if self.publish.allow_repo_selection:
            repo_url = "${{ parameters.repoUrl }}"
            target_branch = "${{ parameters.targetBranch }}"
        else:
            repo_url = self.publish.git.repo_url or ""
            target_branch = self.publish.git.target_branch or "main"

        name_ref = f"${{{{ parameters.{name_param} }}}}"
        return PipelineStep(
            id="create-pull-request",
            name="create-pull-request",
            action=publish.action,
            if_="${{ parameters.pushToGit }}",
            input={
                "repoUrl": repo_url,
                "branchName": f"create-{name_ref}-resource",
                "title": f"Create {kind} Resource {name_ref}",
                "description": f"Create {kind} Resource {name_ref}",
                "targetBranchName": target_branch,
            },
        )

    def extra_steps(
        self,
        descriptor: ResourceDescriptor,
        version: VersionDescriptor,
        api_version: str,
        kind: str,
        warnings: list[TransformWarning] | None = None,
    ) -> list[PipelineStep]:
        """Steps declared in the ``steps`` default of the version schema."""
        source = version.extra_steps
        if source is None:
            return []

        try:
            if isinstance(source, str):
                raw = yaml.safe_load(substitute_placeholders(source, api_version, kind))
            else:
                raw = substitute_placeholders(source, api_version, kind)
            if raw is None:
                return []
            if not isinstance(raw, list):
                raise ValueError(f"expected a list of steps, got {type(raw).__name__}")
            return [PipelineStep.model_validate(step) for step in raw]
        except (yaml.YAMLError, ValidationError, ValueError) as e:
            message = f"Ignoring extra steps of {descriptor.name} version {version.name}: {e}"
            logger.warning(message)
            if warnings is not None:
                warnings.append(
                    TransformWarning(resource=descriptor.name, kind="Template", message=message)
                )
            return []


def substitute_placeholders(value: Any, api_version: str, kind: str) -> Any:
    """Replace ``{API_VERSION}`` and ``{KIND}`` in every string of ``value``."""
    if isinstance(value, str):
        return value.replace(PLACEHOLDER_API_VERSION, api_version).replace(PLACEHOLDER_KIND, kind)
    if isinstance(value, list):
        return [substitute_placeholders(v, api_version, kind) for v in value]
    if isinstance(value, dict):
        return {k: substitute_placeholders(v, api_version, kind) for k, v in value.items()}
    return value
