import logging

from kubecatalog.config import Config
from kubecatalog.domain.api.service.openapi import OpenAPIDocAssembler
from kubecatalog.domain.catalog.model import (
    ApiEntity,
    ApiSpec,
    EntityMetadata,
    TemplateEntity,
    TemplateSpec,
)
from kubecatalog.domain.resource.model import ResourceDescriptor, Scope, VersionDescriptor
from kubecatalog.domain.resource.service import classifier
from kubecatalog.domain.shared.model.diagnostic import TransformWarning
from kubecatalog.domain.shared.service import Service
from kubecatalog.domain.template.model import OutputLink
from kubecatalog.domain.template.model.publish import publish_action, pull_request_url
from kubecatalog.domain.template.service.parameters import ParameterAssembler
from kubecatalog.domain.template.service.steps import StepAssembler
from kubecatalog.util.serialize import dump_yaml

logger = logging.getLogger(__name__)

MANAGED_BY_LOCATION = "backstage.io/managed-by-location"
MANAGED_BY_ORIGIN_LOCATION = "backstage.io/managed-by-origin-location"
DOWNLOAD_MANIFEST_URL = "data:application/yaml;charset=utf-8,${{ steps.generateManifest.output.manifest }}"


def _flag(value: bool) -> str:
    return "true" if value else "false"


class EntityAssembler(Service):
    """Builds Template and API entities for one resource version.

    Name length is not checked here; the transform service drops entities
    whose names are too long.
    """

    config: Config

    @property
    def prefix(self) -> str:
        return self.config.annotation_prefix

    def _origin_annotations(self, descriptor: ResourceDescriptor) -> dict[str, str]:
        origin = f"cluster origin: {descriptor.cluster_name}"
        return {MANAGED_BY_LOCATION: origin, MANAGED_BY_ORIGIN_LOCATION: origin}

    def _links(self, target: str | None) -> list[OutputLink]:
        links = [OutputLink(title="Download YAML Manifest", url=DOWNLOAD_MANIFEST_URL)]
        action = publish_action(target)
        if action is not None:
            links.append(
                OutputLink(
                    title="Open Pull Request",
                    if_="${{ parameters.pushToGit }}",
                    url=pull_request_url(action),
                )
            )
        return links

    def xrd_template(
        self,
        descriptor: ResourceDescriptor,
        version: VersionDescriptor,
        warnings: list[TransformWarning] | None = None,
    ) -> TemplateEntity:
        xrds = self.config.crossplane.xrds
        classification = classifier.classify(descriptor)
        legacy = classification.is_v2 and classification.scope == Scope.LEGACY_CLUSTER
        # v1 and LegacyCluster XRDs are created through their claim
        title = descriptor.claim_kind if (not classification.is_v2 or legacy) else descriptor.kind

        parameters = ParameterAssembler(
            publish=xrds.publish_phase,
            convert_defaults_to_placeholders=xrds.convert_default_values_to_placeholders,
        ).build(descriptor, version)
        steps = StepAssembler(publish=xrds.publish_phase).build(descriptor, version, warnings)

        annotations = self._origin_annotations(descriptor)
        annotations.update(
            {
                f"{self.prefix}/crossplane-claim": _flag(classification.uses_claims),
                f"{self.prefix}/crossplane-version": classification.crossplane_version,
                f"{self.prefix}/crossplane-scope": classification.scope,
                f"{self.prefix}/crossplane-direct-xr": _flag(classification.is_direct_xr),
                f"{self.prefix}/crossplane-include-namespace": _flag(
                    classification.include_namespace
                ),
            }
        )

        return TemplateEntity(
            metadata=EntityMetadata(
                name=f"{self.config.entity_name_prefix}{descriptor.name}-{version.name}",
                title=title or descriptor.kind,
                description=f"A template to create a {descriptor.name} instance",
                labels={"forEntity": "system", "source": "crossplane"},
                tags=[
                    "crossplane",
                    classification.crossplane_version,
                    *(f"cluster:{c}" for c in descriptor.cluster_names),
                ],
                annotations=annotations,
            ),
            spec=TemplateSpec(
                type=descriptor.name,
                parameters=parameters,
                steps=steps,
                links=self._links(xrds.publish_phase.target),
            ),
        )

    def crd_template(self, descriptor: ResourceDescriptor, version: VersionDescriptor) -> TemplateEntity:
        """Template for a CRD, built from its storage version."""
        crds = self.config.generic_crd_templates
        classification = classifier.classify(descriptor)

        parameters = ParameterAssembler(
            publish=crds.publish_phase,
            convert_defaults_to_placeholders=crds.convert_default_values_to_placeholders,
        ).build(descriptor, version)
        steps = StepAssembler(publish=crds.publish_phase).build(descriptor, version)

        annotations = self._origin_annotations(descriptor)
        annotations.update(
            {
                f"{self.prefix}/crd-scope": classification.scope,
                f"{self.prefix}/include-namespace": _flag(classification.include_namespace),
            }
        )

        return TemplateEntity(
            metadata=EntityMetadata(
                name=f"{self.config.entity_name_prefix}{descriptor.singular}-{version.name}",
                title=descriptor.kind,
                description=f"A template to create a {descriptor.kind} instance",
                labels={"forEntity": "system", "source": "kubernetes"},
                tags=["kubernetes-crd", *(f"cluster:{c}" for c in descriptor.cluster_names)],
                annotations=annotations,
            ),
            spec=TemplateSpec(
                type=descriptor.singular,
                parameters=parameters,
                steps=steps,
                links=self._links(crds.publish_phase.target),
            ),
        )

    def api(self, descriptor: ResourceDescriptor, version: VersionDescriptor) -> ApiEntity:
        name = (
            f"{self.config.entity_name_prefix}"
            f"{descriptor.kind.lower()}-{descriptor.group}--{version.name}"
        )
        document = OpenAPIDocAssembler().build(descriptor, version)
        return ApiEntity(
            metadata=EntityMetadata(
                name=name,
                title=name,
                annotations=self._origin_annotations(descriptor),
            ),
            spec=ApiSpec(definition=dump_yaml(document)),
        )
