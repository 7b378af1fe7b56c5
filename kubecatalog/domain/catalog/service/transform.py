"""The transform pass: discovered resources in, catalog entities out.

Nothing here is fatal to the batch. A resource that cannot be parsed, a
version that cannot be built and an entity whose name is too long each end
up as one TransformWarning; everything else is still returned.
"""

import logging
from collections.abc import Iterable

import logfire

from kubecatalog.config import Config
from kubecatalog.domain.catalog.model import MAX_NAME_LENGTH, ApiEntity, Entity, TemplateEntity
from kubecatalog.domain.catalog.service.entity import EntityAssembler
from kubecatalog.domain.resource.model import ResourceDescriptor
from kubecatalog.domain.resource.service.parser import detect_resource_type, parse_resource
from kubecatalog.domain.resource.service.selector import ResourceSelector
from kubecatalog.domain.shared.error import DomainError, EntityNameTooLongError
from kubecatalog.domain.shared.model.diagnostic import TransformWarning
from kubecatalog.domain.shared.model.value import ValueObject
from kubecatalog.domain.shared.service import Service
from kubecatalog.sdk.discovery.record import DiscoveredResource

logger = logging.getLogger(__name__)


class TransformResult(ValueObject):
    entities: list[Entity]
    warnings: list[TransformWarning]

    @property
    def templates(self) -> list[TemplateEntity]:
        return [e for e in self.entities if isinstance(e, TemplateEntity)]

    @property
    def apis(self) -> list[ApiEntity]:
        return [e for e in self.entities if isinstance(e, ApiEntity)]


def _resource_label(descriptor: ResourceDescriptor) -> str:
    return "XRD" if descriptor.is_xrd else "CRD"


class TransformService(Service):
    config: Config

    def transform(self, records: Iterable[DiscoveredResource]) -> TransformResult:
        """Parse, select and transform everything a discovery backend returned."""
        records = list(records)
        warnings: list[TransformWarning] = []
        descriptors: list[ResourceDescriptor] = []

        with logfire.span("TransformService.transform", resources=len(records)):
            for record in records:
                try:
                    descriptors.append(parse_resource(record))
                except DomainError as e:
                    resource_type = detect_resource_type(record.manifest)
                    kind = resource_type.name if resource_type else "Resource"
                    message = f"Skipping {kind} {record.name}: {e.message}"
                    logger.warning(message)
                    warnings.append(
                        TransformWarning(resource=record.name, kind=kind, message=message)
                    )

            result = self.transform_descriptors(descriptors)
            logfire.info(
                "Transform completed",
                templates=len(result.templates),
                apis=len(result.apis),
                warnings=len(warnings) + len(result.warnings),
            )
        return TransformResult(entities=result.entities, warnings=[*warnings, *result.warnings])

    def transform_descriptors(self, descriptors: Iterable[ResourceDescriptor]) -> TransformResult:
        selector = ResourceSelector(
            annotation_prefix=self.config.annotation_prefix,
            crossplane=self.config.crossplane,
            crd_templates=self.config.generic_crd_templates,
            allowed_cluster_names=self.config.allowed_cluster_names,
        )
        selection = selector.select(descriptors)
        warnings = list(selection.warnings)
        entities: list[Entity] = []
        for descriptor in selection.selected:
            entities.extend(self.entities_for(descriptor, warnings))
        return TransformResult(entities=entities, warnings=warnings)

    def entities_for(
        self, descriptor: ResourceDescriptor, warnings: list[TransformWarning]
    ) -> list[Entity]:
        """All entities for one resource; problems are appended to ``warnings``."""
        assembler = EntityAssembler(config=self.config)
        label = _resource_label(descriptor)
        entities: list[Entity] = []

        with logfire.span("TransformService.entities_for", resource=descriptor.name):
            try:
                if descriptor.is_xrd:
                    candidates = self._xrd_entities(assembler, descriptor, warnings)
                else:
                    candidates = self._crd_entities(assembler, descriptor, warnings)
            except DomainError as e:
                message = f"Skipping {label} {descriptor.name}: {e.message}"
                logger.warning(message)
                warnings.append(TransformWarning(resource=descriptor.name, kind=label, message=message))
                return []

            for entity in candidates:
                try:
                    validate_entity_name(entity)
                except EntityNameTooLongError as e:
                    logger.warning(e.message)
                    warnings.append(
                        TransformWarning(resource=descriptor.name, kind=entity.kind, message=e.message)
                    )
                    continue
                entities.append(entity)
        return entities

    def _xrd_entities(
        self,
        assembler: EntityAssembler,
        descriptor: ResourceDescriptor,
        warnings: list[TransformWarning],
    ) -> list[Entity]:
        served = descriptor.served_versions
        if not served:
            logger.info("XRD %s has no served versions, nothing to generate", descriptor.name)
            return []
        templates: list[Entity] = [assembler.xrd_template(descriptor, v, warnings) for v in served]
        apis: list[Entity] = [assembler.api(descriptor, v) for v in served]
        return templates + apis

    def _crd_entities(
        self,
        assembler: EntityAssembler,
        descriptor: ResourceDescriptor,
        warnings: list[TransformWarning],
    ) -> list[Entity]:
        served = descriptor.served_versions
        if not served:
            logger.info("CRD %s has no served versions, nothing to generate", descriptor.name)
            return []

        entities: list[Entity] = []
        storage = descriptor.storage_versions
        if len(storage) == 1:
            entities.append(assembler.crd_template(descriptor, storage[0]))
        else:
            reason = "No stored version found" if not storage else "Multiple stored versions found"
            message = f"{reason} for CRD {descriptor.name}, skipping template generation"
            logger.warning(message)
            warnings.append(TransformWarning(resource=descriptor.name, kind="Template", message=message))

        entities.extend(assembler.api(descriptor, v) for v in served)
        return entities


def validate_entity_name(entity: Entity, limit: int = MAX_NAME_LENGTH) -> None:
    """Raises EntityNameTooLongError if the entity name is over the catalog limit."""
    if len(entity.name) > limit:
        raise EntityNameTooLongError(entity.name, entity.kind, limit)
