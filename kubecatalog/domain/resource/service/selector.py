import logging
from collections.abc import Iterable

from kubecatalog.config import CRDTemplatesConfig, CrossplaneConfig
from kubecatalog.domain.resource.model import ResourceDescriptor, Scope
from kubecatalog.domain.resource.service import classifier
from kubecatalog.domain.shared.model.diagnostic import TransformWarning
from kubecatalog.domain.shared.model.value import ValueObject
from kubecatalog.domain.shared.service import Service

logger = logging.getLogger(__name__)


class Selection(ValueObject):
    selected: list[ResourceDescriptor]
    warnings: list[TransformWarning]


class ResourceSelector(Service):
    """Decides which parsed XRDs and CRDs get turned into entities."""

    annotation_prefix: str
    crossplane: CrossplaneConfig
    crd_templates: CRDTemplatesConfig
    allowed_cluster_names: list[str] | None = None

    def select(self, descriptors: Iterable[ResourceDescriptor]) -> Selection:
        selected: list[ResourceDescriptor] = []
        warnings: list[TransformWarning] = []

        restricted = [d for d in (self._restrict_clusters(d) for d in descriptors) if d is not None]
        xrds = [d for d in restricted if d.is_xrd]
        crds = [d for d in restricted if d.is_crd]

        if self.crossplane.enabled and self.crossplane.xrds.enabled:
            for xrd in xrds:
                if self._accept_xrd(xrd, warnings):
                    selected.append(xrd)
        elif xrds:
            logger.debug("XRD templates disabled, ignoring %d XRDs", len(xrds))

        selected.extend(self._select_crds(crds, warnings))
        return Selection(selected=selected, warnings=warnings)

    def _restrict_clusters(self, descriptor: ResourceDescriptor) -> ResourceDescriptor | None:
        if self.allowed_cluster_names is None:
            return descriptor
        clusters = tuple(c for c in descriptor.clusters if c.name in self.allowed_cluster_names)
        if not clusters:
            logger.info(
                "Skipping %s: not discovered on any allowed cluster (%s)",
                descriptor.name,
                ", ".join(descriptor.cluster_names),
            )
            return None
        if len(clusters) == len(descriptor.clusters):
            return descriptor
        return descriptor.model_copy(update={"clusters": clusters})

    def _accept_xrd(self, xrd: ResourceDescriptor, warnings: list[TransformWarning]) -> bool:
        prefix = self.annotation_prefix
        if xrd.annotations.get(f"{prefix}/exclude-from-catalog"):
            logger.info("Skipping XRD %s: annotated %s/exclude-from-catalog", xrd.name, prefix)
            return False
        if not self.crossplane.xrds.ingest_all_xrds and not xrd.annotations.get(
            f"{prefix}/add-to-catalog"
        ):
            logger.info("Skipping XRD %s: missing %s/add-to-catalog annotation", xrd.name, prefix)
            return False

        # Claim-based XRDs cannot produce a form without a claim kind
        legacy = classifier.is_v2(xrd) and classifier.scope(xrd) == Scope.LEGACY_CLUSTER
        if (not classifier.is_v2(xrd) or legacy) and not xrd.claim_kind:
            message = f"XRD {xrd.name} uses claims but has no spec.claimNames.kind, skipping"
            logger.warning(message)
            warnings.append(TransformWarning(resource=xrd.name, kind="XRD", message=message))
            return False
        return True

    def _select_crds(
        self, crds: list[ResourceDescriptor], warnings: list[TransformWarning]
    ) -> list[ResourceDescriptor]:
        targets = self.crd_templates.crds
        label_selector = self.crd_templates.crd_label_selector

        if not targets and label_selector is None:
            if crds:
                logger.debug("No CRD targets or label selector configured, ignoring %d CRDs", len(crds))
            return []

        if targets and label_selector is not None:
            message = (
                "Both CRD targets and label selector are configured. Only one should be used. "
                "No CRDs will be processed."
            )
            logger.warning(message)
            warnings.append(
                TransformWarning(resource="generic_crd_templates", kind="Config", message=message)
            )
            return []

        if targets:
            wanted = set(targets)
            return [crd for crd in crds if f"{crd.plural}.{crd.group}" in wanted]

        return [crd for crd in crds if crd.labels.get(label_selector.key) == label_selector.value]
