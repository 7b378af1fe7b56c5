from kubecatalog.domain.template.model.parameter import ParameterGroup
from kubecatalog.domain.template.model.publish import (
    PUBLISH_ACTIONS,
    PublishAction,
    PublishTarget,
)
from kubecatalog.domain.template.model.step import OutputLink, PipelineStep

__all__ = [
    "OutputLink",
    "PUBLISH_ACTIONS",
    "ParameterGroup",
    "PipelineStep",
    "PublishAction",
    "PublishTarget",
]
