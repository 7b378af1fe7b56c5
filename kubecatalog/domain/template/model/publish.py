"""Publish targets and the scaffolder actions that open a pull/merge request."""

import logging
from enum import StrEnum

from kubecatalog.domain.shared.model.value import ValueObject

logger = logging.getLogger(__name__)


class PublishTarget(StrEnum):
    GITHUB = "github"
    GITLAB = "gitlab"
    BITBUCKET = "bitbucket"  # Bitbucket Server
    BITBUCKET_CLOUD = "bitbucketcloud"
    YAML = "yaml"  # Render the manifest only, never open a pull request


class PublishAction(ValueObject):
    action: str
    output_field: str  # Step output holding the pull/merge request URL
    allowed_host: str  # Default RepoUrlPicker host


PUBLISH_ACTIONS: dict[PublishTarget, PublishAction] = {
    PublishTarget.GITHUB: PublishAction(
        action="publish:github:pull-request",
        output_field="remoteUrl",
        allowed_host="github.com",
    ),
    PublishTarget.GITLAB: PublishAction(
        action="publish:gitlab:merge-request",
        output_field="mergeRequestUrl",
        allowed_host="gitlab.com",
    ),
    PublishTarget.BITBUCKET: PublishAction(
        action="publish:bitbucketServer:pull-request",
        output_field="pullRequestUrl",
        allowed_host="only-bitbucket-server-is-allowed",
    ),
    PublishTarget.BITBUCKET_CLOUD: PublishAction(
        action="publish:bitbucketCloud:pull-request",
        output_field="pullRequestUrl",
        allowed_host="bitbucket.org",
    ),
}


def resolve_target(target: str | None) -> PublishTarget:
    """Map a configured target to a PublishTarget; unset or unknown means GitHub."""
    if not target:
        return PublishTarget.GITHUB
    try:
        return PublishTarget(target.lower())
    except ValueError:
        logger.debug("Unknown publish target '%s', falling back to github", target)
        return PublishTarget.GITHUB


def publish_action(target: str | None) -> PublishAction | None:
    """The pull request action for a target, None in yaml mode."""
    resolved = resolve_target(target)
    if resolved == PublishTarget.YAML:
        return None
    return PUBLISH_ACTIONS[resolved]


def allowed_hosts(target: str | None, allowed_targets: list[str] | None = None) -> list[str]:
    """Hosts offered by the repository picker.

    Explicit ``allowed_targets`` win; otherwise only an explicitly configured
    git target contributes its host.
    """
    if allowed_targets:
        return list(allowed_targets)
    if not target:
        return []
    try:
        resolved = PublishTarget(target.lower())
    except ValueError:
        return []
    action = PUBLISH_ACTIONS.get(resolved)
    return [action.allowed_host] if action else []


def pull_request_url(action: PublishAction) -> str:
    return '${{ steps["create-pull-request"].output.' + action.output_field + " }}"
