import pytest

from kubecatalog.domain.template.model.publish import (
    PublishTarget,
    allowed_hosts,
    publish_action,
    pull_request_url,
    resolve_target,
)


class TestResolveTarget:
    @pytest.mark.parametrize("target", [None, "", "svn"])
    def test_falls_back_to_github(self, target):
        assert resolve_target(target) == PublishTarget.GITHUB

    def test_case_insensitive(self):
        assert resolve_target("GitLab") == PublishTarget.GITLAB


class TestPublishAction:
    def test_yaml_has_no_action(self):
        assert publish_action("yaml") is None

    def test_output_urls(self):
        assert pull_request_url(publish_action("github")) == (
            '${{ steps["create-pull-request"].output.remoteUrl }}'
        )
        assert pull_request_url(publish_action("gitlab")).endswith(".mergeRequestUrl }}")
        assert pull_request_url(publish_action("bitbucketcloud")).endswith(".pullRequestUrl }}")


class TestAllowedHosts:
    def test_explicit_list_wins(self):
        assert allowed_hosts("gitlab", ["git.example.com"]) == ["git.example.com"]

    @pytest.mark.parametrize(
        ("target", "hosts"),
        [
            ("github", ["github.com"]),
            ("gitlab", ["gitlab.com"]),
            ("bitbucket", ["only-bitbucket-server-is-allowed"]),
            ("bitbucketcloud", ["bitbucket.org"]),
            ("yaml", []),
            (None, []),
        ],
    )
    def test_target_host(self, target, hosts):
        assert allowed_hosts(target) == hosts
