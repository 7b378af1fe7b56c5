import pytest

from kubecatalog.config import GitConfig, PublishPhaseConfig
from kubecatalog.domain.template.service.steps import (
    CLAIM_TEMPLATE_ACTION,
    RESOURCE_TEMPLATE_ACTION,
    StepAssembler,
    substitute_placeholders,
)


def _steps(descriptor, publish: PublishPhaseConfig | None = None, warnings=None):
    assembler = StepAssembler(publish=publish or PublishPhaseConfig())
    return assembler.build(descriptor, descriptor.versions[0], warnings)


class TestXRDSteps:
    def test_claim_pipeline(self, make_xrd, descriptor_of):
        steps = _steps(descriptor_of(make_xrd()))

        assert [s.id for s in steps] == [
            "generateManifest",
            "moveNamespacedManifest",
            "moveCustomManifest",
            "create-pull-request",
        ]
        generate = steps[0]
        assert generate.action == CLAIM_TEMPLATE_ACTION
        assert generate.input["apiVersion"] == "example.org/v1alpha1"
        assert generate.input["kind"] == "Database"
        assert generate.input["nameParam"] == "xrName"
        assert generate.input["namespaceParam"] == "xrNamespace"
        assert generate.input["ownerParam"] == "owner"
        assert generate.input["removeEmptyParams"] is True
        assert generate.input["excludeParams"][0] == "owner"
        assert generate.input["excludeParams"][-2:] == ["xrName", "xrNamespace"]

    def test_direct_cluster_xr(self, make_xrd, descriptor_of):
        steps = _steps(descriptor_of(make_xrd(scope="Cluster", api_version="apiextensions.crossplane.io/v2")))

        generate = steps[0]
        assert generate.action == RESOURCE_TEMPLATE_ACTION
        assert generate.input["kind"] == "XDatabase"
        assert "namespaceParam" not in generate.input
        assert "xrNamespace" not in generate.input["excludeParams"]
        assert "moveNamespacedManifest" not in [s.id for s in steps]

    def test_namespaced_direct_xr(self, make_xrd, descriptor_of):
        steps = _steps(descriptor_of(make_xrd(scope="Namespaced")))

        assert steps[0].action == RESOURCE_TEMPLATE_ACTION
        assert steps[0].input["namespaceParam"] == "xrNamespace"
        assert steps[1].id == "moveNamespacedManifest"
        assert steps[1].to_dict()["if"] == "${{ parameters.manifestLayout === 'namespace-scoped' }}"

    def test_step_key_order(self, make_xrd, descriptor_of):
        rendered = _steps(descriptor_of(make_xrd()))[1].to_dict()

        assert list(rendered) == ["id", "name", "action", "if", "input"]


class TestCRDSteps:
    def test_pipeline(self, make_crd, descriptor_of):
        steps = _steps(descriptor_of(make_crd()))

        generate = steps[0]
        assert generate.action == RESOURCE_TEMPLATE_ACTION
        assert generate.input["apiVersion"] == "cert-manager.io/v1"
        assert generate.input["kind"] == "Certificate"
        assert generate.input["nameParam"] == "name"
        assert "ownerParam" not in generate.input
        assert generate.input["excludeParams"][-3:] == ["name", "namespace", "owner"]

    def test_cluster_scoped(self, make_crd, descriptor_of):
        steps = _steps(descriptor_of(make_crd(scope="Cluster")))

        assert "namespaceParam" not in steps[0].input
        assert [s.id for s in steps][:2] == ["generateManifest", "moveCustomManifest"]


class TestPullRequest:
    @pytest.mark.parametrize(
        ("target", "action"),
        [
            (None, "publish:github:pull-request"),
            ("gitlab", "publish:gitlab:merge-request"),
            ("bitbucket", "publish:bitbucketServer:pull-request"),
            ("BitbucketCloud", "publish:bitbucketCloud:pull-request"),
        ],
    )
    def test_action_per_target(self, make_xrd, descriptor_of, target, action):
        steps = _steps(descriptor_of(make_xrd()), publish=PublishPhaseConfig(target=target))

        assert steps[-1].id == "create-pull-request"
        assert steps[-1].action == action

    def test_yaml_target_has_no_pull_request(self, make_xrd, descriptor_of):
        steps = _steps(descriptor_of(make_xrd()), publish=PublishPhaseConfig(target="yaml"))

        assert "create-pull-request" not in [s.id for s in steps]

    def test_fixed_repository(self, make_xrd, descriptor_of):
        publish = PublishPhaseConfig(git=GitConfig(repo_url="github.com?owner=acme&repo=gitops"))

        pr = _steps(descriptor_of(make_xrd()), publish=publish)[-1]

        assert pr.input["repoUrl"] == "github.com?owner=acme&repo=gitops"
        assert pr.input["targetBranchName"] == "main"
        assert pr.input["branchName"] == "create-${{ parameters.xrName }}-resource"
        assert pr.input["title"] == "Create Database Resource ${{ parameters.xrName }}"

    def test_repo_selection(self, make_xrd, descriptor_of):
        publish = PublishPhaseConfig(allow_repo_selection=True)

        pr = _steps(descriptor_of(make_xrd()), publish=publish)[-1]

        assert pr.input["repoUrl"] == "${{ parameters.repoUrl }}"
        assert pr.input["targetBranchName"] == "${{ parameters.targetBranch }}"


class TestExtraSteps:
    def test_appended_with_placeholders(self, make_xrd, make_version, descriptor_of):
        extra = (
            "- id: notify\n"
            "  name: Notify\n"
            "  action: debug:log\n"
            "  input:\n"
            "    message: created {KIND} of {API_VERSION}\n"
        )
        version = make_version(extra_properties={"steps": {"type": "string", "default": extra}})

        steps = _steps(descriptor_of(make_xrd(versions=[version])))

        assert steps[-1].id == "notify"
        assert steps[-1].input == {"message": "created Database of example.org/v1alpha1"}

    def test_unreadable_steps_warn(self, make_xrd, make_version, descriptor_of):
        version = make_version(extra_properties={"steps": {"type": "string", "default": "key: [unclosed"}})
        warnings = []

        steps = _steps(descriptor_of(make_xrd(versions=[version])), warnings=warnings)

        assert steps[-1].id == "create-pull-request"
        assert len(warnings) == 1
        assert warnings[0].kind == "Template"

    def test_steps_without_action_warn(self, make_xrd, make_version, descriptor_of):
        version = make_version(
            extra_properties={"steps": {"type": "array", "default": [{"id": "broken"}]}}
        )
        warnings = []

        _steps(descriptor_of(make_xrd(versions=[version])), warnings=warnings)

        assert len(warnings) == 1


class TestSubstitutePlaceholders:
    def test_nested(self):
        value = {"a": ["{KIND}", {"b": "{API_VERSION}"}], "n": 1}

        assert substitute_placeholders(value, "g/v1", "K") == {"a": ["K", {"b": "g/v1"}], "n": 1}
