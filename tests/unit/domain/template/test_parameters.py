import yaml

from kubecatalog.config import GitConfig, PublishPhaseConfig
from kubecatalog.domain.resource.service.parser import parse_manifest
from kubecatalog.domain.template.service.parameters import (
    CRD_PARAMETER_NAMES,
    DNS_LABEL_PATTERN,
    ParameterAssembler,
    XRD_PARAMETER_NAMES,
)
from kubecatalog.sdk.discovery import ClusterRef
from kubecatalog.util.serialize import dump_yaml


def _build(descriptor, publish: PublishPhaseConfig | None = None, placeholders: bool = False):
    assembler = ParameterAssembler(
        publish=publish or PublishPhaseConfig(),
        convert_defaults_to_placeholders=placeholders,
    )
    return assembler.build(descriptor, descriptor.versions[0])


def _git_branch(groups):
    creation = groups[-1]
    return creation.dependencies["pushToGit"]["oneOf"][1]


class TestGroupOrder:
    def test_claim_xrd(self, make_xrd, descriptor_of):
        groups = _build(descriptor_of(make_xrd()))

        assert [g.title for g in groups] == [
            "Resource Metadata",
            "Resource Spec",
            "Crossplane Settings",
            "Creation Settings",
        ]

    def test_spec_group_dropped_when_empty(self, make_xrd, make_version, descriptor_of):
        groups = _build(descriptor_of(make_xrd(versions=[make_version(spec_properties={})])))

        assert [g.title for g in groups] == [
            "Resource Metadata",
            "Crossplane Settings",
            "Creation Settings",
        ]

    def test_crd_has_no_crossplane_settings(self, make_crd, descriptor_of):
        groups = _build(descriptor_of(make_crd()))

        assert [g.title for g in groups] == [
            "Resource Metadata",
            "Resource Spec",
            "Creation Settings",
        ]

    def test_every_group_is_an_object(self, make_xrd, descriptor_of):
        for group in _build(descriptor_of(make_xrd())):
            assert group.to_dict()["type"] == "object"


class TestMetadataGroup:
    def test_claim_xrd_fields(self, make_xrd, descriptor_of):
        metadata = _build(descriptor_of(make_xrd()))[0]

        assert list(metadata.properties) == ["xrName", "xrNamespace", "owner"]
        assert metadata.required == ["xrName", "xrNamespace", "owner"]
        assert metadata.properties["xrName"]["pattern"] == DNS_LABEL_PATTERN
        assert metadata.properties["xrName"]["maxLength"] == 63
        assert metadata.properties["owner"]["ui:field"] == "OwnerPicker"

    def test_cluster_scoped_xr_has_no_namespace(self, make_xrd, descriptor_of):
        metadata = _build(descriptor_of(make_xrd(scope="Cluster")))[0]

        assert list(metadata.properties) == ["xrName", "owner"]
        assert metadata.required == ["xrName", "owner"]

    def test_crd_owner_is_optional(self, make_crd, descriptor_of):
        metadata = _build(descriptor_of(make_crd()))[0]

        assert list(metadata.properties) == ["name", "namespace", "owner"]
        assert metadata.required == ["name", "namespace"]

    def test_parameter_names(self):
        assert XRD_PARAMETER_NAMES.name == "xrName"
        assert CRD_PARAMETER_NAMES.namespace == "namespace"


class TestSpecGroup:
    def test_required_carried_over(self, make_xrd, make_version, descriptor_of):
        version = make_version(
            spec_properties={"size": {"type": "integer"}, "region": {"type": "string"}},
            required=["region"],
        )

        spec = _build(descriptor_of(make_xrd(versions=[version])))[1]

        assert spec.title == "Resource Spec"
        assert list(spec.properties) == ["size", "region"]
        assert spec.required == ["region"]

    def test_no_required_key_without_required_fields(self, make_xrd, descriptor_of):
        spec = _build(descriptor_of(make_xrd()))[1]

        assert "required" not in spec.to_dict()

    def test_placeholders_option(self, make_xrd, make_version, descriptor_of):
        version = make_version(spec_properties={"size": {"type": "integer", "default": 5}})

        spec = _build(descriptor_of(make_xrd(versions=[version])), placeholders=True)[1]

        assert spec.properties["size"]["ui:placeholder"] == "5"


class TestCrossplaneSettings:
    def test_claim_settings(self, make_xrd, descriptor_of):
        settings = _build(descriptor_of(make_xrd()))[2]

        assert list(settings.properties) == [
            "writeConnectionSecretToRef",
            "compositeDeletePolicy",
            "compositionUpdatePolicy",
            "compositionSelectionStrategy",
        ]

    def test_direct_xr_settings(self, make_xrd, descriptor_of):
        settings = _build(descriptor_of(make_xrd(scope="Namespaced")))[2]

        assert list(settings.properties) == ["compositionSelectionStrategy"]

    def test_strategies_without_compositions(self, make_xrd, descriptor_of):
        settings = _build(descriptor_of(make_xrd()))[2]

        strategy = settings.properties["compositionSelectionStrategy"]
        assert strategy["enum"] == ["runtime", "label-selector"]
        branches = settings.dependencies["compositionSelectionStrategy"]["oneOf"]
        assert len(branches) == 2

    def test_direct_reference_lists_compositions(self, make_xrd):
        descriptor = parse_manifest(
            make_xrd(default_composition="gcp-db"), compositions=["aws-db", "gcp-db"]
        )

        settings = _build(descriptor)[2]

        strategy = settings.properties["compositionSelectionStrategy"]
        assert strategy["enum"] == ["runtime", "direct-reference", "label-selector"]
        direct = settings.dependencies["compositionSelectionStrategy"]["oneOf"][1]
        name = direct["properties"]["compositionRef"]["properties"]["name"]
        assert name["enum"] == ["aws-db", "gcp-db"]
        assert name["default"] == "gcp-db"


class TestCreationSettings:
    def test_push_to_git_toggle(self, make_xrd, descriptor_of):
        creation = _build(descriptor_of(make_xrd()))[-1]

        assert creation.properties["pushToGit"]["default"] is True
        assert creation.dependencies["pushToGit"]["oneOf"][0] == {
            "properties": {"pushToGit": {"enum": [False]}}
        }

    def test_fixed_repository(self, make_xrd, descriptor_of):
        branch = _git_branch(_build(descriptor_of(make_xrd())))

        assert list(branch["properties"]) == ["pushToGit", "manifestLayout"]

    def test_repo_selection(self, make_xrd, descriptor_of):
        publish = PublishPhaseConfig(
            target="gitlab",
            allow_repo_selection=True,
            git=GitConfig(target_branch="develop"),
        )

        branch = _git_branch(_build(descriptor_of(make_xrd()), publish=publish))

        assert list(branch["properties"]) == ["pushToGit", "repoUrl", "targetBranch", "manifestLayout"]
        assert branch["properties"]["repoUrl"]["ui:options"]["allowedHosts"] == ["gitlab.com"]
        assert branch["properties"]["targetBranch"]["default"] == "develop"

    def test_repo_selection_with_explicit_hosts(self, make_xrd, descriptor_of):
        publish = PublishPhaseConfig(
            allow_repo_selection=True, allowed_targets=["git.internal", "github.com"]
        )

        branch = _git_branch(_build(descriptor_of(make_xrd()), publish=publish))

        assert branch["properties"]["repoUrl"]["ui:options"]["allowedHosts"] == [
            "git.internal",
            "github.com",
        ]
        assert branch["properties"]["targetBranch"]["default"] == "main"

    def test_cluster_choices(self, make_xrd):
        clusters = [ClusterRef(name="dev", url="https://dev"), ClusterRef(name="prod", url="https://prod")]
        descriptor = parse_manifest(make_xrd(), clusters=clusters)

        branch = _git_branch(_build(descriptor))

        layouts = branch["dependencies"]["manifestLayout"]["oneOf"]
        assert layouts[0]["properties"]["clusters"]["items"]["enum"] == ["dev", "prod"]
        assert layouts[1]["required"] == ["basePath"]


SPEC_FIELDS = {
    "size": {"type": "integer", "default": 20},
    "tier": {"type": "string", "enum": ["gold", "silver"], "default": "gold"},
    "backup": {"type": "boolean", "default": True},
    "name": {"type": "string"},
}


class TestGroupOrderUnderPermutation:
    def test_only_spec_fields_move(self, make_xrd, make_version, descriptor_of):
        forward = dict(SPEC_FIELDS)
        backward = dict(reversed(list(SPEC_FIELDS.items())))

        first = _build(descriptor_of(make_xrd(versions=[make_version(spec_properties=forward)])))
        second = _build(descriptor_of(make_xrd(versions=[make_version(spec_properties=backward)])))

        assert [g.title for g in first] == [g.title for g in second]
        assert list(first[1].properties) == ["size", "tier", "backup", "name"]
        assert list(second[1].properties) == ["name", "backup", "tier", "size"]
        for a, b in zip(first, second):
            if a.title != "Resource Spec":
                assert a.to_dict() == b.to_dict()


class TestRoundTrip:
    def test_groups_survive_yaml(self, make_xrd, make_version, descriptor_of):
        descriptor = descriptor_of(make_xrd(versions=[make_version(spec_properties=SPEC_FIELDS)]))

        for group in _build(descriptor):
            assert yaml.safe_load(dump_yaml(group.to_dict())) == group.to_dict()

    def test_placeholders_only_replace_defaults(self, make_xrd, make_version, descriptor_of):
        descriptor = descriptor_of(make_xrd(versions=[make_version(spec_properties=SPEC_FIELDS)]))

        plain = [yaml.safe_load(dump_yaml(g.to_dict())) for g in _build(descriptor)]
        converted = [
            yaml.safe_load(dump_yaml(g.to_dict())) for g in _build(descriptor, placeholders=True)
        ]

        assert [g["title"] for g in plain] == [g["title"] for g in converted]
        spec_plain, spec_converted = plain[1]["properties"], converted[1]["properties"]
        assert spec_converted["size"] == {"type": "integer", "ui:placeholder": "20"}
        assert spec_converted["tier"] == {
            "type": "string",
            "enum": ["gold", "silver"],
            "ui:placeholder": "gold",
        }
        assert spec_converted["backup"] == spec_plain["backup"]
        assert spec_converted["name"] == spec_plain["name"]
        for i in (0, 2, 3):
            assert plain[i] == converted[i]
