import pytest

from kubecatalog.domain.resource.service import classifier


class TestXRDClassification:
    def test_v1_without_scope(self, make_xrd, descriptor_of):
        d = descriptor_of(make_xrd())

        assert classifier.is_v2(d) is False
        assert classifier.scope(d) == "Cluster"
        assert classifier.uses_claims(d) is True
        assert classifier.is_direct_xr(d) is False
        assert classifier.include_namespace(d) is True
        assert classifier.resource_kind(d) == "Database"
        assert classifier.resource_plural(d) == "databases"

    @pytest.mark.parametrize("scope", ["Cluster", "Namespaced"])
    def test_v2_direct_scopes(self, make_xrd, descriptor_of, scope):
        d = descriptor_of(make_xrd(scope=scope, api_version="apiextensions.crossplane.io/v2"))

        assert classifier.is_v2(d) is True
        assert classifier.uses_claims(d) is False
        assert classifier.is_direct_xr(d) is True
        assert classifier.resource_kind(d) == "XDatabase"
        assert classifier.resource_plural(d) == "xdatabases"

    def test_v2_legacy_cluster_uses_claims(self, make_xrd, descriptor_of):
        d = descriptor_of(make_xrd(scope="LegacyCluster"))

        assert classifier.uses_claims(d) is True
        assert classifier.is_direct_xr(d) is False
        assert classifier.include_namespace(d) is True
        assert classifier.resource_kind(d) == "Database"

    @pytest.mark.parametrize(
        ("scope", "expected"),
        [(None, True), ("Namespaced", True), ("LegacyCluster", True), ("Cluster", False)],
    )
    def test_include_namespace(self, make_xrd, descriptor_of, scope, expected):
        d = descriptor_of(make_xrd(scope=scope))

        assert classifier.include_namespace(d) is expected
        assert expected == (
            not classifier.is_v2(d) or classifier.scope(d) in ("Namespaced", "LegacyCluster")
        )

    def test_claim_kind_falls_back_to_kind(self, make_xrd, descriptor_of):
        d = descriptor_of(make_xrd(claim_kind=None))

        assert classifier.uses_claims(d) is True
        assert classifier.resource_kind(d) == "XDatabase"
        assert classifier.resource_plural(d) == "xdatabases"

    def test_unknown_v2_scope_does_not_fail(self, make_xrd, descriptor_of):
        d = descriptor_of(make_xrd(scope="Galactic"))

        c = classifier.classify(d)

        assert c.is_v2 is True
        assert c.scope == "Galactic"
        assert c.uses_claims is True
        assert c.is_direct_xr is False

    def test_classify_matches_functions(self, make_xrd, descriptor_of):
        d = descriptor_of(make_xrd(scope="Namespaced"))

        c = classifier.classify(d)

        assert c.is_v2 == classifier.is_v2(d)
        assert c.scope == classifier.scope(d)
        assert c.uses_claims == classifier.uses_claims(d)
        assert c.include_namespace == classifier.include_namespace(d)
        assert c.crossplane_version == "v2"


class TestCRDClassification:
    def test_namespaced(self, make_crd, descriptor_of):
        c = classifier.classify(descriptor_of(make_crd(scope="Namespaced")))

        assert c.scope == "Namespaced"
        assert c.include_namespace is True
        assert c.uses_claims is False
        assert c.resource_kind == "Certificate"

    def test_missing_scope_defaults_to_cluster(self, make_crd, descriptor_of):
        c = classifier.classify(descriptor_of(make_crd(scope=None)))

        assert c.scope == "Cluster"
        assert c.include_namespace is False
