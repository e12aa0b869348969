import pytest

from kubeapi.errors import ScopeError
from kubeapi.model.scope import ClusterScope, NamespaceScope


def test_namespace_scope_variants():
    cluster = NamespaceScope.cluster()
    namespace = NamespaceScope.in_namespace("kube-system")
    named = NamespaceScope.named("kube-system", "coredns")

    assert cluster.url_segments() == []
    assert namespace.url_segments() == ["namespaces", "kube-system"]
    assert named.url_segments() == ["namespaces", "kube-system", "coredns"]

    assert cluster.is_collection()
    assert namespace.is_collection()
    assert not named.is_collection()

    assert named.namespace == "kube-system"
    assert named.name == "coredns"


def test_namespace_scope_rejects_name_without_namespace():
    with pytest.raises(ScopeError):
        NamespaceScope(name="coredns")


def test_empty_strings_are_rejected():
    with pytest.raises(ScopeError):
        NamespaceScope.in_namespace("")

    with pytest.raises(ScopeError):
        ClusterScope.named("")


def test_cluster_scope_has_no_namespace():
    named = ClusterScope.named("node-1")

    assert named.namespace is None
    assert named.url_segments() == ["node-1"]
    assert ClusterScope.cluster().url_segments() == []


def test_scope_equality():
    assert NamespaceScope.named("a", "b") == NamespaceScope(namespace="a", name="b")
    assert NamespaceScope.cluster() != ClusterScope.cluster()
    assert len({ClusterScope.named("x"), ClusterScope.named("x")}) == 1


def test_pretty():
    assert NamespaceScope.cluster().pretty() == "*"
    assert NamespaceScope.in_namespace("ns").pretty() == "ns"
    assert NamespaceScope.named("ns", "pod").pretty() == "ns/pod"
    assert ClusterScope.named("node").pretty() == "node"
