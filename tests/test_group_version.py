import pytest

from kubeapi.errors import InvalidGroupVersionError
from kubeapi.model.group_version import (
    GroupKind,
    GroupResource,
    GroupVersion,
    GroupVersionKind,
    GroupVersionResource,
)


@pytest.mark.parametrize(
    "value, expected",
    [
        ("v1", GroupVersion("", "v1")),
        ("apps/v1", GroupVersion("apps", "v1")),
        (
            "rbac.authorization.k8s.io/v1",
            GroupVersion("rbac.authorization.k8s.io", "v1"),
        ),
        ("v1/", GroupVersion("v1", "")),
    ],
)
def test_group_version_parse(value, expected):
    assert GroupVersion.parse(value) == expected


@pytest.mark.parametrize("value", ["/v1/", "a/b/c"])
def test_group_version_parse_rejects_extra_slashes(value):
    with pytest.raises(InvalidGroupVersionError):
        GroupVersion.parse(value)


def test_group_version_str():
    assert str(GroupVersion("", "v1")) == "v1"
    assert str(GroupVersion("apps", "v1")) == "apps/v1"


def test_api_prefix_is_api_only_for_core_v1():
    assert GroupVersion("", "v1").api_prefix() == "api"
    assert GroupVersion("apps", "v1").api_prefix() == "apis"
    assert GroupVersion("", "v2").api_prefix() == "apis"


def test_url_prefix():
    assert GroupVersion("", "v1").url_prefix() == "/api/v1"
    assert GroupVersion("apps", "v1").url_prefix() == "/apis/apps/v1"


def test_gvr_value_semantics():
    a = GroupVersionResource("apps", "v1", "deployments")
    b = GroupVersion("apps", "v1").with_resource("deployments")

    assert a == b
    assert hash(a) == hash(b)
    assert a.group_resource == GroupResource("apps", "deployments")
    assert str(a) == "apps/v1, Resource=deployments"


def test_gvk():
    gvk = GroupVersion("apps", "v1").with_kind("Deployment")

    assert gvk == GroupVersionKind("apps", "v1", "Deployment")
    assert gvk.api_version == "apps/v1"
    assert gvk.group_kind == GroupKind("apps", "Deployment")
    assert str(gvk) == "apps/v1, Kind=Deployment"


def test_group_resource_parse_splits_on_first_dot():
    assert GroupResource.parse("b.v1.a") == GroupResource(group="v1.a", resource="b")
    assert GroupResource.parse("pods") == GroupResource(group="", resource="pods")
    assert str(GroupResource("apps", "deployments")) == "deployments.apps"


def test_group_kind_parse():
    assert GroupKind.parse("Deployment.apps") == GroupKind("apps", "Deployment")
    assert str(GroupKind("", "Pod")) == "Pod"
