from datetime import datetime, timezone

import pytest

from kubeapi.model.options import (
    DeleteOptions,
    GetOptions,
    ListOptions,
    PatchOptions,
    PodLogOptions,
    PropagationPolicy,
    encode_query,
)


def test_defaults_are_omitted():
    assert encode_query(ListOptions()) == ""
    assert encode_query(GetOptions()) == ""
    assert encode_query(DeleteOptions()) == ""
    assert encode_query(None) == ""


def test_list_options_use_wire_names_in_order():
    opts = ListOptions(
        label_selector="app=web",
        limit=50,
        continue_="abc",
        resource_version="1234",
        watch=True,
        timeout_seconds=30,
    )

    assert encode_query(opts) == (
        "resourceVersion=1234&timeoutSeconds=30&watch=true"
        "&labelSelector=app%3Dweb&limit=50&continue=abc"
    )


def test_zero_grace_period_is_sent():
    opts = DeleteOptions(
        grace_period_seconds=0,
        propagation_policy=PropagationPolicy.FOREGROUND,
        dry_run=True,
    )

    assert encode_query(opts) == (
        "gracePeriodSeconds=0&propagationPolicy=Foreground&dryRun=All"
    )


def test_delete_options_body():
    opts = DeleteOptions(grace_period_seconds=10, orphan_dependents=False)

    assert opts.to_body() == {"gracePeriodSeconds": 10, "orphanDependents": False}


def test_patch_options():
    opts = PatchOptions(field_manager="me", force=True)

    assert encode_query(opts) == "fieldManager=me&force=true"


def test_pod_log_options():
    opts = PodLogOptions(
        container="app",
        follow=True,
        tail_lines=0,
        since_time=datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc),
    )

    assert encode_query(opts) == (
        "container=app&follow=true&sinceTime=2024-01-02T03%3A04%3A05Z&tailLines=0"
    )


def test_mapping_query():
    assert encode_query({"path": "foo"}) == "path=foo"
    assert encode_query({"a": None, "b": True}) == "b=true"
    assert encode_query({"a": "", "b": 0}) == "b=0"


def test_empty_values_are_omitted():
    assert encode_query(ListOptions(resource_version="", limit=0)) == ""
    assert encode_query(GetOptions(resource_version="")) == ""
    assert encode_query(DeleteOptions(grace_period_seconds=0)) == (
        "gracePeriodSeconds=0"
    )


def test_replace_returns_a_copy():
    opts = ListOptions(limit=10)
    page = opts.replace(continue_="token")

    assert opts.continue_ == ""
    assert page.continue_ == "token"
    assert page.limit == 10
    assert page != opts
    assert page == ListOptions(limit=10, continue_="token")


def test_replace_rejects_unknown_options():
    with pytest.raises(TypeError):
        ListOptions().replace(bogus=1)


def test_repr():
    assert repr(GetOptions(pretty=True)) == (
        "GetOptions(pretty=True, resource_version=None)"
    )
