"""Tests for release and API version ordering."""

import pytest
from packaging.version import Version

from kube_api_timeline.versions import api_version_key, is_more_mature, parse_release_version


def test_parse_release_version() -> None:
    assert parse_release_version("1.28") == Version("1.28")
    assert parse_release_version("v1.28.4") == Version("1.28.4")
    assert parse_release_version("1.9") < parse_release_version("1.10")


def test_parse_release_version_rejects_garbage() -> None:
    with pytest.raises(ValueError):
        parse_release_version("not-a-version")


def test_api_versions_sort_most_mature_first() -> None:
    versions = ["v1alpha1", "v1beta1", "v1", "v2beta1", "v2alpha1", "v1beta2", "v2", "foo", "v10"]

    ordered = sorted(versions, key=api_version_key)

    assert ordered == ["v10", "v2", "v1", "v2beta1", "v1beta2", "v1beta1", "v2alpha1", "v1alpha1", "foo"]


def test_malformed_versions_sort_alphabetically_last() -> None:
    ordered = sorted(["zeta", "v1", "alpha", "v1gamma1"], key=api_version_key)

    assert ordered == ["v1", "alpha", "v1gamma1", "zeta"]


def test_is_more_mature() -> None:
    assert is_more_mature("v1", "v1beta1")
    assert is_more_mature("v1beta1", "v1alpha1")
    assert not is_more_mature("v1", "v1")
    assert not is_more_mature("v1alpha1", "v1beta1")
