"""Shared fixtures for the timeline tests."""

import json
from datetime import datetime, timezone
from typing import Dict, List, Optional, Tuple

import pytest

from kube_api_timeline.snapshot import APISnapshot, SnapshotGroup, SnapshotResource, SnapshotVersion
from kube_api_timeline.versions import parse_release_version


# group -> version -> [(kind, namespaced)]
GroupSpec = Dict[str, Dict[str, List[Tuple[str, bool]]]]


def build_snapshot(groups: GroupSpec, preferred: Optional[Dict[str, str]] = None) -> APISnapshot:
    preferred = preferred or {}
    api_groups = []
    for name, versions in groups.items():
        api_versions = [
            SnapshotVersion(
                version=version,
                resources=[
                    SnapshotResource(
                        kind=kind,
                        plural=kind.lower() + "s",
                        singular=kind.lower(),
                        description=f"{kind} resource",
                        namespaced=namespaced,
                    )
                    for kind, namespaced in resources
                ],
            )
            for version, resources in versions.items()
        ]
        default_preferred = next(iter(versions), "")
        api_groups.append(SnapshotGroup(
            name=name,
            preferred_version=preferred.get(name, default_preferred),
            api_versions=api_versions,
        ))
    return APISnapshot(api_groups=api_groups)


class FakeRelease:
    """In-memory release with a configurable snapshot and dates."""

    def __init__(
        self,
        version: str,
        groups: Optional[GroupSpec] = None,
        release_date: Optional[datetime] = None,
        end_of_life: Optional[datetime] = None,
        latest: Optional[str] = None,
        snapshot: Optional[APISnapshot] = None,
        api_error: Optional[Exception] = None,
        date_error: Optional[Exception] = None,
    ):
        self._version = version
        self._snapshot = snapshot if snapshot is not None else build_snapshot(groups or {})
        self._release_date = release_date or datetime(2020, 1, 1, tzinfo=timezone.utc)
        self._end_of_life = end_of_life
        self._latest = latest or f"{version}.0"
        self._api_error = api_error
        self._date_error = date_error

    def version(self) -> str:
        return self._version

    def semver(self):
        return parse_release_version(self._version)

    def release_date(self) -> datetime:
        if self._date_error is not None:
            raise self._date_error
        return self._release_date

    def end_of_life_date(self) -> Optional[datetime]:
        return self._end_of_life

    def latest_version(self) -> str:
        return self._latest

    def api(self) -> APISnapshot:
        if self._api_error is not None:
            raise self._api_error
        return self._snapshot


@pytest.fixture
def now() -> datetime:
    return datetime(2024, 1, 1, tzinfo=timezone.utc)


@pytest.fixture
def make_release():
    return FakeRelease


def _snapshot_document(kinds):
    return {
        "apiGroups": [
            {
                "name": "",
                "preferredVersion": "v1",
                "apiVersions": [{
                    "version": "v1",
                    "resources": [
                        {"kind": kind, "plural": kind.lower() + "s", "singular": kind.lower(), "namespaced": True}
                        for kind in kinds
                    ],
                }],
            },
            {
                "name": "apps",
                "preferredVersion": "v1",
                "apiVersions": [{
                    "version": "v1",
                    "resources": [{"kind": "Deployment", "plural": "deployments", "namespaced": True}],
                }],
            },
        ]
    }


@pytest.fixture
def data_dir(tmp_path):
    """A data directory with three releases; PodPreset disappears in 1.10."""
    directory = tmp_path / "data"
    directory.mkdir()

    documents = {
        "1.8": ["Pod", "PodPreset"],
        "1.9": ["Pod", "PodPreset"],
        "1.10": ["Pod"],
    }
    for version, kinds in documents.items():
        (directory / f"release-{version}.json").write_text(json.dumps(_snapshot_document(kinds)), encoding="utf-8")

    releases = {
        "1.8": {"releaseDate": "2017-09-28", "endOfLifeDate": "2018-09-27", "latestVersion": "1.8.15"},
        "1.9": {"releaseDate": "2017-12-15", "endOfLifeDate": "2018-12-19", "latestVersion": "1.9.11"},
        "1.10": {"releaseDate": "2018-03-26", "endOfLifeDate": None, "latestVersion": "1.10.13"},
    }
    (directory / "releases.json").write_text(json.dumps(releases), encoding="utf-8")
    (directory / "notes.txt").write_text("ignored", encoding="utf-8")
    return directory
