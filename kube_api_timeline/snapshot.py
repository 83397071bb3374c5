"""
API snapshot of a single release, as captured from a live cluster.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List


@dataclass(frozen=True)
class SnapshotResource:
    """A resource kind served by one API version."""

    kind: str
    plural: str = ""
    singular: str = ""
    description: str = ""
    namespaced: bool = False


@dataclass(frozen=True)
class SnapshotVersion:
    """One API version of a group with its resources."""

    version: str
    resources: List[SnapshotResource] = field(default_factory=list)


@dataclass(frozen=True)
class SnapshotGroup:
    """An API group; the legacy core group has an empty name."""

    name: str
    preferred_version: str = ""
    api_versions: List[SnapshotVersion] = field(default_factory=list)


@dataclass(frozen=True)
class APISnapshot:
    """All API groups observed in one release."""

    api_groups: List[SnapshotGroup] = field(default_factory=list)


def _parse_resource(data: Dict[str, Any]) -> SnapshotResource:
    return SnapshotResource(
        kind=data.get("kind") or "",
        plural=data.get("plural") or "",
        singular=data.get("singular") or "",
        description=data.get("description") or "",
        namespaced=bool(data.get("namespaced", False)),
    )


def _parse_version(data: Dict[str, Any]) -> SnapshotVersion:
    return SnapshotVersion(
        version=data.get("version") or "",
        resources=[_parse_resource(r) for r in data.get("resources") or []],
    )


def _parse_group(data: Dict[str, Any]) -> SnapshotGroup:
    return SnapshotGroup(
        name=data.get("name") or "",
        preferred_version=data.get("preferredVersion") or "",
        api_versions=[_parse_version(v) for v in data.get("apiVersions") or []],
    )


def parse_snapshot(data: Any) -> APISnapshot:
    """Build an APISnapshot from the dumper's JSON document."""
    if not isinstance(data, dict):
        raise ValueError(f"API snapshot must be a JSON object, got {type(data).__name__}")

    return APISnapshot(
        api_groups=[_parse_group(g) for g in data.get("apiGroups") or []],
    )
