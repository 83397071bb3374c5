"""
Core data models for the API timeline.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional


@dataclass
class ReleaseMetadata:
    """Support status of a single Kubernetes release."""

    version: str
    released: bool
    supported: bool
    release_date: datetime
    end_of_life_date: Optional[datetime]
    latest_version: str
    archived: bool = False


@dataclass
class APIResource:
    """A resource kind as seen across all releases of one API version."""

    kind: str
    plural: str = ""
    singular: str = ""
    description: str = ""
    releases: List[str] = field(default_factory=list)
    # release -> "Namespaced" / "Cluster"
    scopes: Dict[str, str] = field(default_factory=dict)
    releases_of_interest: List[str] = field(default_factory=list)


@dataclass
class APIVersion:
    """A version of an API group and the resources it ever contained."""

    version: str
    releases: List[str] = field(default_factory=list)
    resources: List[APIResource] = field(default_factory=list)
    releases_of_interest: List[str] = field(default_factory=list)

    def resource(self, kind: str) -> Optional[APIResource]:
        """Look up a resource of a finished timeline by kind."""
        for resource in self.resources:
            if resource.kind == kind:
                return resource
        return None


@dataclass
class APIGroup:
    """An API group and all versions it ever served."""

    name: str
    # release -> preferred version
    preferred_versions: Dict[str, str] = field(default_factory=dict)
    api_versions: List[APIVersion] = field(default_factory=list)
    releases_of_interest: List[str] = field(default_factory=list)

    def api_version(self, version: str) -> Optional[APIVersion]:
        """Look up a version of a finished timeline; not used while merging."""
        for api_version in self.api_versions:
            if api_version.version == version:
                return api_version
        return None


@dataclass
class Timeline:
    """Chronological releases plus the merged API groups."""

    releases: List[ReleaseMetadata] = field(default_factory=list)
    api_groups: List[APIGroup] = field(default_factory=list)

    def release_versions(self) -> List[str]:
        return [release.version for release in self.releases]

    def api_group(self, name: str) -> Optional[APIGroup]:
        """Look up a group by its normalized name (``core`` for the legacy group)."""
        for group in self.api_groups:
            if group.name == name:
                return group
        return None
