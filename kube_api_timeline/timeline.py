"""
Merge per-release API snapshots into a single timeline.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Dict, Iterable, List, Optional, Set, Tuple

from .interfaces import KubernetesRelease
from .models import APIGroup, APIResource, APIVersion, ReleaseMetadata, Timeline
from .snapshot import SnapshotGroup, SnapshotResource, SnapshotVersion
from .time_utils import ensure_utc
from .versions import api_version_key, is_more_mature


logger = logging.getLogger(__name__)

# Number of most recent releases shown by default; everything older is
# archived. 11 shows e.g. 1.19..1.29.
NUM_RECENT_RELEASES = 11

CORE_GROUP_NAME = "core"

SCOPE_NAMESPACED = "Namespaced"
SCOPE_CLUSTER = "Cluster"


class TimelineError(Exception):
    """Raised when a timeline cannot be built from the given releases."""


class OverviewIndex:
    """Find-or-create lookups into a timeline, keyed by identity.

    Nodes are owned by their parent's list in the timeline; the index only
    holds references so repeated merges update the same objects.
    """

    def __init__(self, timeline: Timeline) -> None:
        self.timeline = timeline
        self._groups: Dict[str, APIGroup] = {}
        self._versions: Dict[Tuple[str, str], APIVersion] = {}
        self._resources: Dict[Tuple[str, str, str], APIResource] = {}

        for group in timeline.api_groups:
            self._groups[group.name] = group
            for api_version in group.api_versions:
                self._versions[(group.name, api_version.version)] = api_version
                for resource in api_version.resources:
                    key = (group.name, api_version.version, resource.kind)
                    self._resources[key] = resource

    def group(self, name: str) -> APIGroup:
        group = self._groups.get(name)
        if group is None:
            group = APIGroup(name=name)
            self.timeline.api_groups.append(group)
            self._groups[name] = group
        return group

    def version(self, group: APIGroup, version: str) -> APIVersion:
        key = (group.name, version)
        api_version = self._versions.get(key)
        if api_version is None:
            api_version = APIVersion(version=version)
            group.api_versions.append(api_version)
            self._versions[key] = api_version
        return api_version

    def resource(self, group: APIGroup, api_version: APIVersion, kind: str) -> APIResource:
        key = (group.name, api_version.version, kind)
        resource = self._resources.get(key)
        if resource is None:
            resource = APIResource(kind=kind)
            api_version.resources.append(resource)
            self._resources[key] = resource
        return resource


def create_timeline(
    releases: Iterable[KubernetesRelease],
    now: datetime,
    recent_releases: int = NUM_RECENT_RELEASES,
    detect_maturity_changes: bool = False,
) -> Timeline:
    """Build a timeline from an unordered collection of releases.

    Args:
        releases: Release objects, in any order
        now: Reference time for the released / supported flags
        recent_releases: Size of the trailing window that is not archived
        detect_maturity_changes: Also flag releases in which a group gains
            a more mature API version

    Returns:
        The finished, sorted timeline

    Raises:
        TimelineError: If any release fails to load or merge. No partial
            timeline is returned.
    """
    if recent_releases < 0:
        raise ValueError(f"recent_releases must not be negative, got {recent_releases}")

    now = ensure_utc(now)
    timeline = Timeline()
    index = OverviewIndex(timeline)

    keyed = []
    for release in releases:
        try:
            keyed.append((release.semver(), release))
        except Exception as e:
            raise TimelineError(f"failed to read version of release {release.version()}: {e}") from e

    ordered = [release for _, release in sorted(keyed, key=lambda item: item[0])]

    for release in ordered:
        try:
            merge_release_into_overview(timeline, release, now, index=index)
        except Exception as e:
            raise TimelineError(f"failed to process release {release.version()}: {e}") from e

    archived = mark_archived_releases(timeline.releases, recent_releases)
    calculate_releases_of_interest(timeline, detect_maturity_changes=detect_maturity_changes)
    sort_timeline(timeline)

    logger.info(
        "Built timeline with %d releases (%d archived) and %d API groups",
        len(timeline.releases),
        archived,
        len(timeline.api_groups),
    )
    return timeline


def create_release_metadata(release: KubernetesRelease, now: datetime) -> ReleaseMetadata:
    """Derive the support status of a release at ``now``."""
    try:
        end_of_life = release.end_of_life_date()
    except Exception as e:
        raise TimelineError(f"failed to read EOL date: {e}") from e

    try:
        release_date = release.release_date()
    except Exception as e:
        raise TimelineError(f"failed to read release date: {e}") from e

    try:
        latest_version = release.latest_version()
    except Exception as e:
        raise TimelineError(f"failed to read latest version: {e}") from e

    now = ensure_utc(now)
    release_date = ensure_utc(release_date)
    if end_of_life is not None:
        end_of_life = ensure_utc(end_of_life)

    eol = end_of_life is not None and now > end_of_life
    # "not before" rather than "after": the release date itself counts
    released = not now < release_date
    supported = released and not eol

    return ReleaseMetadata(
        version=release.version(),
        released=released,
        supported=supported,
        release_date=release_date,
        end_of_life_date=end_of_life,
        latest_version=latest_version,
    )


def merge_release_into_overview(
    timeline: Timeline,
    release: KubernetesRelease,
    now: datetime,
    index: Optional[OverviewIndex] = None,
) -> None:
    """Fold one release's snapshot into the timeline in place.

    Merges must be called sequentially, in chronological release order.
    """
    if index is None:
        index = OverviewIndex(timeline)

    try:
        api = release.api()
    except Exception as e:
        raise TimelineError(f"failed to load API: {e}") from e

    metadata = create_release_metadata(release, now)
    _record_release(timeline, metadata)

    if not api.api_groups:
        logger.warning("Release %s has no API groups", metadata.version)
        return

    for group_info in api.api_groups:
        group_name = group_info.name or CORE_GROUP_NAME
        try:
            merge_api_group(index, group_info, group_name, metadata.version)
        except Exception as e:
            raise TimelineError(f"failed to process API group {group_name}: {e}") from e

    logger.debug("Merged release %s (%d API groups)", metadata.version, len(api.api_groups))


def _record_release(timeline: Timeline, metadata: ReleaseMetadata) -> None:
    for i, existing in enumerate(timeline.releases):
        if existing.version == metadata.version:
            timeline.releases[i] = metadata
            return
    timeline.releases.append(metadata)


def merge_api_group(
    index: OverviewIndex,
    group_info: SnapshotGroup,
    group_name: str,
    release: str,
) -> APIGroup:
    group = index.group(group_name)
    group.preferred_versions[release] = group_info.preferred_version

    for version_info in group_info.api_versions:
        try:
            merge_api_version(index, group, version_info, release)
        except Exception as e:
            raise TimelineError(f"failed to process API version {version_info.version}: {e}") from e

    return group


def merge_api_version(
    index: OverviewIndex,
    group: APIGroup,
    version_info: SnapshotVersion,
    release: str,
) -> APIVersion:
    if not version_info.version:
        raise ValueError("API version has no version string")

    api_version = index.version(group, version_info.version)
    if release not in api_version.releases:
        api_version.releases.append(release)

    for resource_info in version_info.resources:
        try:
            merge_api_resource(index, group, api_version, resource_info, release)
        except Exception as e:
            raise TimelineError(f"failed to process API resource {resource_info.kind}: {e}") from e

    return api_version


def merge_api_resource(
    index: OverviewIndex,
    group: APIGroup,
    api_version: APIVersion,
    resource_info: SnapshotResource,
    release: str,
) -> APIResource:
    if not resource_info.kind:
        raise ValueError("API resource has no kind")

    resource = index.resource(group, api_version, resource_info.kind)
    resource.plural = resource_info.plural
    resource.singular = resource_info.singular
    resource.description = resource_info.description

    if release not in resource.releases:
        resource.releases.append(release)

    # the scope could technically change between releases
    resource.scopes[release] = SCOPE_NAMESPACED if resource_info.namespaced else SCOPE_CLUSTER

    return resource


def mark_archived_releases(
    releases: List[ReleaseMetadata],
    recent_releases: int = NUM_RECENT_RELEASES,
) -> int:
    """Archive everything but the ``recent_releases`` newest releases.

    ``releases`` must be sorted chronologically. Returns the number of
    archived releases.
    """
    if recent_releases < 0:
        raise ValueError(f"recent_releases must not be negative, got {recent_releases}")

    threshold = len(releases) - recent_releases
    for i, release in enumerate(releases):
        release.archived = i < threshold

    return max(0, threshold)


def releases_with_notable_changes(
    resource: APIResource,
    releases: List[ReleaseMetadata],
) -> List[str]:
    """Releases in which the resource disappeared after being available."""
    available_in = set(resource.releases)
    result = []

    was_available = False
    for i, release in enumerate(releases):
        is_available = release.version in available_in
        # nothing to compare the first release against
        if i > 0 and was_available and not is_available:
            result.append(release.version)
        was_available = is_available

    return result


def _maturity_changes(group: APIGroup, releases: List[ReleaseMetadata]) -> Dict[str, str]:
    """Map release -> API version that raised the group's most mature version."""
    changes: Dict[str, str] = {}
    previous_best: Optional[str] = None

    for i, release in enumerate(releases):
        available = [v.version for v in group.api_versions if release.version in v.releases]
        best = min(available, key=api_version_key) if available else None

        if i > 0 and best is not None and previous_best is not None:
            if is_more_mature(best, previous_best):
                changes[release.version] = best

        previous_best = best

    return changes


def _in_release_order(versions: Set[str], order: List[str]) -> List[str]:
    return [v for v in order if v in versions]


def calculate_releases_of_interest(timeline: Timeline, detect_maturity_changes: bool = False) -> int:
    """Fill in releases of interest bottom-up (resource, version, group).

    Returns the number of releases that are of interest to at least one group.
    """
    order = timeline.release_versions()
    overall: Set[str] = set()

    for group in timeline.api_groups:
        group_superset: Set[str] = set()
        maturity = _maturity_changes(group, timeline.releases) if detect_maturity_changes else {}

        for api_version in group.api_versions:
            version_superset: Set[str] = set()

            for resource in api_version.resources:
                notable = releases_with_notable_changes(resource, timeline.releases)
                resource.releases_of_interest = notable
                version_superset.update(notable)
                if notable:
                    logger.debug(
                        "%s/%s %s disappears in %s",
                        group.name, api_version.version, resource.kind, notable,
                    )

            for release, new_version in maturity.items():
                if new_version == api_version.version:
                    version_superset.add(release)

            api_version.releases_of_interest = _in_release_order(version_superset, order)
            group_superset.update(version_superset)

        group.releases_of_interest = _in_release_order(group_superset, order)
        overall.update(group_superset)

    logger.info("Found %d releases of interest", len(overall))
    return len(overall)


def sort_timeline(timeline: Timeline) -> None:
    """Sort groups by name and versions most mature first."""
    timeline.api_groups.sort(key=lambda g: g.name)
    for group in timeline.api_groups:
        group.api_versions.sort(key=lambda v: api_version_key(v.version))
