"""
Read release snapshots from the data directory written by the dump workflow.

Layout::

    data/
      releases.json         {"1.28": {"releaseDate": ..., "endOfLifeDate": ..., "latestVersion": ...}}
      release-1.28.json     API snapshot of a 1.28 cluster
"""

from __future__ import annotations

import json
import logging
import re
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional

from packaging.version import Version

from .snapshot import APISnapshot, parse_snapshot
from .time_utils import parse_timestamp
from .versions import parse_release_version


logger = logging.getLogger(__name__)

RELEASES_FILE = "releases.json"

_SNAPSHOT_RE = re.compile(r"^release-(.+)\.json$")


class FileRelease:
    """A release backed by files in the data directory."""

    def __init__(self, version: str, metadata: Dict, snapshot_file: Path):
        self._version = version
        self._metadata = metadata
        self.snapshot_file = Path(snapshot_file)

    def __repr__(self) -> str:
        return f"FileRelease({self._version!r})"

    def version(self) -> str:
        return self._version

    def semver(self) -> Version:
        return parse_release_version(self._version)

    def release_date(self) -> datetime:
        value = self._metadata.get("releaseDate")
        if not value:
            raise ValueError(f"no release date known for {self._version}")
        return parse_timestamp(value)

    def end_of_life_date(self) -> Optional[datetime]:
        return parse_timestamp(self._metadata.get("endOfLifeDate"))

    def latest_version(self) -> str:
        value = self._metadata.get("latestVersion")
        if not value:
            raise ValueError(f"no latest version known for {self._version}")
        return value

    def api(self) -> APISnapshot:
        with open(self.snapshot_file, "r", encoding="utf-8") as f:
            data = json.load(f)
        return parse_snapshot(data)


class ReleaseDatabase:
    """Access all releases stored in a data directory."""

    def __init__(self, data_dir: Path):
        self.data_dir = Path(data_dir)
        self.releases_file = self.data_dir / RELEASES_FILE

    def release_versions(self) -> List[str]:
        """Versions for which a snapshot file exists, oldest first."""
        if not self.data_dir.is_dir():
            raise FileNotFoundError(f"Data directory not found: {self.data_dir}")

        versions = []
        for path in self.data_dir.iterdir():
            match = _SNAPSHOT_RE.match(path.name)
            if not match or not path.is_file():
                continue
            try:
                semver = parse_release_version(match.group(1))
            except ValueError:
                logger.warning("Skipping %s: not a release version", path.name)
                continue
            versions.append((semver, match.group(1)))

        return [version for _, version in sorted(versions)]

    def load_metadata(self) -> Dict[str, Dict]:
        if not self.releases_file.exists():
            raise FileNotFoundError(f"Release metadata not found: {self.releases_file}")

        with open(self.releases_file, "r", encoding="utf-8") as f:
            data = json.load(f)

        if not isinstance(data, dict):
            raise ValueError(f"{self.releases_file} must contain a JSON object")
        return data

    def release(self, version: str, metadata: Optional[Dict[str, Dict]] = None) -> FileRelease:
        """A single release; ``metadata`` is the parsed releases.json if already loaded."""
        snapshot_file = self.data_dir / f"release-{version}.json"
        if not snapshot_file.exists():
            raise FileNotFoundError(f"No API snapshot for release {version}: {snapshot_file}")
        if metadata is None:
            metadata = self.load_metadata()
        if version not in metadata:
            logger.warning("Release %s has a snapshot but no entry in %s", version, RELEASES_FILE)
        return FileRelease(version, metadata.get(version, {}), snapshot_file)

    def releases(self) -> List[FileRelease]:
        versions = self.release_versions()
        metadata = self.load_metadata()
        result = [self.release(version, metadata) for version in versions]

        logger.info("Found %d releases in %s", len(result), self.data_dir)
        return result
