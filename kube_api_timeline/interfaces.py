"""
Interfaces for release data sources.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol

from packaging.version import Version

from .snapshot import APISnapshot


class KubernetesRelease(Protocol):
    """A single Kubernetes release and its captured API surface.

    Every accessor may raise if the underlying data cannot be read.
    """

    def version(self) -> str:
        ...

    def semver(self) -> Version:
        ...

    def release_date(self) -> datetime:
        ...

    def end_of_life_date(self) -> Optional[datetime]:
        ...

    def latest_version(self) -> str:
        ...

    def api(self) -> APISnapshot:
        ...
