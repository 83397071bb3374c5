"""
Version parsing and ordering helpers.

Kubernetes releases ("1.28") are ordered with ``packaging.version``; API
versions ("v1", "v2beta1", "v1alpha3") follow the kube-aware priority order
used by the API server when listing group versions.
"""

from __future__ import annotations

import re
from typing import Tuple

from packaging import version as pkg_version


_API_VERSION_RE = re.compile(r"^v(\d+)(?:(alpha|beta)(\d+))?$")

# GA sorts before beta, beta before alpha.
_STAGE_RANK = {None: 0, "beta": 1, "alpha": 2}


def parse_release_version(value: str) -> pkg_version.Version:
    """Parse a Kubernetes release version such as ``1.28`` or ``v1.28.4``."""
    if value is None:
        raise ValueError("release version must not be None")
    cleaned = value.strip()
    if cleaned.startswith("v"):
        cleaned = cleaned[1:]
    try:
        return pkg_version.Version(cleaned)
    except pkg_version.InvalidVersion as e:
        raise ValueError(f"invalid release version {value!r}") from e


def api_version_key(value: str) -> Tuple[int, int, int, int, str]:
    """Sort key placing the most mature API version first.

    Well-formed versions order GA > beta > alpha, then by major version
    descending, then by stage number descending. Anything else sorts after
    them, alphabetically.
    """
    match = _API_VERSION_RE.match(value)
    if match is None:
        return (1, 0, 0, 0, value)

    major = int(match.group(1))
    stage = match.group(2)
    stage_number = int(match.group(3)) if match.group(3) else 0
    return (0, _STAGE_RANK[stage], -major, -stage_number, "")


def is_more_mature(candidate: str, other: str) -> bool:
    """True if ``candidate`` ranks strictly before ``other``."""
    return api_version_key(candidate) < api_version_key(other)
