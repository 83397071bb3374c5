"""
Reporting and export utilities.
"""

from __future__ import annotations

import json
import logging
from dataclasses import asdict
from pathlib import Path
from typing import Dict, List, Optional, Set

import pandas as pd
from tqdm import tqdm

from .models import Timeline


logger = logging.getLogger(__name__)

# Group names are DNS subdomains and cannot start with an underscore.
RELEASES_SHEET = "_releases"
MAX_SHEET_NAME = 31

RESOURCE_COLUMNS = [
    "group",
    "version",
    "kind",
    "plural",
    "singular",
    "scope",
    "first_release",
    "last_release",
    "releases",
    "releases_of_interest",
]


def print_summary(timeline: Timeline) -> None:
    num_versions = sum(len(g.api_versions) for g in timeline.api_groups)
    num_resources = sum(
        len(v.resources) for g in timeline.api_groups for v in g.api_versions
    )
    supported = [r.version for r in timeline.releases if r.supported]
    archived = [r.version for r in timeline.releases if r.archived]

    logger.info("=" * 60)
    logger.info("API TIMELINE")
    logger.info("=" * 60)
    if timeline.releases:
        logger.info("Releases: %s to %s (%d total)",
                    timeline.releases[0].version, timeline.releases[-1].version, len(timeline.releases))
    logger.info("Supported releases: %s", ", ".join(supported) or "none")
    logger.info("Archived releases: %d", len(archived))
    logger.info("-" * 60)
    logger.info("API groups: %d", len(timeline.api_groups))
    logger.info("API versions: %d", num_versions)
    logger.info("API resources: %d", num_resources)
    logger.info("=" * 60)


def timeline_to_dict(timeline: Timeline) -> Dict:
    return asdict(timeline)


def save_timeline_json(timeline: Timeline, output_dir: Path) -> Path:
    output_dir.mkdir(parents=True, exist_ok=True)
    timeline_file = output_dir / "timeline.json"
    with open(timeline_file, 'w') as f:
        json.dump(timeline_to_dict(timeline), f, indent=2, default=str)
    return timeline_file


def timeline_to_frame(timeline: Timeline, group: Optional[str] = None) -> pd.DataFrame:
    """Flatten the timeline into one row per group/version/resource."""
    if group is None:
        api_groups = timeline.api_groups
    else:
        selected = timeline.api_group(group)
        api_groups = [selected] if selected is not None else []

    rows: List[Dict] = []
    for api_group in api_groups:
        for api_version in api_group.api_versions:
            for resource in api_version.resources:
                scopes = sorted(set(resource.scopes.values()))
                rows.append({
                    "group": api_group.name,
                    "version": api_version.version,
                    "kind": resource.kind,
                    "plural": resource.plural,
                    "singular": resource.singular,
                    "scope": "/".join(scopes),
                    "first_release": resource.releases[0] if resource.releases else None,
                    "last_release": resource.releases[-1] if resource.releases else None,
                    "releases": ",".join(resource.releases),
                    "releases_of_interest": ",".join(resource.releases_of_interest),
                })
    return pd.DataFrame(rows, columns=RESOURCE_COLUMNS)


def export_resources_csv(timeline: Timeline, output_dir: Path) -> Path:
    output_dir.mkdir(parents=True, exist_ok=True)
    csv_file = output_dir / "timeline_resources.csv"
    timeline_to_frame(timeline).to_csv(csv_file, index=False)
    return csv_file


def _unique_sheet_name(name: str, used: Set[str]) -> str:
    """Truncate to Excel's 31 character limit without reusing a sheet.

    Excel compares sheet names case-insensitively.
    """
    candidate = name[:MAX_SHEET_NAME]
    counter = 1
    while candidate.lower() in used:
        counter += 1
        suffix = f"~{counter}"
        candidate = name[:MAX_SHEET_NAME - len(suffix)] + suffix
    used.add(candidate.lower())
    return candidate


def export_worksheets(timeline: Timeline, output_dir: Path) -> Optional[Path]:
    if not timeline.api_groups:
        return None
    output_dir.mkdir(parents=True, exist_ok=True)
    excel_file = output_dir / "timeline_worksheets.xlsx"

    releases_df = pd.DataFrame([
        {
            "version": r.version,
            "latest_version": r.latest_version,
            "release_date": r.release_date.date(),
            "end_of_life_date": r.end_of_life_date.date() if r.end_of_life_date else None,
            "released": r.released,
            "supported": r.supported,
            "archived": r.archived,
        }
        for r in timeline.releases
    ])

    with pd.ExcelWriter(excel_file, engine='openpyxl') as writer:
        releases_df.to_excel(writer, sheet_name=RELEASES_SHEET, index=False)
        used = {RELEASES_SHEET.lower()}
        for api_group in tqdm(timeline.api_groups, desc="Writing worksheets"):
            sheet_name = _unique_sheet_name(api_group.name, used)
            timeline_to_frame(timeline, group=api_group.name).to_excel(
                writer, sheet_name=sheet_name, index=False
            )
    return excel_file
