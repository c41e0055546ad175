"""Service for turning a conflict report into grouped, human-readable lines."""

from __future__ import annotations

from app.domain.models import ConflictEntry, ConflictReport

RESOURCE_GROUP = "Resource Conflicts"
TIME_GROUP = "Time Overlaps"


def _describe(entry: ConflictEntry) -> str:
    line = f"Scene {entry.conflicting_scene_number}: {entry.conflicting_scene_title}"
    if entry.conflicting_resources:
        line += f" ({len(entry.conflicting_resources)} shared)"
    return line


def describe_conflicts(report: ConflictReport) -> dict[str, list[str]]:
    """Group a report's entries for display, resource conflicts first.

    Groups with no entries are left out, so an empty report gives ``{}``.
    """
    groups: dict[str, list[str]] = {}
    if report.resource_conflicts:
        groups[RESOURCE_GROUP] = [_describe(c) for c in report.resource_conflicts]
    if report.time_overlaps:
        groups[TIME_GROUP] = [_describe(c) for c in report.time_overlaps]
    return groups
