"""Service for detecting scheduling conflicts between scenes of a production.

Two scenes conflict in *time* when their shoot windows overlap, and in
*resources* when they also share at least one assigned actor or crew member.
Everything here is a pure function of its inputs: the caller fetches the
peer snapshot, and the report is advisory only.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from datetime import datetime, timezone

from app.domain.models import (
    ConflictEntry,
    ConflictReport,
    ConflictType,
    PersonId,
    Scene,
    ShootWindow,
)

logger = logging.getLogger(__name__)

# Nominal window for scheduled scenes with no usable duration, so two of them
# booked at the same instant still collide.
DEFAULT_FALLBACK_MINUTES = 60

_UNSCHEDULED = datetime.max.replace(tzinfo=timezone.utc)


def effective_duration(scene: Scene, fallback_minutes: int = DEFAULT_FALLBACK_MINUTES) -> int:
    """Minutes a scene occupies: actual duration, then planned, then the fallback."""
    for minutes in (scene.duration_minutes, scene.expected_duration_minutes):
        if minutes is not None and minutes > 0:
            return minutes
    return max(fallback_minutes, 1)


def shoot_window(
    scene: Scene, fallback_minutes: int = DEFAULT_FALLBACK_MINUTES
) -> ShootWindow | None:
    """Return the scene's ``[start, end)`` window, or None if it is unscheduled."""
    if scene.scheduled_time is None:
        return None
    return ShootWindow.starting_at(
        scene.scheduled_time, effective_duration(scene, fallback_minutes)
    )


def overlaps(window_a: ShootWindow | None, window_b: ShootWindow | None) -> bool:
    """Return True if the two windows share any instant.

    Overlap rule: conflict if a.start < b.end AND b.start < a.end.
    Exact boundary touches (end == start) are NOT considered conflicts.
    """
    if window_a is None or window_b is None:
        return False
    return window_a.start < window_b.end and window_b.start < window_a.end


def shared_resources(scene_a: Scene, scene_b: Scene) -> frozenset[PersonId]:
    """People assigned (as actor or crew) to both scenes."""
    return scene_a.resources & scene_b.resources


def _entry(
    candidate: Scene,
    peer: Scene,
    conflict_type: ConflictType,
    resources: Iterable[PersonId] | None = None,
) -> ConflictEntry:
    return ConflictEntry(
        scene_id=candidate.id,
        scene_number=candidate.scene_number,
        scene_title=candidate.title,
        conflict_type=conflict_type,
        conflicting_scene_id=peer.id,
        conflicting_scene_number=peer.scene_number,
        conflicting_scene_title=peer.title,
        conflicting_scheduled_time=peer.scheduled_time,
        conflicting_resources=sorted(resources) if resources is not None else None,
    )


def _sort_key(entry: ConflictEntry) -> tuple[datetime, str]:
    return (entry.conflicting_scheduled_time or _UNSCHEDULED, entry.conflicting_scene_number)


def detect(
    candidate: Scene,
    peer_scenes: Iterable[Scene],
    *,
    fallback_minutes: int = DEFAULT_FALLBACK_MINUTES,
) -> ConflictReport:
    """Check *candidate* against every peer scene of the same production.

    *peer_scenes* must already be scoped to the candidate's company and show
    and contain only live scenes.  A peer carrying the candidate's own id is
    skipped, so callers may pass the full show snapshot when updating.

    Each overlapping peer yields a ``time`` entry, plus a ``resource`` entry
    listing the shared people when there are any.  Entries are ordered by the
    conflicting scene's scheduled time, then by its scene number.
    """
    conflicts: list[ConflictEntry] = []
    window = shoot_window(candidate, fallback_minutes)

    examined = 0
    if window is not None:
        for peer in peer_scenes:
            if peer.id == candidate.id:
                continue
            examined += 1
            if not overlaps(window, shoot_window(peer, fallback_minutes)):
                continue

            conflicts.append(_entry(candidate, peer, ConflictType.TIME))
            shared = shared_resources(candidate, peer)
            if shared:
                conflicts.append(_entry(candidate, peer, ConflictType.RESOURCE, shared))

    # sort() is stable: a peer's time entry stays ahead of its resource entry.
    conflicts.sort(key=_sort_key)
    report = ConflictReport(has_conflicts=bool(conflicts), conflicts=conflicts)

    logger.debug("Scene %s checked against %d peer scene(s)", candidate.id, examined)
    if report.has_conflicts:
        logger.info(
            "Scene %s (%s) has %d time overlap(s) and %d resource conflict(s)",
            candidate.id,
            candidate.scene_number,
            len(report.time_overlaps),
            len(report.resource_conflicts),
        )
    return report


def detect_for_scenes(
    scenes: Iterable[Scene],
    peers_by_show: Mapping[str, list[Scene]],
    *,
    fallback_minutes: int = DEFAULT_FALLBACK_MINUTES,
) -> dict[str, list[ConflictEntry]]:
    """Run :func:`detect` for each scheduled scene against its own show's peers.

    Only scenes that actually have conflicts appear in the result.
    """
    conflict_map: dict[str, list[ConflictEntry]] = {}
    for scene in scenes:
        if scene.scheduled_time is None:
            continue
        report = detect(
            scene,
            peers_by_show.get(scene.show_id, []),
            fallback_minutes=fallback_minutes,
        )
        if report.has_conflicts:
            conflict_map[scene.id] = report.conflicts
    return conflict_map
