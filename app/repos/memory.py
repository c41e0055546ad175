"""In-memory repository for scenes."""

from __future__ import annotations

from datetime import datetime, timezone

from app.domain.models import Scene


def _as_utc(value: datetime | None) -> datetime | None:
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class SceneRepository:
    """Dict-backed store for Scene instances, keyed by id.

    Deleted scenes stay in the store with ``deleted_at`` set; every listing
    skips them, so conflict checks only ever see live scenes.
    """

    def __init__(self) -> None:
        self._store: dict[str, Scene] = {}

    def add(self, scene: Scene) -> None:
        self._store[scene.id] = scene

    def get(self, scene_id: str) -> Scene | None:
        scene = self._store.get(scene_id)
        if scene is None or scene.is_deleted:
            return None
        return scene

    def update(self, scene: Scene) -> None:
        if scene.id not in self._store:
            raise KeyError(scene.id)
        self._store[scene.id] = scene

    def soft_delete(self, scene_id: str, now: datetime | None = None) -> None:
        scene = self._store.get(scene_id)
        if scene is not None and not scene.is_deleted:
            scene.deleted_at = now or datetime.now(timezone.utc)

    def list_all(self) -> list[Scene]:
        return [s for s in self._store.values() if not s.is_deleted]

    def list_for_show(self, company_id: str, show_id: str) -> list[Scene]:
        """Return every live scene of one production."""
        return [
            s
            for s in self._store.values()
            if not s.is_deleted and s.company_id == company_id and s.show_id == show_id
        ]

    def list_scheduled(
        self,
        company_id: str,
        show_ids: list[str] | None = None,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> list[Scene]:
        """Return scheduled live scenes of a company, earliest first.

        *start* and *end* are inclusive bounds on ``scheduled_time``; naive
        bounds are taken as UTC.
        """
        start = _as_utc(start)
        end = _as_utc(end)
        scenes = [
            s
            for s in self._store.values()
            if not s.is_deleted
            and s.company_id == company_id
            and s.scheduled_time is not None
            and (not show_ids or s.show_id in show_ids)
            and (start is None or s.scheduled_time >= start)
            and (end is None or s.scheduled_time <= end)
        ]
        return sorted(scenes, key=lambda s: (s.scheduled_time, s.scene_number))
