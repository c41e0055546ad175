"""Domain models for scene scheduling and conflict reports."""

from __future__ import annotations

import json
import uuid
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

try:
    from enum import StrEnum
except ImportError:  # pragma: no cover - fallback for older Python runtimes

    class StrEnum(str, Enum):
        pass


PersonId = int


class SceneStatus(StrEnum):
    UNSHOT = "unshot"
    IN_PROGRESS = "in_progress"
    COMPLETE = "complete"


class ConflictType(StrEnum):
    TIME = "time"
    RESOURCE = "resource"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return str(uuid.uuid4())


def parse_person_ids(raw: Any) -> frozenset[PersonId]:
    """Normalise an actor/crew assignment into a set of person ids.

    Accepts ``None``, any iterable of ids, or the legacy JSON-encoded list
    (``"[1, 2]"``) still found in stored rows.  Unparseable legacy strings
    become the empty set; anything else that is not an integer id is rejected.
    """
    if raw is None or raw == "":
        return frozenset()
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except ValueError:
            return frozenset()
        if not isinstance(raw, list):
            return frozenset()
    ids: set[PersonId] = set()
    for item in raw:
        if isinstance(item, bool) or not isinstance(item, (int, str)):
            raise ValueError(f"invalid person id: {item!r}")
        ids.add(int(item))
    return frozenset(ids)


# ---------------------------------------------------------------------------
# Core domain models
# ---------------------------------------------------------------------------


class Scene(BaseModel):
    id: str = Field(default_factory=_new_id)
    company_id: str
    show_id: str
    scene_number: str
    title: str
    scheduled_time: datetime | None = None
    duration_minutes: int | None = None
    expected_duration_minutes: int | None = None
    assigned_actors: frozenset[PersonId] = frozenset()
    assigned_crew: frozenset[PersonId] = frozenset()
    status: SceneStatus = SceneStatus.UNSHOT
    location: str | None = None
    notes: str | None = None
    shooting_day_number: int | None = None
    created_at: datetime = Field(default_factory=_utcnow)
    deleted_at: datetime | None = None

    @field_validator("scheduled_time")
    @classmethod
    def _assume_utc(cls, value: datetime | None) -> datetime | None:
        # Naive timestamps from legacy rows are stored in UTC.
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    @field_validator("assigned_actors", "assigned_crew", mode="before")
    @classmethod
    def _normalise_people(cls, value: Any) -> frozenset[PersonId]:
        return parse_person_ids(value)

    @property
    def resources(self) -> frozenset[PersonId]:
        """Everyone the scene needs on set: actors and crew together."""
        return self.assigned_actors | self.assigned_crew

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None


class ShootWindow(BaseModel):
    """Half-open ``[start, end)`` interval during which a scene shoots."""

    model_config = ConfigDict(frozen=True)

    start: datetime
    end: datetime

    @classmethod
    def starting_at(cls, start: datetime, minutes: int) -> ShootWindow:
        """Window of *minutes* from *start*, clamped to the last representable instant."""
        try:
            end = start + timedelta(minutes=minutes)
        except OverflowError:
            end = datetime.max.replace(tzinfo=start.tzinfo)
        return cls(start=start, end=end)


class ConflictEntry(BaseModel):
    scene_id: str
    scene_number: str
    scene_title: str
    conflict_type: ConflictType
    conflicting_scene_id: str
    conflicting_scene_number: str
    conflicting_scene_title: str
    conflicting_scheduled_time: datetime | None = None
    conflicting_resources: list[PersonId] | None = None


class ConflictReport(BaseModel):
    has_conflicts: bool = False
    conflicts: list[ConflictEntry] = Field(default_factory=list)

    @property
    def resource_conflicts(self) -> list[ConflictEntry]:
        return [c for c in self.conflicts if c.conflict_type == ConflictType.RESOURCE]

    @property
    def time_overlaps(self) -> list[ConflictEntry]:
        return [c for c in self.conflicts if c.conflict_type == ConflictType.TIME]


# ---------------------------------------------------------------------------
# Request / Response DTOs
# ---------------------------------------------------------------------------


class SceneCreateRequest(BaseModel):
    scene_number: str
    title: str = Field(min_length=1)
    scheduled_time: datetime | None = None
    duration_minutes: int | None = None
    expected_duration_minutes: int | None = None
    assigned_actors: list[PersonId] = Field(default_factory=list)
    assigned_crew: list[PersonId] = Field(default_factory=list)
    location: str | None = None
    notes: str | None = None
    shooting_day_number: int | None = Field(default=None, ge=1)


class SceneUpdateRequest(BaseModel):
    """Partial update; only fields present in the payload are applied."""

    scene_number: str | None = None
    title: str | None = Field(default=None, min_length=1)
    scheduled_time: datetime | None = None
    duration_minutes: int | None = None
    expected_duration_minutes: int | None = None
    assigned_actors: list[PersonId] | None = None
    assigned_crew: list[PersonId] | None = None
    status: SceneStatus | None = None
    location: str | None = None
    notes: str | None = None
    shooting_day_number: int | None = Field(default=None, ge=1)


class ConflictCheckRequest(BaseModel):
    """Draft scheduling values checked without saving anything."""

    scene_id: str | None = None
    scheduled_time: datetime
    duration_minutes: int | None = None
    expected_duration_minutes: int | None = None
    assigned_actors: list[PersonId] = Field(default_factory=list)
    assigned_crew: list[PersonId] = Field(default_factory=list)


class SceneMutationResponse(BaseModel):
    scene: Scene
    conflicts: ConflictReport


class SceneWithConflicts(BaseModel):
    scene: Scene
    has_conflicts: bool
    conflicts: list[ConflictEntry] = Field(default_factory=list)
