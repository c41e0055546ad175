"""Service for creating and updating scenes with conflict reports attached."""

from __future__ import annotations

from datetime import datetime

from app.domain.models import (
    ConflictCheckRequest,
    ConflictReport,
    Scene,
    SceneCreateRequest,
    SceneMutationResponse,
    SceneUpdateRequest,
    SceneWithConflicts,
)
from app.repos.memory import SceneRepository
from app.services.conflicts import DEFAULT_FALLBACK_MINUTES, detect, detect_for_scenes


def resolve_update(existing: Scene, changes: SceneUpdateRequest) -> Scene:
    """Return the scene as it will look once *changes* are saved.

    Only fields present in the request payload are applied; an explicit
    ``null`` clears the stored value.  The result is re-validated so assigned
    people are normalised the same way as on create.
    """
    data = existing.model_dump()
    data.update(changes.model_dump(exclude_unset=True))
    # Fields the model requires cannot be cleared.
    for required in ("scene_number", "title", "status"):
        if data.get(required) is None:
            data[required] = getattr(existing, required)
    return Scene.model_validate(data)


def check_scene(
    candidate: Scene,
    repo: SceneRepository,
    fallback_minutes: int = DEFAULT_FALLBACK_MINUTES,
) -> ConflictReport:
    """Detect conflicts for *candidate* against the live scenes of its show."""
    peers = repo.list_for_show(candidate.company_id, candidate.show_id)
    return detect(candidate, peers, fallback_minutes=fallback_minutes)


def create_scene(
    company_id: str,
    show_id: str,
    request: SceneCreateRequest,
    repo: SceneRepository,
    fallback_minutes: int = DEFAULT_FALLBACK_MINUTES,
) -> SceneMutationResponse:
    """Persist a new scene and report what it collides with.

    Conflicts never prevent the save.
    """
    scene = Scene(company_id=company_id, show_id=show_id, **request.model_dump())
    repo.add(scene)
    report = check_scene(scene, repo, fallback_minutes)
    return SceneMutationResponse(scene=scene, conflicts=report)


def update_scene(
    existing: Scene,
    changes: SceneUpdateRequest,
    repo: SceneRepository,
    fallback_minutes: int = DEFAULT_FALLBACK_MINUTES,
) -> SceneMutationResponse:
    """Persist *changes*, then check the scene's post-update values."""
    scene = resolve_update(existing, changes)
    repo.update(scene)
    report = check_scene(scene, repo, fallback_minutes)
    return SceneMutationResponse(scene=scene, conflicts=report)


def check_draft(
    company_id: str,
    show_id: str,
    request: ConflictCheckRequest,
    repo: SceneRepository,
    existing: Scene | None = None,
    fallback_minutes: int = DEFAULT_FALLBACK_MINUTES,
) -> ConflictReport:
    """Report conflicts for scheduling values that have not been saved yet.

    When the draft edits *existing*, fields missing from the request keep
    their stored values and the scene itself is excluded from its peers.
    """
    if existing is not None:
        changes = request.model_dump(exclude={"scene_id"}, exclude_unset=True)
        draft = Scene.model_validate({**existing.model_dump(), **changes})
    else:
        draft = Scene(
            company_id=company_id,
            show_id=show_id,
            scene_number="",
            title="",
            **request.model_dump(exclude={"scene_id"}),
        )
    return check_scene(draft, repo, fallback_minutes)


def list_scenes_with_conflicts(
    company_id: str,
    repo: SceneRepository,
    show_ids: list[str] | None = None,
    start: datetime | None = None,
    end: datetime | None = None,
    fallback_minutes: int = DEFAULT_FALLBACK_MINUTES,
) -> list[SceneWithConflicts]:
    """Calendar view: scheduled scenes in range, each with its conflicts.

    Peers are always the whole show, not just the scenes inside the range.
    """
    scenes = repo.list_scheduled(company_id, show_ids=show_ids, start=start, end=end)
    peers_by_show = {
        show_id: repo.list_for_show(company_id, show_id)
        for show_id in {s.show_id for s in scenes}
    }
    conflict_map = detect_for_scenes(
        scenes, peers_by_show, fallback_minutes=fallback_minutes
    )
    return [
        SceneWithConflicts(
            scene=scene,
            has_conflicts=scene.id in conflict_map,
            conflicts=conflict_map.get(scene.id, []),
        )
        for scene in scenes
    ]
