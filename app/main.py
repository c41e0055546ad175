"""FastAPI application — entry point for the scene scheduling service."""

from __future__ import annotations

import logging
from datetime import datetime

from fastapi import FastAPI, HTTPException, Query

from app.core.config import get_settings
from app.core.logging_setup import configure_logging, log_context
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
from app.services.scenes import (
    check_draft,
    create_scene as _create_scene,
    list_scenes_with_conflicts,
    update_scene as _update_scene,
)

settings = get_settings()
configure_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

app = FastAPI(title=settings.APP_TITLE)

# ── Singletons (created at import time for simplicity) ────────────────
scene_repo = SceneRepository()


def _get_company_scene(company_id: str, scene_id: str) -> Scene:
    scene = scene_repo.get(scene_id)
    if scene is None:
        raise HTTPException(status_code=404, detail="Scene not found")
    if scene.company_id != company_id:
        raise HTTPException(status_code=403, detail="You don't have access to this scene")
    return scene


# ── Routes ────────────────────────────────────────────────────────────


@app.post(
    "/companies/{company_id}/shows/{show_id}/scenes",
    response_model=SceneMutationResponse,
    status_code=201,
)
def create_scene(
    company_id: str, show_id: str, body: SceneCreateRequest
) -> SceneMutationResponse:
    """Create a scene; any scheduling conflicts are reported, never enforced."""
    with log_context(company_id=company_id, show_id=show_id):
        result = _create_scene(
            company_id,
            show_id,
            body,
            scene_repo,
            fallback_minutes=settings.DEFAULT_SCENE_DURATION_MINUTES,
        )
        logger.info("Created scene %s", result.scene.id)
        return result


@app.get("/companies/{company_id}/scenes/{scene_id}", response_model=Scene)
def get_scene(company_id: str, scene_id: str) -> Scene:
    """Return a single scene by id."""
    return _get_company_scene(company_id, scene_id)


@app.patch(
    "/companies/{company_id}/scenes/{scene_id}",
    response_model=SceneMutationResponse,
)
def update_scene(
    company_id: str, scene_id: str, body: SceneUpdateRequest
) -> SceneMutationResponse:
    """Apply a partial update and report conflicts for the updated values."""
    existing = _get_company_scene(company_id, scene_id)
    with log_context(company_id=company_id, show_id=existing.show_id):
        result = _update_scene(
            existing,
            body,
            scene_repo,
            fallback_minutes=settings.DEFAULT_SCENE_DURATION_MINUTES,
        )
        logger.info("Updated scene %s", scene_id)
        return result


@app.delete("/companies/{company_id}/scenes/{scene_id}", status_code=200)
def delete_scene(company_id: str, scene_id: str) -> dict:
    """Soft-delete a scene so it no longer takes part in conflict checks."""
    existing = _get_company_scene(company_id, scene_id)
    scene_repo.soft_delete(existing.id)
    with log_context(company_id=company_id, show_id=existing.show_id):
        logger.info("Deleted scene %s", scene_id)
    return {"status": "deleted"}


@app.post(
    "/companies/{company_id}/shows/{show_id}/conflicts/check",
    response_model=ConflictReport,
)
def check_scene_conflicts(
    company_id: str, show_id: str, body: ConflictCheckRequest
) -> ConflictReport:
    """Check draft scheduling values without saving anything."""
    existing = (
        _get_company_scene(company_id, body.scene_id) if body.scene_id else None
    )
    if existing is not None and existing.show_id != show_id:
        raise HTTPException(status_code=404, detail="Scene not found in this show")
    with log_context(company_id=company_id, show_id=show_id):
        return check_draft(
            company_id,
            show_id,
            body,
            scene_repo,
            existing=existing,
            fallback_minutes=settings.DEFAULT_SCENE_DURATION_MINUTES,
        )


@app.get(
    "/companies/{company_id}/conflicts",
    response_model=list[SceneWithConflicts],
)
def list_conflicts(
    company_id: str,
    show_ids: list[str] | None = Query(default=None),
    start: datetime | None = None,
    end: datetime | None = None,
) -> list[SceneWithConflicts]:
    """Return scheduled scenes (optionally filtered) with their conflicts.

    Used by the calendar view; scenes without conflicts are included with
    ``has_conflicts`` false.
    """
    with log_context(company_id=company_id):
        return list_scenes_with_conflicts(
            company_id,
            scene_repo,
            show_ids=show_ids,
            start=start,
            end=end,
            fallback_minutes=settings.DEFAULT_SCENE_DURATION_MINUTES,
        )
