"""
cityweaver.api.routers.search

Location search endpoints (one debounced session per caller-chosen id).

Responsibilities:
- Forward query edits to the session; the lookup fires after the debounce window.
- Expose the session's `{is_loading, error, data}` triple for polling.
- Clear a session's suggestions, or close the session outright.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from cityweaver.api.deps import coordinator_dep
from cityweaver.api.serializers import to_jsonable
from cityweaver.enrichment.coordinator import EnrichmentCoordinator

router = APIRouter(prefix="/v1/search", tags=["search"])


class SearchSubmitRequest(BaseModel):
    query: str = Field(default="", max_length=512)


@router.post("/{session_id}")
async def submit_query(
    session_id: str,
    body: SearchSubmitRequest,
    coordinator: EnrichmentCoordinator = Depends(coordinator_dep),
) -> dict[str, Any]:
    coordinator.search_locations(body.query, session_id=session_id)
    return to_jsonable(coordinator.search_snapshot(session_id=session_id))


@router.get("/{session_id}")
async def get_search_state(
    session_id: str,
    coordinator: EnrichmentCoordinator = Depends(coordinator_dep),
) -> dict[str, Any]:
    return to_jsonable(coordinator.search_snapshot(session_id=session_id))


@router.delete("/{session_id}")
async def clear_search(
    session_id: str,
    close: bool = False,
    coordinator: EnrichmentCoordinator = Depends(coordinator_dep),
) -> dict[str, Any]:
    if close:
        await coordinator.close_search(session_id=session_id)
    else:
        coordinator.clear_suggestions(session_id=session_id)
    return to_jsonable(coordinator.search_snapshot(session_id=session_id))


# --- Module Notes -----------------------------------------------------------
# POST returns immediately; callers poll GET until `is_loading` is false.
# Only POST opens a session. `DELETE ?close=true` drops it; a later POST starts
# a fresh one.
