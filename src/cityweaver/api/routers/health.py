"""
cityweaver.api.routers.health

Health and readiness endpoints.

Responsibilities:
- Provide liveness probe (`/healthz`).
- Provide readiness probe (`/readyz`) once the coordinator is wired.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from starlette.status import HTTP_503_SERVICE_UNAVAILABLE

from cityweaver.api.deps import settings_dep
from cityweaver.settings import Settings

router = APIRouter()


@router.get("/healthz")
async def healthz() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/readyz", response_model=None)
async def readyz(
    request: Request, settings: Settings = Depends(settings_dep)
) -> dict[str, str] | JSONResponse:
    # Ready once startup has built the coordinator and its provider clients.
    if getattr(request.app.state, "coordinator", None) is None:
        return JSONResponse({"status": "starting"}, status_code=HTTP_503_SERVICE_UNAVAILABLE)
    return {"status": "ready", "providers": "dummy" if settings.use_dummy_providers else "remote"}
