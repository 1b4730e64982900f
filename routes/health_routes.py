"""
Health check endpoints.

GET /       — plain liveness text
GET /health — checks MongoDB connectivity; a failed ping is "unhealthy" (503)
              because no endpoint can work without the database.
"""

from __future__ import annotations

from fastapi import APIRouter, Request, Response
from fastapi.responses import PlainTextResponse

from schemas.dto.responses.common import HealthResponse

router = APIRouter(tags=["health"])


@router.get("/", response_class=PlainTextResponse)
async def root() -> str:
    return "Api running"


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={503: {"model": HealthResponse}},
)
async def health_check(request: Request, response: Response) -> HealthResponse:
    checks: dict[str, str] = {}
    overall = "healthy"

    try:
        db = request.app.state.db
        await db.client.admin.command("ping")
        checks["mongodb"] = "ok"
    except Exception:
        checks["mongodb"] = "error"
        overall = "unhealthy"

    if overall == "unhealthy":
        response.status_code = 503
    return HealthResponse(status=overall, checks=checks)
