"""
Tenant Notes Backend — Health Check Routes
==========================================

What:  Liveness and readiness probes.
Who:   Load balancers, container orchestrators, uptime monitors.

    GET /health        Liveness. Always 200 {"status": "ok"}; touches nothing.
    GET /health/ready  Readiness. Runs SELECT 1; 503 when the database is
                       unreachable so traffic is routed elsewhere.
"""

import logging

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from sqlalchemy import text

from tenant_notes import database
from tenant_notes.schemas.common import HealthResponse, ReadinessResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/health", tags=["Health"])


@router.get("", response_model=HealthResponse, summary="Liveness probe")
async def health_check() -> HealthResponse:
    return HealthResponse(status="ok")


@router.get(
    "/ready",
    response_model=ReadinessResponse,
    responses={503: {"description": "Database unreachable", "model": ReadinessResponse}},
    summary="Readiness probe",
)
async def readiness_check():
    try:
        async with database.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception as e:
        logger.warning("Readiness check: database unreachable: %s", str(e))
        return JSONResponse(
            status_code=503,
            content=ReadinessResponse(status="unavailable", database="disconnected").model_dump(),
        )
    return ReadinessResponse(status="ok", database="connected")
