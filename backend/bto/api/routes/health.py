"""Health & Readiness Probes — liveness and readiness endpoints.

Invariants:
    - GET /health/ always returns 200 if process is up (liveness)
    - GET /health/ready returns 503 until the graph is fully resolved (readiness)

Design Decisions:
    - Readiness reports the load diagnostic count so skipped records are visible
      without scraping logs
"""

import logging

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from bto.api.dependencies import get_graph
from bto.core.domain_types import LoadStage
from bto.core.housing_graph import HousingGraph

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/health", tags=["health"])


@router.get("/", status_code=status.HTTP_200_OK)
async def health_check():
    """Basic liveness probe. Returns 200 if the process is up."""
    return {"status": "healthy", "service": "bto-portal-api", "version": "1.0.0"}


@router.get("/ready")
async def readiness_check(graph: HousingGraph = Depends(get_graph)):
    if graph.stage is not LoadStage.RESOLVED:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "not_ready", "reason": f"load_stage_{graph.stage.value}"},
        )
    return {
        "status": "ready",
        "checks": {
            "users": len(graph.users),
            "projects": len(graph.projects),
            "applications": len(graph.applications),
            "enquiries": len(graph.enquiries),
            "load_diagnostics": len(graph.diagnostics),
        },
    }
