"""
Rutas generales del servicio (salud y estadísticas).
"""

from datetime import datetime, timezone

from fastapi import APIRouter

from config import ServiceConfig
from core.concurrency import get_concurrency_stats
from core.structured_logging import get_trace_id
from .models import HealthResponse


# ============================================================================
# ROUTER
# ============================================================================
router = APIRouter()


# ============================================================================
# ENDPOINT: GET /health
# ============================================================================
@router.get("/health", response_model=HealthResponse)
async def health_check():
    """Endpoint de salud del servicio."""
    return HealthResponse(
        status="healthy",
        service=ServiceConfig.SERVICE_NAME,
        version=ServiceConfig.APP_VERSION,
        timestamp=datetime.now(timezone.utc).isoformat(),
        concurrency=get_concurrency_stats(),
    )


# ============================================================================
# ENDPOINT: GET /stats
# ============================================================================
@router.get("/stats")
async def stats():
    """Estadísticas de concurrencia de la instancia."""
    return {
        "concurrency": get_concurrency_stats(),
        "trace_id": get_trace_id(),
    }
