"""
Modelos de datos generales de la API.
"""

from typing import Any, Dict, Optional
from pydantic import BaseModel, Field


# ============================================================================
# RESPONSE MODELS
# ============================================================================

class HealthResponse(BaseModel):
    """Response del health check."""

    status: str = Field(..., description="Estado del servicio")
    service: str = Field(..., description="Nombre del servicio")
    version: str = Field(..., description="Versión desplegada")
    timestamp: str = Field(..., description="Timestamp UTC")
    concurrency: Optional[Dict[str, Any]] = Field(
        None, description="Estadísticas del limitador de concurrencia"
    )


class ErrorResponse(BaseModel):
    """Cuerpo de error homogéneo para 404 / 503."""

    error: str = Field(..., description="Mensaje de error")
    trace_id: str = Field(..., description="Trace ID de la petición")
