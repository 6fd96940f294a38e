"""
Punto de entrada principal del servicio FastAPI.
Inicializa logging, la aplicación, el middleware de trazas y las rutas.
"""

import uuid

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from config import LoggingConfig, ServiceConfig
from core.concurrency import ConcurrencyLimitExceeded
from core.exceptions import EntityNotFoundError
from core.structured_logging import get_logger, get_trace_id, set_trace_id, setup_logging
from api.analytics_routes import analytics_router
from api.models import ErrorResponse
from api.routes import router


setup_logging(
    service=ServiceConfig.SERVICE_NAME,
    environment=LoggingConfig.ENVIRONMENT,
    log_level=LoggingConfig.LOG_LEVEL,
    log_file=LoggingConfig.LOG_FILE or None,
)
logger = get_logger(__name__)


# ============================================================================
# FASTAPI APP
# ============================================================================
app = FastAPI(
    title="Fleet Analytics Service",
    description="Motor de analítica derivada para operaciones de flota",
    version=ServiceConfig.APP_VERSION,
)


def _trace_id_from_headers(request: Request) -> str:
    # W3C traceparent: version-traceid-parentid-flags
    traceparent = request.headers.get("traceparent", "")
    parts = traceparent.split("-")
    if len(parts) == 4 and len(parts[1]) == 32:
        return parts[1]
    return request.headers.get("x-trace-id") or uuid.uuid4().hex


@app.middleware("http")
async def trace_middleware(request: Request, call_next):
    set_trace_id(_trace_id_from_headers(request))
    response = await call_next(request)
    response.headers["x-trace-id"] = get_trace_id()
    if "traceparent" in request.headers:
        response.headers["traceparent"] = request.headers["traceparent"]
    return response


# ============================================================================
# EXCEPTION HANDLERS
# ============================================================================
@app.exception_handler(EntityNotFoundError)
async def entity_not_found_handler(request: Request, exc: EntityNotFoundError):
    return JSONResponse(
        status_code=404,
        content=ErrorResponse(error=str(exc), trace_id=get_trace_id()).model_dump(),
    )


@app.exception_handler(ConcurrencyLimitExceeded)
async def capacity_handler(request: Request, exc: ConcurrencyLimitExceeded):
    logger.warning("Request rejected at capacity", context={"path": request.url.path})
    return JSONResponse(
        status_code=503,
        content=ErrorResponse(error=str(exc), trace_id=get_trace_id()).model_dump(),
    )


# Registrar rutas
app.include_router(router)
app.include_router(analytics_router)


# ============================================================================
# MAIN (para desarrollo local)
# ============================================================================
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host=ServiceConfig.HOST,
        port=ServiceConfig.PORT,
        reload=True,
    )
