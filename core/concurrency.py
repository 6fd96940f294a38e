"""
Control de concurrencia para el cálculo del resumen de flota.

El resumen recorre el historial completo de todos los vehículos; un
semáforo asyncio limita cuántos se calculan a la vez para acotar el uso
de CPU y memoria sin introducir colas ni estado persistente.
"""

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from config import ConcurrencyConfig
from core.structured_logging import get_logger

logger = get_logger(__name__)


class ConcurrencyLimitExceeded(Exception):
    """El servicio está a máxima capacidad y no aceptó la petición a tiempo."""


# ============================================================================
# SEMÁFORO GLOBAL
# ============================================================================
_semaphore: Optional[asyncio.Semaphore] = None
_pending_requests: int = 0
_active_requests: int = 0


def get_semaphore() -> asyncio.Semaphore:
    """Obtiene o crea el semáforo global de concurrencia."""
    global _semaphore
    if _semaphore is None:
        _semaphore = asyncio.Semaphore(ConcurrencyConfig.MAX_CONCURRENT_REQUESTS)
        logger.info("Concurrency semaphore initialized", context={
            "limit": ConcurrencyConfig.MAX_CONCURRENT_REQUESTS,
        })
    return _semaphore


@asynccontextmanager
async def acquire_slot(timeout: Optional[float] = None) -> AsyncIterator[None]:
    """
    Adquiere un slot del semáforo durante el bloque.

    Raises:
        ConcurrencyLimitExceeded: si no hay slot libre tras ``timeout`` segundos
            (por defecto ConcurrencyConfig.SEMAPHORE_TIMEOUT).
    """
    global _pending_requests, _active_requests

    if not ConcurrencyConfig.RATE_LIMITING_ENABLED:
        yield
        return

    timeout = timeout or ConcurrencyConfig.SEMAPHORE_TIMEOUT
    semaphore = get_semaphore()

    _pending_requests += 1
    try:
        await asyncio.wait_for(semaphore.acquire(), timeout=timeout)
    except asyncio.TimeoutError:
        raise ConcurrencyLimitExceeded(
            f"Timeout waiting for slot after {timeout}s. "
            f"Active: {_active_requests}, Pending: {_pending_requests}"
        )
    finally:
        _pending_requests -= 1

    _active_requests += 1
    try:
        yield
    finally:
        _active_requests -= 1
        semaphore.release()


def get_concurrency_stats() -> dict:
    """Estadísticas actuales del limitador (expuestas en /health)."""
    max_concurrent = ConcurrencyConfig.MAX_CONCURRENT_REQUESTS
    return {
        "max_concurrent": max_concurrent,
        "active_requests": _active_requests,
        "pending_requests": _pending_requests,
        "available_slots": max(0, max_concurrent - _active_requests),
        "rate_limiting_enabled": ConcurrencyConfig.RATE_LIMITING_ENABLED,
    }
