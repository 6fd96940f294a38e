"""
Configuración centralizada del servicio.
Todas las variables de entorno se definen aquí.

Las constantes de política del motor de analítica (pesos del score,
intervalos de servicio, umbrales) NO son configurables y viven en
analytics/policy.py.
"""

import os
from dotenv import load_dotenv

# Cargar variables de entorno
load_dotenv()


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


# ============================================================================
# CONFIGURACIÓN DEL SERVICIO
# ============================================================================
class ServiceConfig:
    """Configuración general del servicio FastAPI."""

    HOST = os.getenv("SERVICE_HOST", "0.0.0.0")
    PORT = int(os.getenv("SERVICE_PORT", "8000"))

    SERVICE_NAME = "fleet-analytics"
    APP_VERSION = "0.1.0"


# ============================================================================
# CONFIGURACIÓN DE LOGGING
# ============================================================================
class LoggingConfig:
    """Configuración del logging estructurado JSON."""

    ENVIRONMENT = os.getenv("ENVIRONMENT", "production")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    # Vacío = solo stdout
    LOG_FILE = os.getenv("LOG_FILE", "")


# ============================================================================
# CONFIGURACIÓN DE CONCURRENCIA
# ============================================================================
class ConcurrencyConfig:
    """Límites para el cálculo del resumen de flota (el endpoint más pesado)."""

    RATE_LIMITING_ENABLED = _env_bool("RATE_LIMITING_ENABLED", "true")
    MAX_CONCURRENT_REQUESTS = int(os.getenv("MAX_CONCURRENT_REQUESTS", "4"))
    SEMAPHORE_TIMEOUT = float(os.getenv("SEMAPHORE_TIMEOUT", "30"))
