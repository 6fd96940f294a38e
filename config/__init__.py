"""
Módulo de configuración.
"""

from .settings import (
    ServiceConfig,
    LoggingConfig,
    ConcurrencyConfig,
)

__all__ = [
    "ServiceConfig",
    "LoggingConfig",
    "ConcurrencyConfig",
]
