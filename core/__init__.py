"""
Módulo core del servicio.
Logging estructurado, concurrencia, excepciones y singletons de runtime.
"""

from .runtime import DriverStore, InMemoryDriverStore, driver_store

__all__ = [
    "DriverStore",
    "InMemoryDriverStore",
    "driver_store",
]
