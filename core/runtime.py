"""
Singletons de runtime del servicio.

El único estado que el servicio escribe es el safety score persistido de
cada conductor. El store real (base relacional) es un colaborador externo;
aquí se define su contrato y una implementación en memoria.
"""

from abc import ABC, abstractmethod
from threading import Lock
from typing import Optional

from api.analytics_models import DriverSnapshot


class DriverStore(ABC):
    """Contrato mínimo del store de conductores."""

    @abstractmethod
    def get_driver(self, driver_id: str) -> Optional[DriverSnapshot]:
        ...

    @abstractmethod
    def save_safety_score(self, driver_id: str, score: float) -> None:
        """Escritura atómica de un único registro (last-writer-wins)."""
        ...


class InMemoryDriverStore(DriverStore):
    def __init__(self) -> None:
        self._drivers: dict[str, DriverSnapshot] = {}
        self._lock = Lock()

    def upsert(self, driver: DriverSnapshot) -> None:
        with self._lock:
            self._drivers[driver.id] = driver

    def get_driver(self, driver_id: str) -> Optional[DriverSnapshot]:
        with self._lock:
            return self._drivers.get(driver_id)

    def save_safety_score(self, driver_id: str, score: float) -> None:
        with self._lock:
            current = self._drivers[driver_id]
            self._drivers[driver_id] = current.model_copy(update={"safety_score": score})

    def clear(self) -> None:
        with self._lock:
            self._drivers.clear()


# ============================================================================
# DRIVER STORE
# ============================================================================
# En producción, reemplazar por un store respaldado por la base de datos
driver_store: DriverStore = InMemoryDriverStore()
