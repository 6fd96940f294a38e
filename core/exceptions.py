"""
Excepciones de dominio del servicio.

Las funciones puras del motor no lanzan excepciones ante datos degenerados
(usan fallbacks explícitos); estas excepciones cubren referencias a
entidades inexistentes y se traducen a 404 en la capa HTTP.
"""


class FleetAnalyticsError(Exception):
    """Base de todos los errores del servicio."""


class EntityNotFoundError(FleetAnalyticsError):
    """La entidad referenciada no existe en el store."""

    entity = "entity"

    def __init__(self, entity_id: str):
        self.entity_id = entity_id
        super().__init__(f"{self.entity.capitalize()} not found: {entity_id}")


class DriverNotFoundError(EntityNotFoundError):
    entity = "driver"
