"""
Maintenance-due predictor.

For every monitored maintenance type, projects the odometer reading at
which the next service is due and how many days away that is, based on the
vehicle's service history and its average daily distance.
"""

from datetime import datetime
from typing import Optional

from api.analytics_models import (
    MaintenanceLog,
    MaintenancePrediction,
    MaintenanceType,
    MaintenanceUrgency,
)
from .base import BaseComponent
from .policy import (
    DEFAULT_DAILY_KM,
    MONITORED_MAINTENANCE_TYPES,
    SERVICE_INTERVALS_KM,
    URGENCY_DUE_SOON_MAX_KM,
    URGENCY_OVERDUE_MAX_KM,
    URGENCY_UPCOMING_MAX_KM,
)


class MaintenancePredictor(BaseComponent):
    """Predicts when each monitored service type is next due."""

    def predict(
        self,
        current_odometer: float,
        maintenance_logs: list[MaintenanceLog],
        vehicle_created_at: datetime,
        base_odometer: float = 0,
        now: Optional[datetime] = None,
    ) -> list[MaintenancePrediction]:
        now = self.resolve_now(now)
        avg_daily_km = self.average_daily_km(
            current_odometer, base_odometer, vehicle_created_at, now
        )

        return [
            self._predict_type(
                maintenance_type, current_odometer, maintenance_logs, avg_daily_km, now
            )
            for maintenance_type in MONITORED_MAINTENANCE_TYPES
        ]

    def average_daily_km(
        self,
        current_odometer: float,
        base_odometer: float,
        vehicle_created_at: datetime,
        now: datetime,
    ) -> float:
        # At least one day, so a vehicle registered today does not divide by zero
        days_since_creation = max(
            1.0, self.days_between(now, self.ensure_utc(vehicle_created_at))
        )
        total_km = current_odometer - base_odometer
        if total_km <= 0:
            return DEFAULT_DAILY_KM
        return total_km / days_since_creation

    def _predict_type(
        self,
        maintenance_type: MaintenanceType,
        current_odometer: float,
        logs: list[MaintenanceLog],
        avg_daily_km: float,
        now: datetime,
    ) -> MaintenancePrediction:
        interval_km = SERVICE_INTERVALS_KM[maintenance_type]
        last_log = self._most_recent(logs, maintenance_type)
        last_service_odometer: Optional[float] = None

        if last_log is not None:
            if last_log.next_service_km:
                next_due_km = last_log.next_service_km
            else:
                # Walk back from today's odometer at the average pace
                days_since_service = max(
                    0.0, self.days_between(now, self.ensure_utc(last_log.service_date))
                )
                last_service_odometer = max(
                    0.0, current_odometer - days_since_service * avg_daily_km
                )
                next_due_km = last_service_odometer + interval_km
        else:
            # No history: assume it was serviced at every interval so far
            next_due_km = current_odometer - (current_odometer % interval_km) + interval_km

        km_until_due = next_due_km - current_odometer
        estimated_days = (
            self.round_half_up(km_until_due / avg_daily_km) if avg_daily_km > 0 else None
        )

        return MaintenancePrediction(
            type=maintenance_type,
            last_service_odometer=last_service_odometer,
            last_service_date=last_log.service_date if last_log else None,
            next_service_due_at_km=max(0.0, next_due_km),
            km_until_due=km_until_due,
            urgency=self.urgency_for(km_until_due),
            estimated_days_until_due=estimated_days,
        )

    @staticmethod
    def _most_recent(
        logs: list[MaintenanceLog], maintenance_type: MaintenanceType
    ) -> Optional[MaintenanceLog]:
        of_type = [log for log in logs if log.type == maintenance_type]
        if not of_type:
            return None
        # sorted() is stable: equal dates keep their input order
        return sorted(
            of_type,
            key=lambda log: BaseComponent.ensure_utc(log.service_date),
            reverse=True,
        )[0]

    @staticmethod
    def urgency_for(km_until_due: float) -> MaintenanceUrgency:
        if km_until_due <= URGENCY_OVERDUE_MAX_KM:
            return MaintenanceUrgency.OVERDUE
        if km_until_due <= URGENCY_DUE_SOON_MAX_KM:
            return MaintenanceUrgency.DUE_SOON
        if km_until_due <= URGENCY_UPCOMING_MAX_KM:
            return MaintenanceUrgency.UPCOMING
        return MaintenanceUrgency.OK
