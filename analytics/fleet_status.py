"""
Fleet status KPIs for the operations dashboard.
"""

from collections import Counter
from datetime import date, datetime, timedelta
from typing import Optional

from api.analytics_models import (
    FleetSnapshot,
    FleetStatusSummary,
    Trip,
    TripActivity,
    TripStatus,
    VehicleStatus,
)
from .base import BaseComponent
from .policy import DAY_LABEL_FORMAT, TRIP_ACTIVITY_DAYS

PENDING_TRIP_STATUSES = (TripStatus.DRAFT, TripStatus.DISPATCHED)


class FleetStatusCalculator(BaseComponent):
    """Counts vehicles by status and derives the utilization rate."""

    def compute(
        self, snapshot: FleetSnapshot, now: Optional[datetime] = None
    ) -> FleetStatusSummary:
        now = self.resolve_now(now)
        active = [v for v in snapshot.vehicles if not v.is_retired]
        by_status = Counter(v.status for v in active)
        total = len(active)
        on_trip = by_status[VehicleStatus.ON_TRIP]

        return FleetStatusSummary(
            total_vehicles=total,
            active_fleet=on_trip,
            available_vehicles=by_status[VehicleStatus.AVAILABLE],
            in_shop=by_status[VehicleStatus.IN_SHOP],
            out_of_service=by_status[VehicleStatus.OUT_OF_SERVICE],
            utilization_rate=self.round_to(self.safe_div(on_trip, total) * 100, 1),
            pending_cargo=sum(1 for t in snapshot.trips if t.status in PENDING_TRIP_STATUSES),
            open_maintenance=sum(1 for m in snapshot.maintenance_logs if not m.is_resolved),
            trip_activity=self.trip_activity(snapshot.trips, now.date()),
        )

    def trip_activity(self, trips: list[Trip], today: date) -> list[TripActivity]:
        """Trips created on each of the last TRIP_ACTIVITY_DAYS UTC days, today last."""
        per_day = Counter(
            self.ensure_utc(t.created_at).date() for t in trips if t.created_at is not None
        )
        days = [today - timedelta(days=offset) for offset in range(TRIP_ACTIVITY_DAYS - 1, -1, -1)]
        return [
            TripActivity(date=day.strftime(DAY_LABEL_FORMAT), count=per_day[day])
            for day in days
        ]
