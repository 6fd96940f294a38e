"""
Analytics Aggregator - fleet-wide composition of the analytics components.

Produces the AnalyticsSummary:
- Fuel efficiency per vehicle (within the requested date range)
- Trailing 6-month fuel / maintenance cost breakdown
- ROI per vehicle (full history)
- Stored driver safety scores
- KPI summary (average efficiency, total cost, top vehicle, top driver)
- Per-vehicle insights: maintenance due, fuel anomalies, cost forecast
"""

import time
from collections import defaultdict
from datetime import datetime
from typing import Optional

from api.analytics_models import (
    AnalyticsSummary,
    CostBreakdownData,
    DriverScoreData,
    FleetSnapshot,
    FuelEfficiencyData,
    FuelExpense,
    KpiSummary,
    MaintenanceLog,
    TopDriver,
    TopVehicle,
    Trip,
    TripStatus,
    VehicleInsights,
    VehicleRoiData,
    VehicleSnapshot,
)
from core.structured_logging import entity_context, get_logger
from .base import BaseComponent
from .cost_predictor import CostPredictor
from .fuel_anomaly_detector import FuelAnomalyDetector
from .maintenance_predictor import MaintenancePredictor
from .policy import COST_BREAKDOWN_MONTHS, DEFAULT_RANGE_MONTHS

logger = get_logger(__name__)


class _VehicleHistory:
    """Records of one vehicle, grouped once per aggregation."""

    def __init__(self) -> None:
        self.trips: list[Trip] = []
        self.fuel_expenses: list[FuelExpense] = []
        self.maintenance_logs: list[MaintenanceLog] = []


class AnalyticsAggregator(BaseComponent):
    """Composition root: runs every component across the whole fleet."""

    def __init__(self):
        self.maintenance_predictor = MaintenancePredictor()
        self.fuel_anomaly_detector = FuelAnomalyDetector()
        self.cost_predictor = CostPredictor()

    def aggregate(
        self,
        snapshot: FleetSnapshot,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
        include_vehicle_insights: bool = True,
        now: Optional[datetime] = None,
    ) -> AnalyticsSummary:
        start_time = time.time()
        now = self.resolve_now(now)
        end = self.ensure_utc(end_date) if end_date else now
        start = (
            self.ensure_utc(start_date)
            if start_date
            else self.shift_months(now, -DEFAULT_RANGE_MONTHS)
        )

        vehicles = [v for v in snapshot.vehicles if not v.is_retired]
        histories = self._group_by_vehicle(snapshot)
        errors: list[str] = []

        fuel_efficiency = [
            self._fuel_efficiency(v, histories[v.id], start, end) for v in vehicles
        ]
        cost_breakdown = self._cost_breakdown(snapshot, now)
        vehicle_roi = [self._vehicle_roi(v, histories[v.id]) for v in vehicles]
        driver_scores = [
            DriverScoreData(driver_id=d.id, name=d.name, score=d.safety_score)
            for d in snapshot.drivers
        ]

        insights: list[VehicleInsights] = []
        if include_vehicle_insights:
            for vehicle in vehicles:
                # One vehicle's bad data must not abort the fleet summary
                try:
                    insights.append(self._vehicle_insights(vehicle, histories[vehicle.id], now))
                except Exception as e:
                    with entity_context(vehicle_id=vehicle.id):
                        logger.error("Vehicle insights failed", exc_info=True, context={
                            "error": str(e),
                            "error_type": type(e).__name__,
                        })
                    errors.append(f"Vehicle {vehicle.id}: {type(e).__name__}: {e}")

        summary = AnalyticsSummary(
            start_date=start,
            end_date=end,
            computed_at=now,
            fuel_efficiency_per_vehicle=fuel_efficiency,
            cost_breakdown_per_month=cost_breakdown,
            vehicle_roi=vehicle_roi,
            driver_safety_scores=driver_scores,
            kpi_summary=self._kpi_summary(fuel_efficiency, cost_breakdown, vehicle_roi, driver_scores),
            vehicle_insights=insights,
            errors=errors,
        )

        logger.info("Fleet analytics summary computed", context={
            "vehicles": len(vehicles),
            "drivers": len(driver_scores),
            "insights": len(insights),
            "errors": len(errors),
            "duration_ms": round((time.time() - start_time) * 1000, 2),
        })
        return summary

    # =========================================================================
    # PRIVATE
    # =========================================================================

    @staticmethod
    def _group_by_vehicle(snapshot: FleetSnapshot) -> defaultdict[str, _VehicleHistory]:
        histories: defaultdict[str, _VehicleHistory] = defaultdict(_VehicleHistory)
        for trip in snapshot.trips:
            histories[trip.vehicle_id].trips.append(trip)
        for expense in snapshot.fuel_expenses:
            histories[expense.vehicle_id].fuel_expenses.append(expense)
        for log in snapshot.maintenance_logs:
            histories[log.vehicle_id].maintenance_logs.append(log)
        return histories

    def _in_range(self, moment: Optional[datetime], start: datetime, end: datetime) -> bool:
        return moment is not None and start <= self.ensure_utc(moment) <= end

    def _fuel_efficiency(
        self,
        vehicle: VehicleSnapshot,
        history: _VehicleHistory,
        start: datetime,
        end: datetime,
    ) -> FuelEfficiencyData:
        total_distance = sum(
            t.end_odometer - t.start_odometer
            for t in history.trips
            if t.status == TripStatus.COMPLETED
            and self._in_range(t.completed_at, start, end)
            and t.start_odometer is not None
            and t.end_odometer is not None
        )
        total_liters = sum(
            e.liters for e in history.fuel_expenses if self._in_range(e.fuel_date, start, end)
        )
        return FuelEfficiencyData(
            vehicle_id=vehicle.id,
            vehicle_name=vehicle.name,
            license_plate=vehicle.license_plate,
            km_per_liter=self.round_to(self.safe_div(total_distance, total_liters), 2),
        )

    def _cost_breakdown(self, snapshot: FleetSnapshot, now: datetime) -> list[CostBreakdownData]:
        """Fixed trailing window ending this month, independent of the requested range."""
        breakdown = []
        for window in self.trailing_months(now, COST_BREAKDOWN_MONTHS):
            fuel_cost = sum(
                e.total_cost for e in snapshot.fuel_expenses if window.contains(e.fuel_date)
            )
            maintenance_cost = sum(
                m.cost for m in snapshot.maintenance_logs if window.contains(m.service_date)
            )
            breakdown.append(
                CostBreakdownData(
                    month=window.label,
                    fuel_cost=self.round_to(fuel_cost, 2),
                    maintenance_cost=self.round_to(maintenance_cost, 2),
                    total_cost=self.round_to(fuel_cost + maintenance_cost, 2),
                )
            )
        return breakdown

    def _vehicle_roi(self, vehicle: VehicleSnapshot, history: _VehicleHistory) -> VehicleRoiData:
        total_revenue = sum(
            t.revenue or 0 for t in history.trips if t.status == TripStatus.COMPLETED
        )
        fuel_cost = sum(e.total_cost for e in history.fuel_expenses)
        maintenance_cost = sum(m.cost for m in history.maintenance_logs)
        total_cost = fuel_cost + maintenance_cost

        return VehicleRoiData(
            vehicle_id=vehicle.id,
            vehicle_name=vehicle.name,
            license_plate=vehicle.license_plate,
            total_revenue=self.round_to(total_revenue, 2),
            total_cost=self.round_to(total_cost, 2),
            acquisition_cost=vehicle.acquisition_cost,
            roi=self.round_to(self.safe_div(total_revenue - total_cost, total_cost), 4),
        )

    def _vehicle_insights(
        self, vehicle: VehicleSnapshot, history: _VehicleHistory, now: datetime
    ) -> VehicleInsights:
        with entity_context(vehicle_id=vehicle.id):
            return VehicleInsights(
                vehicle_id=vehicle.id,
                maintenance=self.maintenance_predictor.predict(
                    vehicle.current_odometer,
                    history.maintenance_logs,
                    vehicle.created_at,
                    now=now,
                ),
                fuel_anomalies=self.fuel_anomaly_detector.detect(
                    vehicle.id, history.fuel_expenses
                ),
                cost_prediction=self.cost_predictor.predict(
                    vehicle.id,
                    history.fuel_expenses,
                    history.maintenance_logs,
                    now=now,
                ),
            )

    def _kpi_summary(
        self,
        fuel_efficiency: list[FuelEfficiencyData],
        cost_breakdown: list[CostBreakdownData],
        vehicle_roi: list[VehicleRoiData],
        driver_scores: list[DriverScoreData],
    ) -> KpiSummary:
        valid_efficiency = [v.km_per_liter for v in fuel_efficiency if v.km_per_liter > 0]
        avg_efficiency = self.safe_div(sum(valid_efficiency), len(valid_efficiency))

        # max() keeps the first of equal elements, i.e. input order breaks ties
        top_vehicle = max(vehicle_roi, key=lambda v: v.roi, default=None)
        top_driver = max(driver_scores, key=lambda d: d.score, default=None)

        return KpiSummary(
            avg_efficiency=self.round_to(avg_efficiency, 2),
            total_cost=self.round_to(sum(m.total_cost for m in cost_breakdown), 2),
            top_vehicle=(
                TopVehicle(vehicle_id=top_vehicle.vehicle_id, name=top_vehicle.vehicle_name, roi=top_vehicle.roi)
                if top_vehicle
                else None
            ),
            top_driver=(
                TopDriver(driver_id=top_driver.driver_id, name=top_driver.name, score=top_driver.score)
                if top_driver
                else None
            ),
        )
