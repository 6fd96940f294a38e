"""
Fuel anomaly detector.

Computes the efficiency (km/L) of every fill against the previous one and
flags fills whose z-score lies at least FUEL_Z_THRESHOLD standard
deviations from the vehicle's mean efficiency.
"""

import math
from datetime import datetime
from typing import NamedTuple, Optional

from api.analytics_models import (
    AnomalyType,
    FuelAnomaly,
    FuelAnomalyResult,
    FuelExpense,
)
from .base import BaseComponent
from .policy import (
    FUEL_HIGH_MESSAGE,
    FUEL_LOW_MESSAGE,
    FUEL_MIN_SAMPLES,
    FUEL_Z_THRESHOLD,
)


class EfficiencyPoint(NamedTuple):
    expense_id: str
    fuel_date: datetime
    efficiency: float


class FuelAnomalyDetector(BaseComponent):
    """Flags statistically unusual fuel fills for one vehicle."""

    def detect(
        self, vehicle_id: str, fuel_expenses: list[FuelExpense]
    ) -> FuelAnomalyResult:
        points = self.efficiency_points(fuel_expenses)

        if len(points) < FUEL_MIN_SAMPLES:
            # Too little data to call anything an outlier
            return FuelAnomalyResult(
                vehicle_id=vehicle_id,
                mean_efficiency=points[0].efficiency if points else 0,
                std_dev=0,
                sample_count=len(points),
                anomalies=[],
            )

        values = [p.efficiency for p in points]
        mu = sum(values) / len(values)
        sigma = self.sample_std_dev(values, mu)

        anomalies: list[FuelAnomaly] = []
        for point in points:
            z_score = self.safe_div(point.efficiency - mu, sigma)
            classification = self.classify(z_score)
            if classification is None:
                continue
            anomaly_type, message = classification
            anomalies.append(
                FuelAnomaly(
                    expense_id=point.expense_id,
                    fuel_date=point.fuel_date,
                    efficiency=point.efficiency,
                    z_score=self.round_to(z_score, 2),
                    anomaly_type=anomaly_type,
                    message=message,
                )
            )

        return FuelAnomalyResult(
            vehicle_id=vehicle_id,
            mean_efficiency=self.round_to(mu, 2),
            std_dev=self.round_to(sigma, 2),
            sample_count=len(points),
            anomalies=anomalies,
        )

    @staticmethod
    def efficiency_points(fuel_expenses: list[FuelExpense]) -> list[EfficiencyPoint]:
        """
        km/L for each fill relative to the previous fill, in odometer order.

        Pairs where the odometer did not advance (or liters is not positive)
        produce no point.
        """
        ordered = sorted(fuel_expenses, key=lambda e: e.odometer_at_fuel)
        points: list[EfficiencyPoint] = []

        for prev, curr in zip(ordered, ordered[1:]):
            distance = curr.odometer_at_fuel - prev.odometer_at_fuel
            if distance > 0 and curr.liters > 0:
                points.append(
                    EfficiencyPoint(
                        expense_id=curr.id,
                        fuel_date=curr.fuel_date,
                        efficiency=BaseComponent.round_to(distance / curr.liters, 2),
                    )
                )

        return points

    @staticmethod
    def sample_std_dev(values: list[float], mu: float) -> float:
        """Bessel-corrected standard deviation (n - 1)."""
        if len(values) < 2:
            return 0.0
        variance = sum((v - mu) ** 2 for v in values) / (len(values) - 1)
        return math.sqrt(variance)

    @staticmethod
    def classify(z_score: float) -> Optional[tuple[AnomalyType, str]]:
        """Anomaly type and message for a z-score, or None when it is within range."""
        if abs(z_score) < FUEL_Z_THRESHOLD:
            return None
        if z_score > 0:
            return AnomalyType.HIGH, FUEL_HIGH_MESSAGE
        return AnomalyType.LOW, FUEL_LOW_MESSAGE
