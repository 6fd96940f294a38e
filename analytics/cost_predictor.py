"""
Operating cost predictor.

Builds a trailing monthly cost history (fuel + maintenance) for a vehicle
and extrapolates next month's cost with an ordinary least-squares line.
"""

from datetime import datetime
from typing import Optional

from api.analytics_models import (
    CostPrediction,
    CostTrend,
    FuelExpense,
    MaintenanceLog,
    MonthlyCost,
)
from .base import BaseComponent
from .policy import (
    COST_HISTORY_MONTHS,
    COST_TREND_DECREASING_SLOPE,
    COST_TREND_INCREASING_SLOPE,
)


def linear_regression(values: list[float]) -> tuple[float, float]:
    """
    Least-squares fit of ``values`` against x = 1..n.

    Returns (slope, intercept). Empty input gives (0, 0); a degenerate
    denominator (n = 1) gives a flat line through the mean.
    """
    n = len(values)
    if n == 0:
        return 0.0, 0.0

    xs = range(1, n + 1)
    sum_x = sum(xs)
    sum_y = sum(values)
    sum_xy = sum(x * y for x, y in zip(xs, values))
    sum_x2 = sum(x * x for x in xs)

    denominator = n * sum_x2 - sum_x * sum_x
    if denominator == 0:
        return 0.0, sum_y / n

    slope = (n * sum_xy - sum_x * sum_y) / denominator
    intercept = (sum_y - slope * sum_x) / n
    return slope, intercept


class CostPredictor(BaseComponent):
    """Forecasts next month's operating cost for one vehicle."""

    def predict(
        self,
        vehicle_id: str,
        fuel_expenses: list[FuelExpense],
        maintenance_logs: list[MaintenanceLog],
        months_back: int = COST_HISTORY_MONTHS,
        now: Optional[datetime] = None,
    ) -> CostPrediction:
        now = self.resolve_now(now)

        history: list[MonthlyCost] = []
        for window in self.trailing_months(now, months_back):
            fuel_cost = sum(e.total_cost for e in fuel_expenses if window.contains(e.fuel_date))
            maintenance_cost = sum(
                m.cost for m in maintenance_logs if window.contains(m.service_date)
            )
            history.append(
                MonthlyCost(
                    month=window.label,
                    total_cost=self.round_to(fuel_cost + maintenance_cost, 2),
                )
            )

        slope, intercept = linear_regression([m.total_cost for m in history])
        # One step past the observed window; costs cannot go negative
        predicted = max(0.0, slope * (months_back + 1) + intercept)

        return CostPrediction(
            vehicle_id=vehicle_id,
            monthly_history=history,
            slope=self.round_to(slope, 2),
            predicted_next_month_cost=self.round_to(predicted, 2),
            trend=self.trend_for(slope),
        )

    @staticmethod
    def trend_for(slope: float) -> CostTrend:
        if slope > COST_TREND_INCREASING_SLOPE:
            return CostTrend.INCREASING
        if slope < COST_TREND_DECREASING_SLOPE:
            return CostTrend.DECREASING
        return CostTrend.STABLE
