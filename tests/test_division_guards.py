"""
Every division in the analytics engine has an explicit fallback for a zero
denominator. One test per division site.
"""

import math
from datetime import timedelta

from analytics import (
    AnalyticsAggregator,
    CostPredictor,
    FleetStatusCalculator,
    FuelAnomalyDetector,
    MaintenancePredictor,
    SafetyScorer,
    linear_regression,
)
from analytics.base import BaseComponent
from api.analytics_models import FleetSnapshot


def _assert_finite(*values):
    for value in values:
        assert not math.isnan(value)
        assert not math.isinf(value)


def test_safe_div_default():
    assert BaseComponent.safe_div(5, 0) == 0.0
    assert BaseComponent.safe_div(5, 0, default=1.0) == 1.0
    assert BaseComponent.safe_div(6, 3) == 2.0


def test_completion_rate_without_trips(make_driver, now):
    breakdown = SafetyScorer().compute(
        make_driver(total_trips=0, completed_trips=0), now=now
    )

    assert breakdown.completion_rate == 1.0


def test_average_daily_km_for_vehicle_created_now(now):
    avg = MaintenancePredictor().average_daily_km(300, 0, now, now)

    assert avg == 300


def test_average_daily_km_without_distance(now):
    avg = MaintenancePredictor().average_daily_km(0, 0, now - timedelta(days=30), now)

    assert avg == 50.0


def test_estimated_days_never_divides_by_zero(now):
    for prediction in MaintenancePredictor().predict(0, [], now, now=now):
        assert prediction.estimated_days_until_due is not None


def test_z_score_with_zero_spread(fills_for_efficiencies):
    result = FuelAnomalyDetector().detect("veh_1", fills_for_efficiencies([9.0] * 5))

    _assert_finite(result.mean_efficiency, result.std_dev)
    assert result.anomalies == []


def test_mean_efficiency_without_points():
    result = FuelAnomalyDetector().detect("veh_1", [])

    assert result.mean_efficiency == 0


def test_regression_without_points():
    assert linear_regression([]) == (0.0, 0.0)


def test_regression_with_single_point():
    slope, intercept = linear_regression([42.0])

    assert slope == 0.0
    assert intercept == 42.0


def test_cost_prediction_without_history(now):
    prediction = CostPredictor().predict("veh_1", [], [], months_back=1, now=now)

    _assert_finite(prediction.slope, prediction.predicted_next_month_cost)


def test_fleet_efficiency_without_fuel(make_vehicle, make_trip, now):
    snapshot = FleetSnapshot(vehicles=[make_vehicle()], trips=[make_trip()])

    summary = AnalyticsAggregator().aggregate(snapshot, now=now)

    assert summary.fuel_efficiency_per_vehicle[0].km_per_liter == 0


def test_roi_without_cost(make_vehicle, now):
    summary = AnalyticsAggregator().aggregate(FleetSnapshot(vehicles=[make_vehicle()]), now=now)

    assert summary.vehicle_roi[0].roi == 0


def test_average_efficiency_without_valid_vehicles(make_vehicle, now):
    summary = AnalyticsAggregator().aggregate(FleetSnapshot(vehicles=[make_vehicle()]), now=now)

    assert summary.kpi_summary.avg_efficiency == 0


def test_utilization_without_vehicles():
    assert FleetStatusCalculator().compute(FleetSnapshot()).utilization_rate == 0
