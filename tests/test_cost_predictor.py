"""
Tests for the CostPredictor and its least-squares helper.
"""

from datetime import datetime, timedelta, timezone

import pytest

from analytics import CostPredictor, linear_regression
from analytics.base import BaseComponent
from api.analytics_models import CostTrend, MaintenanceType


def _monthly_fuel(make_fuel, now, costs):
    """One fill per trailing month (oldest first) with the given totals."""
    windows = BaseComponent.trailing_months(now, len(costs))
    return [
        make_fuel(fuel_date=window.start + timedelta(days=2), total_cost=cost)
        for window, cost in zip(windows, costs)
    ]


def test_linear_regression_degenerate_inputs():
    assert linear_regression([]) == (0.0, 0.0)
    assert linear_regression([250.0]) == (0.0, 250.0)


def test_linear_regression_exact_line():
    slope, intercept = linear_regression([3.0, 5.0, 7.0, 9.0])

    assert slope == pytest.approx(2.0)
    assert intercept == pytest.approx(1.0)


def test_history_labels_are_trailing_months(now):
    prediction = CostPredictor().predict("veh_1", [], [], now=now)

    assert [m.month for m in prediction.monthly_history] == [
        "May 2026", "Jun 2026", "Jul 2026", "Aug 2026", "Sep 2026", "Oct 2026",
    ]


def test_flat_costs_are_stable(make_fuel, now):
    fuel = _monthly_fuel(make_fuel, now, [1000] * 6)

    prediction = CostPredictor().predict("veh_1", fuel, [], now=now)

    assert prediction.slope == 0
    assert prediction.predicted_next_month_cost == 1000
    assert prediction.trend == CostTrend.STABLE


def test_increasing_costs(make_fuel, now):
    fuel = _monthly_fuel(make_fuel, now, [100, 200, 300, 400, 500, 600])

    prediction = CostPredictor().predict("veh_1", fuel, [], now=now)

    assert prediction.slope == 100
    assert prediction.predicted_next_month_cost == pytest.approx(700)
    assert prediction.trend == CostTrend.INCREASING


def test_decreasing_costs_floor_at_zero(make_fuel, now):
    fuel = _monthly_fuel(make_fuel, now, [600, 500, 400, 300, 200, 100])

    prediction = CostPredictor().predict("veh_1", fuel, [], now=now)

    assert prediction.slope == -100
    assert prediction.predicted_next_month_cost == 0
    assert prediction.trend == CostTrend.DECREASING


def test_slope_at_threshold_is_stable():
    assert CostPredictor.trend_for(50.0) == CostTrend.STABLE
    assert CostPredictor.trend_for(-50.0) == CostTrend.STABLE
    assert CostPredictor.trend_for(50.01) == CostTrend.INCREASING
    assert CostPredictor.trend_for(-50.01) == CostTrend.DECREASING


def test_fuel_and_maintenance_summed_per_month(make_fuel, make_log, now):
    window = BaseComponent.month_window(now)
    fuel = [make_fuel(fuel_date=window.start, total_cost=300)]
    logs = [
        make_log(service_date=window.end, cost=200),
        make_log(type=MaintenanceType.OTHER, service_date=window.start + timedelta(days=1), cost=50),
    ]

    prediction = CostPredictor().predict("veh_1", fuel, logs, now=now)

    assert prediction.monthly_history[-1].total_cost == 550
    assert all(m.total_cost == 0 for m in prediction.monthly_history[:-1])


def test_records_outside_window_are_ignored(make_fuel, now):
    fuel = [make_fuel(fuel_date=now - timedelta(days=220), total_cost=9999)]

    prediction = CostPredictor().predict("veh_1", fuel, [], now=now)

    assert sum(m.total_cost for m in prediction.monthly_history) == 0
    assert prediction.predicted_next_month_cost == 0


def test_naive_dates_are_treated_as_utc(make_fuel, now):
    naive = BaseComponent.month_window(now).start.replace(tzinfo=None)

    prediction = CostPredictor().predict(
        "veh_1", [make_fuel(fuel_date=naive, total_cost=120)], [], now=now
    )

    assert prediction.monthly_history[-1].total_cost == 120


def test_zero_months_back(make_fuel, now):
    prediction = CostPredictor().predict(
        "veh_1", [make_fuel(total_cost=500)], [], months_back=0, now=now
    )

    assert prediction.monthly_history == []
    assert prediction.slope == 0
    assert prediction.predicted_next_month_cost == 0
    assert prediction.trend == CostTrend.STABLE


def test_single_month_predicts_its_own_total(make_fuel, now):
    prediction = CostPredictor().predict(
        "veh_1", [make_fuel(total_cost=480)], [], months_back=1, now=now
    )

    assert prediction.slope == 0
    assert prediction.predicted_next_month_cost == 480


def test_offset_timestamps_bucket_by_utc_month(make_fuel, make_log, now):
    ist = timezone(timedelta(hours=5, minutes=30))
    cdt = timezone(timedelta(hours=-5))
    # 00:30 on 1 Oct in India is still 30 Sep in UTC
    fuel = [make_fuel(fuel_date=datetime(2026, 10, 1, 0, 30, tzinfo=ist), total_cost=400)]
    # 23:30 on 30 Sep in Chicago is already 1 Oct in UTC
    logs = [make_log(service_date=datetime(2026, 9, 30, 23, 30, tzinfo=cdt), cost=250)]

    prediction = CostPredictor().predict("veh_1", fuel, logs, now=now)
    history = {m.month: m.total_cost for m in prediction.monthly_history}

    assert history["Sep 2026"] == 400
    assert history["Oct 2026"] == 250
