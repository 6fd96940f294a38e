"""
Tests for the FuelAnomalyDetector.
"""

import random

import pytest

from analytics import FuelAnomalyDetector
from analytics.base import BaseComponent
from analytics.policy import FUEL_HIGH_MESSAGE, FUEL_LOW_MESSAGE
from api.analytics_models import AnomalyType


def test_no_fills_yields_empty_result():
    result = FuelAnomalyDetector().detect("veh_1", [])

    assert result.mean_efficiency == 0
    assert result.std_dev == 0
    assert result.sample_count == 0
    assert result.anomalies == []


def test_single_fill_has_no_efficiency_point(make_fuel):
    result = FuelAnomalyDetector().detect("veh_1", [make_fuel()])

    assert result.sample_count == 0
    assert result.mean_efficiency == 0


def test_fewer_than_three_points_never_flags(fills_for_efficiencies):
    result = FuelAnomalyDetector().detect("veh_1", fills_for_efficiencies([8.0, 40.0]))

    assert result.sample_count == 2
    assert result.mean_efficiency == 8.0
    assert result.std_dev == 0
    assert result.anomalies == []


def test_single_outlier_in_small_sample_is_not_flagged(fills_for_efficiencies):
    # With five points the largest reachable |z| is (n - 1) / sqrt(n) ~ 1.79
    result = FuelAnomalyDetector().detect(
        "veh_1", fills_for_efficiencies([10, 10, 10, 10, 50])
    )

    assert result.sample_count == 5
    assert result.mean_efficiency == 18.0
    assert result.anomalies == []


def test_high_efficiency_outlier_flagged(fills_for_efficiencies):
    result = FuelAnomalyDetector().detect("veh_1", fills_for_efficiencies([10] * 9 + [50]))

    assert result.mean_efficiency == 14.0
    assert result.std_dev == 12.65
    assert len(result.anomalies) == 1

    anomaly = result.anomalies[0]
    assert anomaly.expense_id == "fill_10"
    assert anomaly.efficiency == 50.0
    assert anomaly.z_score == 2.85
    assert anomaly.anomaly_type == AnomalyType.HIGH
    assert anomaly.message == FUEL_HIGH_MESSAGE


def test_low_efficiency_outlier_flagged(fills_for_efficiencies):
    result = FuelAnomalyDetector().detect("veh_1", fills_for_efficiencies([10] * 9 + [1]))

    assert len(result.anomalies) == 1
    anomaly = result.anomalies[0]
    assert anomaly.anomaly_type == AnomalyType.LOW
    assert anomaly.z_score == -2.85
    assert anomaly.message == FUEL_LOW_MESSAGE


def test_anomalies_reported_in_odometer_order(fills_for_efficiencies):
    efficiencies = [10] * 5 + [1] + [10] * 9 + [19] + [10] * 6

    result = FuelAnomalyDetector().detect("veh_1", fills_for_efficiencies(efficiencies))

    assert [a.expense_id for a in result.anomalies] == ["fill_6", "fill_16"]
    assert [a.anomaly_type for a in result.anomalies] == [AnomalyType.LOW, AnomalyType.HIGH]


def test_input_order_does_not_matter(fills_for_efficiencies):
    fills = fills_for_efficiencies([10] * 9 + [50])
    shuffled = list(fills)
    random.Random(7).shuffle(shuffled)

    detector = FuelAnomalyDetector()
    assert detector.detect("veh_1", shuffled) == detector.detect("veh_1", fills)


def test_identical_efficiencies_have_zero_spread(fills_for_efficiencies):
    result = FuelAnomalyDetector().detect("veh_1", fills_for_efficiencies([12.0] * 4))

    assert result.std_dev == 0
    assert result.anomalies == []


def test_non_advancing_odometer_produces_no_point(make_fuel):
    fills = [
        make_fuel(odometer_at_fuel=1000),
        make_fuel(odometer_at_fuel=1000),
        make_fuel(odometer_at_fuel=1100, liters=10),
    ]

    points = FuelAnomalyDetector.efficiency_points(fills)

    assert len(points) == 1
    assert points[0].efficiency == 10.0


def test_efficiency_rounded_to_two_decimals(make_fuel):
    fills = [make_fuel(odometer_at_fuel=0), make_fuel(odometer_at_fuel=100, liters=3)]

    assert FuelAnomalyDetector.efficiency_points(fills)[0].efficiency == 33.33


def test_efficiency_tie_rounds_up(make_fuel):
    # 9 km on 8 L = 1.125 km/L
    fills = [make_fuel(odometer_at_fuel=0), make_fuel(odometer_at_fuel=9, liters=8)]

    assert FuelAnomalyDetector.efficiency_points(fills)[0].efficiency == 1.13


@pytest.mark.parametrize(
    "value,places,expected",
    [
        (1.125, 2, 1.13),
        (-1.125, 2, -1.13),
        (40.25, 1, 40.3),
        (0.875, 2, 0.88),
        (2.675, 2, 2.67),
        (0.0, 2, 0.0),
    ],
)
def test_round_to_ties_away_from_zero(value, places, expected):
    # 2.675 is stored just below the tie, so it rounds down
    assert BaseComponent.round_to(value, places) == expected


@pytest.mark.parametrize(
    "z,expected",
    [
        (2.0, AnomalyType.HIGH),
        (-2.0, AnomalyType.LOW),
        (3.5, AnomalyType.HIGH),
        (-4.1, AnomalyType.LOW),
        (1.99, None),
        (-1.99, None),
        (0.0, None),
    ],
)
def test_classify_threshold_is_inclusive(z, expected):
    classification = FuelAnomalyDetector.classify(z)

    if expected is None:
        assert classification is None
    else:
        assert classification[0] == expected


def test_message_matches_anomaly_type():
    assert FuelAnomalyDetector.classify(2.5) == (AnomalyType.HIGH, FUEL_HIGH_MESSAGE)
    assert FuelAnomalyDetector.classify(-2.5) == (AnomalyType.LOW, FUEL_LOW_MESSAGE)
