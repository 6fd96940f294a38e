"""
Shared test fixtures for the fleet analytics test suite.
"""

import os
import sys
from datetime import datetime, timedelta, timezone

import pytest

# Ensure the repository root is on the path so imports work
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

# Set required env vars before any application imports
os.environ.setdefault("ENVIRONMENT", "testing")
os.environ.setdefault("LOG_LEVEL", "WARNING")
os.environ.setdefault("LOG_FILE", "")
os.environ.setdefault("RATE_LIMITING_ENABLED", "true")

from api.analytics_models import (  # noqa: E402
    DriverSnapshot,
    DriverStatus,
    FuelExpense,
    MaintenanceLog,
    MaintenanceType,
    Trip,
    TripStatus,
    VehicleSnapshot,
)

NOW = datetime(2026, 10, 19, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def make_driver():
    def _make(**overrides) -> DriverSnapshot:
        data = {
            "id": "drv_1",
            "name": "Asha Rao",
            "total_trips": 10,
            "completed_trips": 10,
            "license_expiry": NOW + timedelta(days=365),
            "status": DriverStatus.ON_DUTY,
        }
        data.update(overrides)
        return DriverSnapshot(**data)

    return _make


@pytest.fixture
def make_vehicle():
    def _make(**overrides) -> VehicleSnapshot:
        data = {
            "id": "veh_1",
            "name": "Tata Ace",
            "license_plate": "KA-01-AB-1234",
            "current_odometer": 12000,
            "created_at": NOW - timedelta(days=240),
        }
        data.update(overrides)
        return VehicleSnapshot(**data)

    return _make


@pytest.fixture
def make_log():
    counter = {"n": 0}

    def _make(**overrides) -> MaintenanceLog:
        counter["n"] += 1
        data = {
            "id": f"mnt_{counter['n']}",
            "vehicle_id": "veh_1",
            "type": MaintenanceType.OIL_CHANGE,
            "service_date": NOW - timedelta(days=20),
            "cost": 0,
        }
        data.update(overrides)
        return MaintenanceLog(**data)

    return _make


@pytest.fixture
def make_fuel():
    counter = {"n": 0}

    def _make(**overrides) -> FuelExpense:
        counter["n"] += 1
        data = {
            "id": f"fuel_{counter['n']}",
            "vehicle_id": "veh_1",
            "fuel_date": NOW - timedelta(days=5),
            "liters": 10,
            "cost_per_liter": 100,
            "total_cost": 1000,
            "odometer_at_fuel": 1000,
        }
        data.update(overrides)
        return FuelExpense(**data)

    return _make


@pytest.fixture
def make_trip():
    counter = {"n": 0}

    def _make(**overrides) -> Trip:
        counter["n"] += 1
        data = {
            "id": f"trip_{counter['n']}",
            "vehicle_id": "veh_1",
            "driver_id": "drv_1",
            "status": TripStatus.COMPLETED,
            "start_odometer": 1000,
            "end_odometer": 1500,
            "revenue": 0,
            "completed_at": NOW - timedelta(days=10),
        }
        data.update(overrides)
        return Trip(**data)

    return _make


@pytest.fixture
def fills_for_efficiencies():
    """
    Fuel fills whose consecutive efficiencies are exactly ``efficiencies``.

    The first fill is the baseline and yields no point; fill ``i`` (1-based)
    carries efficiency ``efficiencies[i - 1]`` with 10 liters each.
    """

    def _make(efficiencies, vehicle_id="veh_1", liters=10.0) -> list[FuelExpense]:
        odometer = 1000.0
        fills = [
            FuelExpense(
                id="fill_0",
                vehicle_id=vehicle_id,
                fuel_date=NOW - timedelta(days=len(efficiencies) + 1),
                liters=liters,
                cost_per_liter=100,
                total_cost=liters * 100,
                odometer_at_fuel=odometer,
            )
        ]
        for i, efficiency in enumerate(efficiencies, start=1):
            odometer += efficiency * liters
            fills.append(
                FuelExpense(
                    id=f"fill_{i}",
                    vehicle_id=vehicle_id,
                    fuel_date=NOW - timedelta(days=len(efficiencies) + 1 - i),
                    liters=liters,
                    cost_per_liter=100,
                    total_cost=liters * 100,
                    odometer_at_fuel=odometer,
                )
            )
        return fills

    return _make


@pytest.fixture
def app_client():
    """FastAPI test client."""
    from httpx import AsyncClient, ASGITransport
    from main import app

    transport = ASGITransport(app=app)
    return AsyncClient(transport=transport, base_url="http://test")
