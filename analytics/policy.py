"""
Fixed policy constants shared by the analytics components.

Business rules rather than tunables: they live outside config/settings.py
and are never read from the environment.
"""

from api.analytics_models import MaintenanceType

# ---------------------------------------------------------------------------
# Safety score
# ---------------------------------------------------------------------------
SAFETY_BASE_POINTS = 15
SAFETY_COMPLETION_WEIGHT = 60
SAFETY_LICENSE_WEIGHT = 25
SAFETY_SUSPENSION_PENALTY = 25
SAFETY_SCORE_MIN = 0.0
SAFETY_SCORE_MAX = 100.0
# Drivers without trips are not penalised
NEW_DRIVER_COMPLETION_RATE = 1.0
LICENSE_EXPIRY_WARNING_DAYS = 30

# ---------------------------------------------------------------------------
# Maintenance
# ---------------------------------------------------------------------------
SERVICE_INTERVALS_KM: dict[MaintenanceType, int] = {
    MaintenanceType.OIL_CHANGE: 5000,
    MaintenanceType.TIRE_ROTATION: 10000,
    MaintenanceType.BRAKE_SERVICE: 20000,
    MaintenanceType.ENGINE_REPAIR: 30000,
    MaintenanceType.INSPECTION: 15000,
    MaintenanceType.OTHER: 10000,
}

# OTHER has an interval but no prediction
MONITORED_MAINTENANCE_TYPES: tuple[MaintenanceType, ...] = (
    MaintenanceType.OIL_CHANGE,
    MaintenanceType.TIRE_ROTATION,
    MaintenanceType.BRAKE_SERVICE,
    MaintenanceType.ENGINE_REPAIR,
    MaintenanceType.INSPECTION,
)

DEFAULT_DAILY_KM = 50.0

# Upper bounds (inclusive) of km remaining for each tier
URGENCY_OVERDUE_MAX_KM = 0
URGENCY_DUE_SOON_MAX_KM = 500
URGENCY_UPCOMING_MAX_KM = 2000

# ---------------------------------------------------------------------------
# Fuel anomalies
# ---------------------------------------------------------------------------
FUEL_Z_THRESHOLD = 2.0
FUEL_MIN_SAMPLES = 3
FUEL_HIGH_MESSAGE = "Unusually high efficiency — verify odometer reading"
FUEL_LOW_MESSAGE = "Unusually low efficiency — possible fuel theft or leak"

# ---------------------------------------------------------------------------
# Cost forecasting
# ---------------------------------------------------------------------------
COST_HISTORY_MONTHS = 6
# Currency units per month
COST_TREND_INCREASING_SLOPE = 50.0
COST_TREND_DECREASING_SLOPE = -50.0

# ---------------------------------------------------------------------------
# Fleet aggregation
# ---------------------------------------------------------------------------
DEFAULT_RANGE_MONTHS = 3
COST_BREAKDOWN_MONTHS = 6
MONTH_LABEL_FORMAT = "%b %Y"

# ---------------------------------------------------------------------------
# Fleet status
# ---------------------------------------------------------------------------
TRIP_ACTIVITY_DAYS = 14
DAY_LABEL_FORMAT = "%b %d"
