"""
Derived-analytics engine for fleet operations.

Stateless components over already-loaded record snapshots:
- Driver safety scoring
- Maintenance-due prediction
- Fuel anomaly detection (z-score)
- Monthly cost forecasting (linear regression)
- Fleet-wide aggregation (efficiency, cost breakdown, ROI, KPIs)
"""

from .safety_scorer import SafetyScorer, update_driver_safety_score
from .maintenance_predictor import MaintenancePredictor
from .fuel_anomaly_detector import FuelAnomalyDetector
from .cost_predictor import CostPredictor, linear_regression
from .fleet_status import FleetStatusCalculator
from .aggregator import AnalyticsAggregator

__all__ = [
    "SafetyScorer",
    "update_driver_safety_score",
    "MaintenancePredictor",
    "FuelAnomalyDetector",
    "CostPredictor",
    "linear_regression",
    "FleetStatusCalculator",
    "AnalyticsAggregator",
]
