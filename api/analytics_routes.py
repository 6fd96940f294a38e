"""
Rutas FastAPI del motor de analítica de flota.

Los handlers reciben snapshots ya obtenidos del store (filtrados por
vehículo / conductor), invocan el motor y devuelven el resultado tal cual.
La única escritura es la persistencia del safety score.
"""

import time

from fastapi import APIRouter, Depends

from analytics import (
    AnalyticsAggregator,
    CostPredictor,
    FleetStatusCalculator,
    FuelAnomalyDetector,
    MaintenancePredictor,
    SafetyScorer,
    update_driver_safety_score,
)
from core.concurrency import acquire_slot
from core.runtime import DriverStore, driver_store
from core.structured_logging import entity_context, get_logger
from .analytics_models import (
    AnalyticsSummary,
    AnalyticsSummaryRequest,
    CostPrediction,
    CostPredictionRequest,
    DriverSnapshot,
    FleetSnapshot,
    FleetStatusSummary,
    FuelAnomalyRequest,
    FuelAnomalyResult,
    MaintenancePrediction,
    MaintenancePredictionRequest,
    SafetyScoreBreakdown,
    SafetyScoreUpdateResponse,
)

logger = get_logger(__name__)

analytics_router = APIRouter(prefix="/analytics", tags=["Analytics"])

# Singleton engine instance
_aggregator: AnalyticsAggregator | None = None


def get_aggregator() -> AnalyticsAggregator:
    """Get or create the aggregator singleton."""
    global _aggregator
    if _aggregator is None:
        _aggregator = AnalyticsAggregator()
    return _aggregator


def get_driver_store() -> DriverStore:
    return driver_store


# ============================================================================
# SAFETY SCORE
# ============================================================================
@analytics_router.post("/safety-score", response_model=SafetyScoreBreakdown)
async def compute_safety_score(driver: DriverSnapshot) -> SafetyScoreBreakdown:
    """Desglose del safety score de un conductor (sin persistir)."""
    return SafetyScorer().compute(driver)


@analytics_router.post(
    "/drivers/{driver_id}/safety-score", response_model=SafetyScoreUpdateResponse
)
async def recompute_safety_score(
    driver_id: str, store: DriverStore = Depends(get_driver_store)
) -> SafetyScoreUpdateResponse:
    """
    Recalcula el safety score del conductor y lo persiste en el store.
    404 si el conductor no existe.
    """
    score = update_driver_safety_score(driver_id, store)
    return SafetyScoreUpdateResponse(driver_id=driver_id, score=score)


# ============================================================================
# VEHICLE ANALYTICS
# ============================================================================
@analytics_router.post(
    "/maintenance-prediction", response_model=list[MaintenancePrediction]
)
async def predict_maintenance(
    request: MaintenancePredictionRequest,
) -> list[MaintenancePrediction]:
    """Próximo servicio por tipo de mantenimiento monitoreado."""
    vehicle = request.vehicle
    with entity_context(vehicle_id=vehicle.id):
        return MaintenancePredictor().predict(
            vehicle.current_odometer,
            request.maintenance_logs,
            vehicle.created_at,
            base_odometer=request.base_odometer,
        )


@analytics_router.post("/fuel-anomalies", response_model=FuelAnomalyResult)
async def detect_fuel_anomalies(request: FuelAnomalyRequest) -> FuelAnomalyResult:
    """Cargas de combustible con eficiencia estadísticamente atípica."""
    with entity_context(vehicle_id=request.vehicle_id):
        result = FuelAnomalyDetector().detect(request.vehicle_id, request.fuel_expenses)
        if result.anomalies:
            logger.info("Fuel anomalies detected", context={
                "anomalies": len(result.anomalies),
                "samples": result.sample_count,
            })
        return result


@analytics_router.post("/cost-prediction", response_model=CostPrediction)
async def predict_cost(request: CostPredictionRequest) -> CostPrediction:
    """Pronóstico del costo operativo del próximo mes."""
    with entity_context(vehicle_id=request.vehicle_id):
        return CostPredictor().predict(
            request.vehicle_id,
            request.fuel_expenses,
            request.maintenance_logs,
            months_back=request.months_back,
        )


# ============================================================================
# FLEET ANALYTICS
# ============================================================================
@analytics_router.post("/summary", response_model=AnalyticsSummary)
async def analytics_summary(request: AnalyticsSummaryRequest) -> AnalyticsSummary:
    """
    Resumen completo de la flota: eficiencia, costos mensuales, ROI,
    scores de conductores, KPIs e insights por vehículo.

    Limitado por el semáforo de concurrencia (503 si está a capacidad).
    """
    start_time = time.time()
    async with acquire_slot():
        summary = get_aggregator().aggregate(
            request.snapshot,
            start_date=request.start_date,
            end_date=request.end_date,
            include_vehicle_insights=request.include_vehicle_insights,
        )

    logger.info("Analytics summary served", context={
        "vehicles": len(request.snapshot.vehicles),
        "errors": len(summary.errors),
        "duration_ms": round((time.time() - start_time) * 1000, 2),
    })
    return summary


@analytics_router.post("/fleet-status", response_model=FleetStatusSummary)
async def fleet_status(snapshot: FleetSnapshot) -> FleetStatusSummary:
    """KPIs de estado de la flota para el dashboard."""
    return FleetStatusCalculator().compute(snapshot)
