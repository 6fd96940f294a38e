"""
Modelos de datos para el motor de analítica de flota.

Define los snapshots de entrada (solo lectura, provistos por el store
externo), los registros de salida (inmutables, recalculados en cada
petición) y los bodies de request de la API.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


# ============================================================================
# ENUMS
# ============================================================================

class DriverStatus(str, Enum):
    ON_DUTY = "ON_DUTY"
    OFF_DUTY = "OFF_DUTY"
    SUSPENDED = "SUSPENDED"


class VehicleStatus(str, Enum):
    AVAILABLE = "AVAILABLE"
    ON_TRIP = "ON_TRIP"
    IN_SHOP = "IN_SHOP"
    OUT_OF_SERVICE = "OUT_OF_SERVICE"


class MaintenanceType(str, Enum):
    OIL_CHANGE = "OIL_CHANGE"
    TIRE_ROTATION = "TIRE_ROTATION"
    BRAKE_SERVICE = "BRAKE_SERVICE"
    ENGINE_REPAIR = "ENGINE_REPAIR"
    INSPECTION = "INSPECTION"
    OTHER = "OTHER"


class TripStatus(str, Enum):
    DRAFT = "DRAFT"
    DISPATCHED = "DISPATCHED"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class MaintenanceUrgency(str, Enum):
    OVERDUE = "OVERDUE"
    DUE_SOON = "DUE_SOON"
    UPCOMING = "UPCOMING"
    OK = "OK"


class AnomalyType(str, Enum):
    HIGH = "HIGH"
    LOW = "LOW"


class CostTrend(str, Enum):
    INCREASING = "INCREASING"
    STABLE = "STABLE"
    DECREASING = "DECREASING"


class LicenseStatus(str, Enum):
    VALID = "VALID"
    EXPIRING_SOON = "EXPIRING_SOON"
    EXPIRED = "EXPIRED"


# ============================================================================
# INPUT SNAPSHOTS
# ============================================================================

class DriverSnapshot(BaseModel):
    """Estado de un conductor tal como lo entrega el store."""

    id: str
    name: Optional[str] = None
    total_trips: int = Field(default=0, ge=0)
    completed_trips: int = Field(default=0, ge=0)
    license_expiry: datetime
    status: DriverStatus = DriverStatus.OFF_DUTY
    safety_score: float = Field(default=100.0, ge=0, le=100, description="Score persistido")

    @model_validator(mode="after")
    def _completed_within_total(self) -> "DriverSnapshot":
        if self.completed_trips > self.total_trips:
            raise ValueError("completed_trips cannot exceed total_trips")
        return self


class VehicleSnapshot(BaseModel):
    """Estado de un vehículo tal como lo entrega el store."""

    id: str
    name: Optional[str] = None
    license_plate: Optional[str] = None
    current_odometer: float = Field(default=0, ge=0, description="km")
    created_at: datetime
    acquisition_cost: float = Field(default=0, ge=0)
    is_retired: bool = False
    status: VehicleStatus = VehicleStatus.AVAILABLE


class MaintenanceLog(BaseModel):
    id: str
    vehicle_id: str
    type: MaintenanceType
    service_date: datetime
    cost: float = Field(default=0, ge=0)
    next_service_km: Optional[float] = Field(
        default=None, description="Odómetro (km) programado para el próximo servicio"
    )
    is_resolved: bool = True


class FuelExpense(BaseModel):
    id: str
    vehicle_id: str
    fuel_date: datetime
    liters: float = Field(..., gt=0)
    cost_per_liter: float = Field(..., gt=0)
    total_cost: float = Field(..., ge=0, description="Registrado; no se recalcula")
    odometer_at_fuel: float = Field(..., ge=0)
    trip_id: Optional[str] = None
    station: Optional[str] = None


class Trip(BaseModel):
    id: str
    vehicle_id: str
    driver_id: str
    status: TripStatus
    start_odometer: Optional[float] = None
    end_odometer: Optional[float] = Field(default=None, description="Solo al completar")
    revenue: Optional[float] = Field(default=None, ge=0)
    completed_at: Optional[datetime] = None
    created_at: Optional[datetime] = Field(
        default=None, description="Alta del viaje (actividad diaria)"
    )


class FleetSnapshot(BaseModel):
    """Historial completo de la flota; el agregador aplica los filtros de fecha."""

    vehicles: list[VehicleSnapshot] = Field(default_factory=list)
    drivers: list[DriverSnapshot] = Field(default_factory=list)
    trips: list[Trip] = Field(default_factory=list)
    fuel_expenses: list[FuelExpense] = Field(default_factory=list)
    maintenance_logs: list[MaintenanceLog] = Field(default_factory=list)


# ============================================================================
# OUTPUT RECORDS
# ============================================================================

class _Result(BaseModel):
    model_config = ConfigDict(frozen=True)


class SafetyScoreBreakdown(_Result):
    driver_id: str
    completion_rate: float = Field(..., ge=0, le=1)
    license_valid: bool
    is_suspended: bool
    base_points: float
    completion_points: float
    license_points: float
    suspension_penalty: float
    final_score: float = Field(..., ge=0, le=100)
    license_status: LicenseStatus
    license_days_remaining: int


class MaintenancePrediction(_Result):
    type: MaintenanceType
    last_service_odometer: Optional[float] = None
    last_service_date: Optional[datetime] = None
    next_service_due_at_km: float = Field(..., ge=0)
    km_until_due: float = Field(..., description="Negativo = vencido")
    urgency: MaintenanceUrgency
    estimated_days_until_due: Optional[int] = None


class FuelAnomaly(_Result):
    expense_id: str
    fuel_date: datetime
    efficiency: float = Field(..., description="km/L")
    z_score: float
    anomaly_type: AnomalyType
    message: str


class FuelAnomalyResult(_Result):
    vehicle_id: str
    mean_efficiency: float
    std_dev: float
    sample_count: int = Field(..., description="Puntos de eficiencia válidos")
    anomalies: list[FuelAnomaly] = Field(default_factory=list)


class MonthlyCost(_Result):
    month: str
    total_cost: float


class CostPrediction(_Result):
    vehicle_id: str
    monthly_history: list[MonthlyCost]
    slope: float
    predicted_next_month_cost: float = Field(..., ge=0)
    trend: CostTrend


class FuelEfficiencyData(_Result):
    vehicle_id: str
    vehicle_name: Optional[str] = None
    license_plate: Optional[str] = None
    km_per_liter: float


class CostBreakdownData(_Result):
    month: str
    fuel_cost: float
    maintenance_cost: float
    total_cost: float


class VehicleRoiData(_Result):
    vehicle_id: str
    vehicle_name: Optional[str] = None
    license_plate: Optional[str] = None
    total_revenue: float
    total_cost: float
    acquisition_cost: float
    roi: float = Field(..., description="(ingresos - costo) / costo, como fracción")


class DriverScoreData(_Result):
    driver_id: str
    name: Optional[str] = None
    score: float


class TopVehicle(_Result):
    vehicle_id: str
    name: Optional[str] = None
    roi: float


class TopDriver(_Result):
    driver_id: str
    name: Optional[str] = None
    score: float


class KpiSummary(_Result):
    avg_efficiency: float
    total_cost: float
    top_vehicle: Optional[TopVehicle] = None
    top_driver: Optional[TopDriver] = None


class VehicleInsights(_Result):
    vehicle_id: str
    maintenance: list[MaintenancePrediction]
    fuel_anomalies: FuelAnomalyResult
    cost_prediction: CostPrediction


class AnalyticsSummary(_Result):
    start_date: datetime
    end_date: datetime
    computed_at: datetime
    fuel_efficiency_per_vehicle: list[FuelEfficiencyData]
    cost_breakdown_per_month: list[CostBreakdownData]
    vehicle_roi: list[VehicleRoiData]
    driver_safety_scores: list[DriverScoreData]
    kpi_summary: KpiSummary
    vehicle_insights: list[VehicleInsights] = Field(default_factory=list)
    errors: list[str] = Field(default_factory=list)


class TripActivity(_Result):
    date: str = Field(..., description="Día UTC, p. ej. \"Oct 19\"")
    count: int


class FleetStatusSummary(_Result):
    total_vehicles: int
    active_fleet: int = Field(..., description="Vehículos en viaje")
    available_vehicles: int
    in_shop: int
    out_of_service: int
    utilization_rate: float = Field(..., description="Porcentaje en viaje")
    pending_cargo: int = Field(..., description="Viajes en DRAFT o DISPATCHED")
    open_maintenance: int
    trip_activity: list[TripActivity] = Field(
        default_factory=list, description="Viajes creados por día, del más antiguo al actual"
    )


# ============================================================================
# REQUEST MODELS
# ============================================================================

class MaintenancePredictionRequest(BaseModel):
    vehicle: VehicleSnapshot
    maintenance_logs: list[MaintenanceLog] = Field(default_factory=list)
    base_odometer: float = Field(default=0, ge=0)


class FuelAnomalyRequest(BaseModel):
    vehicle_id: str
    fuel_expenses: list[FuelExpense] = Field(default_factory=list)


class CostPredictionRequest(BaseModel):
    vehicle_id: str
    fuel_expenses: list[FuelExpense] = Field(default_factory=list)
    maintenance_logs: list[MaintenanceLog] = Field(default_factory=list)
    months_back: int = Field(default=6, ge=0, le=36)


class AnalyticsSummaryRequest(BaseModel):
    snapshot: FleetSnapshot
    start_date: Optional[datetime] = Field(None, description="ISO; por defecto hace 3 meses")
    end_date: Optional[datetime] = Field(None, description="ISO; por defecto ahora")
    include_vehicle_insights: bool = True


class SafetyScoreUpdateResponse(BaseModel):
    driver_id: str
    score: float
