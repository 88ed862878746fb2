"""Picking Plan Schemas"""

from pydantic import BaseModel, Field, ConfigDict, model_validator
from typing import Optional, List
from datetime import datetime, date
from decimal import Decimal
from enum import Enum


# Enums
class PlanStatus(str, Enum):
    SUFFICIENT = "sufficient"
    INSUFFICIENT = "insufficient"
    NOT_FOUND = "not_found"


class DiagnosticKind(str, Enum):
    UNPARSEABLE_LOCATION = "unparseable_location"
    FALLBACK_RATE = "fallback_rate"
    MISSING_RATE = "missing_rate"
    NEGATIVE_QUANTITY = "negative_quantity"


# Inputs
class StockRecord(BaseModel):
    """Point-in-time snapshot of one stock holding at one location"""
    id: str
    code: Optional[str] = None
    product_name: Optional[str] = None
    location: str = ""
    warehouse_id: Optional[str] = None
    lot: Optional[str] = None
    manufacture_date: Optional[date] = None
    created_at: Optional[datetime] = None
    level1_name: Optional[str] = None
    level1_quantity: Decimal = Decimal("0")
    level1_rate: Optional[Decimal] = None
    level2_name: Optional[str] = None
    level2_quantity: Decimal = Decimal("0")
    level2_rate: Optional[Decimal] = None
    level3_name: Optional[str] = None
    level3_quantity: Decimal = Decimal("0")

    model_config = ConfigDict(frozen=True)


class ProductDemand(BaseModel):
    product_code: str
    product_name: str = ""
    requested_quantity: Decimal = Field(..., description="Quantity in the demand's nominal unit, before multiplier")
    unit_code: Optional[str] = None


# Plan results
class PickingLocation(BaseModel):
    """One allocation line within a picking plan"""
    location: str
    normalized_location: str
    zone: str
    position: int
    level: int
    available: Decimal
    to_pick: Decimal = Decimal("0")
    remaining: Decimal = Decimal("0")
    lot: Optional[str] = None
    manufacture_date: Optional[date] = None
    created_at: Optional[datetime] = None
    stock_record_id: str

    @model_validator(mode="after")
    def check_pick_bounds(self):
        if self.to_pick < 0 or self.to_pick > self.available:
            raise ValueError("to_pick must be between 0 and available")
        return self


class PickingPlan(BaseModel):
    original_code: str
    base_code: str
    multiplier: int = 1
    product_name: str = ""
    total_needed: Decimal
    original_quantity: Decimal
    total_available: Decimal = Decimal("0")
    status: PlanStatus
    percentage: float = Field(0.0, ge=0, le=100)
    locations: List[PickingLocation] = []


class PickingRouteEntry(BaseModel):
    sequence: int
    location: str
    normalized_location: str
    zone: str
    position: int
    level: int
    product_code: str
    product_name: str = ""
    quantity: Decimal
    lot: Optional[str] = None
    stock_record_id: str


class PickingSummary(BaseModel):
    total_products: int = 0
    sufficient_products: int = 0
    insufficient_products: int = 0
    not_found_products: int = 0
    total_locations: int = 0


class BulkPlanResult(BaseModel):
    plans: List[PickingPlan]
    route: List[PickingRouteEntry]
    summary: PickingSummary


class PlanDiagnostic(BaseModel):
    """Data-quality warning raised while planning; never an error"""
    kind: DiagnosticKind
    message: str
    stock_record_id: Optional[str] = None
    product_code: Optional[str] = None

    def __str__(self) -> str:
        return self.message


class StockChange(BaseModel):
    """Difference between planned and live stock for one allocation line"""
    location: str
    product_code: str
    stock_record_id: str
    planned_stock: Decimal
    current_stock: Decimal
    difference: Decimal
    to_pick: Decimal
    batch_to_pick: Decimal = Field(..., description="Planned pick from this record across every plan in the batch")
    can_proceed: bool


# API request/response
class BulkPlanRequest(BaseModel):
    demands: List[ProductDemand]


class PreviewPlanRequest(BulkPlanRequest):
    stock: List[StockRecord] = []


class BulkPlanResponse(BaseModel):
    result: BulkPlanResult
    diagnostics: List[PlanDiagnostic] = []
    generated_at: datetime


class PlanValidationRequest(BaseModel):
    plans: List[PickingPlan]
    generated_at: datetime


class PlanValidationResponse(BaseModel):
    valid: bool
    can_proceed: bool
    changes: List[StockChange] = []
    diagnostics: List[PlanDiagnostic] = []
