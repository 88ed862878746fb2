"""
Stockpick Pydantic Schemas
Request/Response models for the picking API and engine
"""

from .picking import (
    PlanStatus, DiagnosticKind, StockRecord, ProductDemand,
    PickingLocation, PickingPlan, PickingRouteEntry, PickingSummary,
    BulkPlanResult, PlanDiagnostic, StockChange,
    BulkPlanRequest, PreviewPlanRequest, BulkPlanResponse,
    PlanValidationRequest, PlanValidationResponse
)
from .common import ErrorResponse, HealthResponse
