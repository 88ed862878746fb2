"""Picking Plan API endpoints"""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, status

from stockpick.api import deps
from stockpick.core.exceptions import InvalidDemandError, PlanExpiredError
from stockpick.schemas.picking import (
    BulkPlanRequest, BulkPlanResponse, PreviewPlanRequest,
    PlanValidationRequest, PlanValidationResponse
)
from stockpick.services.picking_service import PickingPlanService

router = APIRouter()


@router.post("/plans", response_model=BulkPlanResponse)
def create_picking_plans(
    plan_request: BulkPlanRequest,
    service: PickingPlanService = Depends(deps.get_picking_service),
):
    """
    Generate picking plans for a list of product demands.

    Uses the current inventory snapshot. The plan is advisory and must be
    validated against live stock before any deduction.
    """
    try:
        result, diagnostics = service.generate_plans(plan_request.demands)
    except InvalidDemandError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    return BulkPlanResponse(
        result=result,
        diagnostics=diagnostics,
        generated_at=datetime.now(timezone.utc)
    )


@router.post("/plans/preview", response_model=BulkPlanResponse)
def preview_picking_plans(
    preview_request: PreviewPlanRequest,
    service: PickingPlanService = Depends(deps.get_picking_service),
):
    """Generate picking plans against a stock snapshot supplied in the request."""
    try:
        result, diagnostics = service.preview_plans(preview_request.demands, preview_request.stock)
    except InvalidDemandError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    return BulkPlanResponse(
        result=result,
        diagnostics=diagnostics,
        generated_at=datetime.now(timezone.utc)
    )


@router.post("/plans/validate", response_model=PlanValidationResponse)
def validate_picking_plans(
    validation_request: PlanValidationRequest,
    service: PickingPlanService = Depends(deps.get_picking_service),
):
    """
    Compare planned availability with live stock.

    Picks that several plans make from one location are checked together.
    Returns 409 when the plan is too old and must be regenerated.
    """
    try:
        unchanged, changes, diagnostics = service.validate_plans(
            validation_request.plans,
            validation_request.generated_at
        )
    except PlanExpiredError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))

    return PlanValidationResponse(
        valid=unchanged,
        can_proceed=all(change.can_proceed for change in changes),
        changes=changes,
        diagnostics=diagnostics
    )
