"""
Picking plan generation

Pipeline per demand: parse code multiplier -> select candidates -> resolve
base units -> FEFO sort -> greedy allocation. The bulk entry point then
builds one walking route over all plans and tallies the outcomes.

All functions are pure: diagnostics are returned, never logged.
"""
from decimal import Decimal
from typing import Iterable, List, Optional, Sequence, Tuple

from stockpick.core.exceptions import InvalidDemandError
from stockpick.schemas.picking import (
    BulkPlanResult, PickingPlan, PickingSummary, PlanDiagnostic,
    PlanStatus, ProductDemand, StockRecord
)
from stockpick.services.picking.allocation import allocate
from stockpick.services.picking.candidates import build_picking_locations, select_candidates
from stockpick.services.picking.code_multiplier import apply_code_multiplier
from stockpick.services.picking.freshness import sort_by_freshness
from stockpick.services.picking.rate_lookup import ConversionRateLookup
from stockpick.services.picking.routing import generate_picking_route
from stockpick.services.picking.unit_hierarchy import RateFallback


def _validate_demand(demand: ProductDemand) -> None:
    if demand.requested_quantity is None or not demand.requested_quantity > 0:
        raise InvalidDemandError(
            f"Requested quantity for {demand.product_code!r} must be greater than zero, "
            f"got {demand.requested_quantity}"
        )


def calculate_picking_plan(
    demand: ProductDemand,
    stock: Iterable[StockRecord],
    fallback: Optional[RateFallback] = None,
    rate_lookup: Optional[ConversionRateLookup] = None
) -> Tuple[PickingPlan, List[PlanDiagnostic]]:
    """
    Compute the picking plan for a single demand.

    Returns (plan, diagnostics). Raises InvalidDemandError for a
    non-positive requested quantity.
    """
    _validate_demand(demand)
    parsed, total_needed = apply_code_multiplier(demand.product_code, demand.requested_quantity)

    plan = PickingPlan(
        original_code=demand.product_code,
        base_code=parsed.base_code,
        multiplier=parsed.multiplier,
        product_name=demand.product_name,
        total_needed=total_needed,
        original_quantity=demand.requested_quantity,
        total_available=Decimal("0"),
        status=PlanStatus.NOT_FOUND,
        percentage=0.0,
        locations=[],
    )

    matching = select_candidates(stock, parsed.base_code)
    if not matching:
        return plan, []

    candidates, diagnostics = build_picking_locations(
        matching, fallback, rate_lookup, product_code=demand.product_code
    )
    result = allocate(sort_by_freshness(candidates), total_needed)

    # Stock exists under this code but none of it is routable
    status = result.status
    if status == PlanStatus.NOT_FOUND:
        status = PlanStatus.INSUFFICIENT

    plan = plan.model_copy(update={
        "total_available": result.total_available,
        "status": status,
        "percentage": result.percentage,
        "locations": result.active_locations,
    })
    return plan, diagnostics


def summarize_plans(plans: Sequence[PickingPlan], total_locations: int) -> PickingSummary:
    return PickingSummary(
        total_products=len(plans),
        sufficient_products=sum(1 for p in plans if p.status == PlanStatus.SUFFICIENT),
        insufficient_products=sum(1 for p in plans if p.status == PlanStatus.INSUFFICIENT),
        not_found_products=sum(1 for p in plans if p.status == PlanStatus.NOT_FOUND),
        total_locations=total_locations,
    )


def generate_bulk_picking_plans(
    demands: Sequence[ProductDemand],
    stock: Iterable[StockRecord],
    fallback: Optional[RateFallback] = None,
    rate_lookup: Optional[ConversionRateLookup] = None
) -> Tuple[BulkPlanResult, List[PlanDiagnostic]]:
    """
    Plan every demand against the same stock snapshot and merge the
    allocations into one picking route.

    Returns (result, diagnostics); repeated diagnostics for a record shared
    by several demands are reported once.
    """
    if not demands:
        raise InvalidDemandError("At least one product demand is required")
    for demand in demands:
        _validate_demand(demand)

    stock = list(stock)
    plans: List[PickingPlan] = []
    diagnostics: List[PlanDiagnostic] = []
    seen = set()

    for demand in demands:
        plan, plan_diagnostics = calculate_picking_plan(demand, stock, fallback, rate_lookup)
        plans.append(plan)
        for diagnostic in plan_diagnostics:
            key = (diagnostic.kind, diagnostic.stock_record_id, diagnostic.message)
            if key not in seen:
                seen.add(key)
                diagnostics.append(diagnostic)

    route = generate_picking_route(plans)

    return BulkPlanResult(
        plans=plans,
        route=route,
        summary=summarize_plans(plans, len(route)),
    ), diagnostics
