"""
Pre-commit stock change detection

A picking plan is advisory: stock may move between planning and picking.
Before a deduction is committed the planned availability of each line is
compared with live stock.
"""
from collections import defaultdict
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Tuple

from stockpick.schemas.picking import (
    PickingPlan, PlanDiagnostic, PlanStatus, StockChange, StockRecord
)
from stockpick.services.picking.rate_lookup import ConversionRateLookup
from stockpick.services.picking.unit_hierarchy import RateFallback, resolve_base_quantity

DEFAULT_MAX_PLAN_AGE_MINUTES = 30
ZERO = Decimal("0")


def is_plan_expired(generated_at: datetime, now: datetime,
                    max_age_minutes: int = DEFAULT_MAX_PLAN_AGE_MINUTES) -> bool:
    """True when the plan is older than ``max_age_minutes``"""
    return now - generated_at > timedelta(minutes=max_age_minutes)


def _active_lines(plans: Iterable[PickingPlan]):
    for plan in plans:
        if plan.status == PlanStatus.NOT_FOUND:
            continue
        for line in plan.locations:
            if line.to_pick > 0:
                yield plan, line


def detect_stock_changes(
    plans: Iterable[PickingPlan],
    live_records: Iterable[StockRecord],
    fallback: Optional[RateFallback] = None,
    rate_lookup: Optional[ConversionRateLookup] = None
) -> Tuple[List[StockChange], List[PlanDiagnostic]]:
    """
    Compare every active line with the live record it was planned from.

    Picks from one record are summed across all plans, since separate
    demands in a batch may draw on the same location. A line is reported
    when its record changed, is gone (counts as zero stock) or cannot cover
    the batch's combined pick.

    Returns (changes, diagnostics); diagnostics come from resolving live
    quantities, once per record.
    """
    lines = list(_active_lines(plans))
    live_by_id = {record.id: record for record in live_records}

    batch_to_pick: Dict[str, Decimal] = defaultdict(lambda: ZERO)
    for _, line in lines:
        batch_to_pick[line.stock_record_id] += line.to_pick

    current_by_id: Dict[str, Decimal] = {}
    diagnostics: List[PlanDiagnostic] = []
    for record_id in batch_to_pick:
        record = live_by_id.get(record_id)
        if record is None:
            current_by_id[record_id] = ZERO
            continue
        current, record_diagnostics = resolve_base_quantity(record, fallback, rate_lookup)
        current_by_id[record_id] = current
        diagnostics.extend(record_diagnostics)

    changes: List[StockChange] = []
    for plan, line in lines:
        record_id = line.stock_record_id
        present = record_id in live_by_id
        current = current_by_id[record_id]
        total_to_pick = batch_to_pick[record_id]
        difference = current - line.available

        can_proceed = present and current >= total_to_pick
        if present and difference == 0 and can_proceed:
            continue

        changes.append(StockChange(
            location=line.location,
            product_code=plan.original_code,
            stock_record_id=record_id,
            planned_stock=line.available,
            current_stock=current,
            difference=difference,
            to_pick=line.to_pick,
            batch_to_pick=total_to_pick,
            can_proceed=can_proceed,
        ))

    return changes, diagnostics
