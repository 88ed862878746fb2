"""
Picking Plan Service
Runs the picking engine against the inventory store
"""
from typing import Iterable, List, Optional, Sequence, Tuple
from decimal import Decimal
from datetime import datetime
from sqlalchemy.orm import Session
from sqlalchemy import or_, func, asc

from stockpick.core.config import settings
from stockpick.core.exceptions import PlanExpiredError
from stockpick.core.logging import get_logger
from stockpick.models.inventory import InventoryItemRec, ConversionRateRec
from stockpick.schemas.picking import (
    BulkPlanResult, PickingPlan, PlanDiagnostic, ProductDemand, StockChange, StockRecord
)
from stockpick.services.picking import (
    ConversionRateLookup, RateFallback, detect_stock_changes,
    generate_bulk_picking_plans, is_plan_expired, parse_code_multiplier
)

logger = get_logger("picking")


class PickingPlanService:
    """
    Picking plan generation

    Loads a point-in-time stock snapshot, runs the allocation engine and
    logs its diagnostics. Plans are advisory; nothing is reserved or deducted.
    """

    def __init__(self, db: Session, fallback: Optional[RateFallback] = None,
                 max_plan_age_minutes: Optional[int] = None):
        self.db = db
        self.fallback = fallback or settings.rate_fallback()
        self.max_plan_age_minutes = max_plan_age_minutes or settings.PICKING_PLAN_MAX_AGE_MINUTES

    def load_stock_snapshot(self, codes: Optional[Iterable[str]] = None) -> List[StockRecord]:
        """
        Load inventory holding any stock, oldest first
        Optionally restricted to the given stock codes (case-insensitive)
        """
        query = self.db.query(InventoryItemRec).filter(
            or_(
                InventoryItemRec.unit_level1_quantity > 0,
                InventoryItemRec.unit_level2_quantity > 0,
                InventoryItemRec.unit_level3_quantity > 0
            )
        )

        if codes is not None:
            wanted = sorted({code.strip().lower() for code in codes if code and code.strip()})
            if not wanted:
                return []
            query = query.filter(func.lower(func.trim(InventoryItemRec.sku)).in_(wanted))

        rows = query.order_by(asc(InventoryItemRec.created_at), asc(InventoryItemRec.id)).all()
        return [self._to_stock_record(row) for row in rows]

    def load_conversion_rates(self) -> ConversionRateLookup:
        """Per-SKU conversion rates for one planning run"""
        return ConversionRateLookup.from_rows(self.db.query(ConversionRateRec).all())

    def generate_plans(self, demands: Sequence[ProductDemand]) -> Tuple[BulkPlanResult, List[PlanDiagnostic]]:
        """
        Generate picking plans for demands against current inventory
        Returns (result, diagnostics)
        """
        base_codes = {parse_code_multiplier(demand.product_code).base_code for demand in demands}
        stock = self.load_stock_snapshot(base_codes)
        return self.preview_plans(demands, stock, self.load_conversion_rates())

    def preview_plans(self, demands: Sequence[ProductDemand], stock: Iterable[StockRecord],
                      rate_lookup: Optional[ConversionRateLookup] = None
                      ) -> Tuple[BulkPlanResult, List[PlanDiagnostic]]:
        """Generate picking plans against a caller-supplied snapshot"""
        result, diagnostics = generate_bulk_picking_plans(demands, stock, self.fallback, rate_lookup)

        self._log_diagnostics(diagnostics)

        summary = result.summary
        logger.info(
            f"Picking plans generated: products={summary.total_products}, "
            f"sufficient={summary.sufficient_products}, insufficient={summary.insufficient_products}, "
            f"not_found={summary.not_found_products}, locations={summary.total_locations}"
        )
        return result, diagnostics

    def validate_plans(self, plans: Sequence[PickingPlan], generated_at: datetime,
                       now: Optional[datetime] = None
                       ) -> Tuple[bool, List[StockChange], List[PlanDiagnostic]]:
        """
        Re-check planned availability against live stock before picking
        Returns (unchanged, changes, diagnostics)
        """
        now = now or datetime.now(generated_at.tzinfo)
        if is_plan_expired(generated_at, now, self.max_plan_age_minutes):
            raise PlanExpiredError(
                f"Picking plan generated at {generated_at.isoformat()} is older than "
                f"{self.max_plan_age_minutes} minutes, regenerate it"
            )

        record_ids = sorted({
            line.stock_record_id
            for plan in plans
            for line in plan.locations
            if line.to_pick > 0
        })
        rows = []
        if record_ids:
            rows = self.db.query(InventoryItemRec).filter(InventoryItemRec.id.in_(record_ids)).all()

        changes, diagnostics = detect_stock_changes(
            plans,
            [self._to_stock_record(row) for row in rows],
            self.fallback,
            self.load_conversion_rates()
        )

        self._log_diagnostics(diagnostics)
        if changes:
            blocked = sum(1 for change in changes if not change.can_proceed)
            logger.warning(
                f"Stock check flagged {len(changes)} planned location(s), "
                f"{blocked} cannot be picked as planned"
            )
        return not changes, changes, diagnostics

    @staticmethod
    def _log_diagnostics(diagnostics: Sequence[PlanDiagnostic]) -> None:
        for diagnostic in diagnostics:
            logger.warning(f"Picking diagnostic [{diagnostic.kind.value}]: {diagnostic.message}")

    @staticmethod
    def _to_stock_record(row: InventoryItemRec) -> StockRecord:
        return StockRecord(
            id=str(row.id),
            code=row.sku,
            product_name=row.product_name,
            location=row.location or "",
            warehouse_id=row.warehouse_id,
            lot=row.lot,
            manufacture_date=row.mfd,
            created_at=row.created_at,
            level1_name=row.unit_level1_name,
            level1_quantity=row.unit_level1_quantity or Decimal("0"),
            level1_rate=row.unit_level1_rate,
            level2_name=row.unit_level2_name,
            level2_quantity=row.unit_level2_quantity or Decimal("0"),
            level2_rate=row.unit_level2_rate,
            level3_name=row.unit_level3_name,
            level3_quantity=row.unit_level3_quantity or Decimal("0"),
        )
