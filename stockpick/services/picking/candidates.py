"""
Candidate selection

Narrows the stock snapshot to one base code and turns the matching records
into routable picking locations with base-unit availability.
"""
from typing import Iterable, List, Optional, Tuple

from stockpick.schemas.picking import (
    DiagnosticKind, PickingLocation, PlanDiagnostic, StockRecord
)
from stockpick.services.picking.location_parser import parse_location
from stockpick.services.picking.rate_lookup import ConversionRateLookup
from stockpick.services.picking.unit_hierarchy import RateFallback, resolve_base_quantity


def select_candidates(records: Iterable[StockRecord], base_code: Optional[str]) -> List[StockRecord]:
    """Records whose code equals ``base_code``, ignoring case. Exact match only."""
    target = (base_code or "").strip().lower()
    if not target:
        return []
    return [
        record for record in records
        if record.code and record.code.strip().lower() == target
    ]


def build_picking_locations(
    records: Iterable[StockRecord],
    fallback: Optional[RateFallback] = None,
    rate_lookup: Optional[ConversionRateLookup] = None,
    product_code: Optional[str] = None
) -> Tuple[List[PickingLocation], List[PlanDiagnostic]]:
    """
    Resolve base-unit availability per record and decompose its location.

    Records whose location cannot be parsed are left out and reported in
    the returned diagnostics.
    """
    locations: List[PickingLocation] = []
    diagnostics: List[PlanDiagnostic] = []

    for record in records:
        token = parse_location(record.location)
        if token is None:
            diagnostics.append(PlanDiagnostic(
                kind=DiagnosticKind.UNPARSEABLE_LOCATION,
                message=(f"stock record {record.id} ({record.code}): location "
                         f"'{record.location}' cannot be parsed, excluded from picking"),
                stock_record_id=record.id,
                product_code=product_code,
            ))
            continue

        available, rate_diagnostics = resolve_base_quantity(record, fallback, rate_lookup)
        for diagnostic in rate_diagnostics:
            diagnostics.append(diagnostic.model_copy(update={"product_code": product_code}))

        locations.append(PickingLocation(
            location=record.location,
            normalized_location=token.normalized,
            zone=token.zone,
            position=token.position,
            level=token.level,
            available=available,
            to_pick=0,
            remaining=available,
            lot=record.lot or None,
            manufacture_date=record.manufacture_date,
            created_at=record.created_at,
            stock_record_id=record.id,
        ))

    return locations, diagnostics
