"""
Unit hierarchy resolution

Stock is recorded in three levels (case -> box -> piece). All picking
arithmetic is done in the base unit (level 3):

    total = level1_qty * level1_rate + level2_qty * level2_rate + level3_qty
"""
from dataclasses import dataclass
from decimal import Decimal
from typing import List, Optional, Tuple, Union

from stockpick.core.exceptions import ValidationError
from stockpick.schemas.picking import DiagnosticKind, PlanDiagnostic, StockRecord
from stockpick.services.picking.rate_lookup import ConversionRateLookup

ZERO = Decimal("0")
DEFAULT_BASE_UNIT_NAME = "piece"

Number = Union[Decimal, int, float, str]


@dataclass(frozen=True)
class RateFallback:
    """
    Caller-configured rates applied when a record's own rate is missing/zero.

    ``None`` means no fallback is configured for that level.
    """
    level1_rate: Optional[Decimal] = None
    level2_rate: Optional[Decimal] = None


def _describe(record: StockRecord) -> str:
    return f"stock record {record.id} ({record.code or 'no code'} at {record.location or 'no location'})"


def _non_negative(record: StockRecord, level: int, quantity: Optional[Decimal],
                  diagnostics: List[PlanDiagnostic]) -> Decimal:
    quantity = quantity or ZERO
    if quantity < 0:
        diagnostics.append(PlanDiagnostic(
            kind=DiagnosticKind.NEGATIVE_QUANTITY,
            message=f"{_describe(record)}: level {level} quantity {quantity} is negative, treated as 0",
            stock_record_id=record.id,
        ))
        return ZERO
    return quantity


def _level_total(record: StockRecord, level: int, quantity: Decimal,
                 own_rate: Optional[Decimal], lookup_rate: Optional[Decimal],
                 fallback_rate: Optional[Decimal],
                 diagnostics: List[PlanDiagnostic]) -> Decimal:
    if quantity <= 0:
        return ZERO
    if own_rate is not None and own_rate > 0:
        return quantity * own_rate
    if lookup_rate is not None and lookup_rate > 0:
        return quantity * lookup_rate
    if fallback_rate is not None and fallback_rate > 0:
        diagnostics.append(PlanDiagnostic(
            kind=DiagnosticKind.FALLBACK_RATE,
            message=f"{_describe(record)}: level {level} rate missing, using fallback rate {fallback_rate}",
            stock_record_id=record.id,
        ))
        return quantity * fallback_rate

    diagnostics.append(PlanDiagnostic(
        kind=DiagnosticKind.MISSING_RATE,
        message=(f"{_describe(record)}: level {level} rate missing and no fallback configured, "
                 f"{quantity} level {level} units not counted"),
        stock_record_id=record.id,
    ))
    return ZERO


def resolve_base_quantity(
    record: StockRecord,
    fallback: Optional[RateFallback] = None,
    rate_lookup: Optional[ConversionRateLookup] = None
) -> Tuple[Decimal, List[PlanDiagnostic]]:
    """
    Convert a stock record's three-level quantity into base units.

    Rate precedence for levels 1 and 2: the record's own rate, then the
    per-code rate from ``rate_lookup``, then the configured ``fallback``.
    Fallback use and uncountable quantities are reported as diagnostics.

    Returns (base quantity, diagnostics); the quantity is never negative.
    """
    fallback = fallback or RateFallback()
    diagnostics: List[PlanDiagnostic] = []
    code_rate = rate_lookup.get(record.code) if rate_lookup is not None else None

    level1_quantity = _non_negative(record, 1, record.level1_quantity, diagnostics)
    level2_quantity = _non_negative(record, 2, record.level2_quantity, diagnostics)
    level3_quantity = _non_negative(record, 3, record.level3_quantity, diagnostics)

    level1_total = _level_total(
        record, 1, level1_quantity, record.level1_rate,
        code_rate.level1_rate if code_rate else None,
        fallback.level1_rate, diagnostics
    )
    level2_total = _level_total(
        record, 2, level2_quantity, record.level2_rate,
        code_rate.level2_rate if code_rate else None,
        fallback.level2_rate, diagnostics
    )

    return level1_total + level2_total + level3_quantity, diagnostics


def breakdown_base_quantity(
    quantity: Number,
    level1_rate: Optional[Number] = None,
    level2_rate: Optional[Number] = None
) -> Tuple[Decimal, Decimal, Decimal]:
    """
    Split a base-unit quantity into (level1, level2, level3) counts,
    filling the largest unit first. Levels without a positive rate get 0.
    """
    remaining = Decimal(str(quantity))
    if remaining < 0:
        raise ValidationError(f"Cannot break down negative quantity {quantity}")

    counts = []
    for rate in (level1_rate, level2_rate):
        rate = Decimal(str(rate)) if rate is not None else ZERO
        if rate > 0:
            count = remaining // rate
            remaining -= count * rate
        else:
            count = ZERO
        counts.append(count)

    return counts[0], counts[1], remaining


def _format_quantity(quantity: Decimal) -> str:
    if quantity == quantity.to_integral_value():
        return str(quantity.quantize(Decimal("1")))
    return str(quantity.normalize())


def format_units_display(
    level1_quantity: Number,
    level2_quantity: Number,
    level3_quantity: Number,
    level1_name: Optional[str] = None,
    level2_name: Optional[str] = None,
    level3_name: Optional[str] = None
) -> str:
    """
    Human readable unit breakdown, e.g. ``"2 case + 1 box + 3 piece"``.

    Levels 1 and 2 are only shown when they have a name; returns ``"0"``
    when nothing is shown.
    """
    parts = []
    for quantity, name in ((level1_quantity, level1_name), (level2_quantity, level2_name)):
        quantity = Decimal(str(quantity or 0))
        if quantity > 0 and name:
            parts.append(f"{_format_quantity(quantity)} {name}")

    level3_quantity = Decimal(str(level3_quantity or 0))
    if level3_quantity > 0:
        parts.append(f"{_format_quantity(level3_quantity)} {level3_name or DEFAULT_BASE_UNIT_NAME}")

    return " + ".join(parts) if parts else "0"
