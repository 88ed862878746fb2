"""
Greedy allocation of a base-unit need across sorted picking candidates
"""
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Iterable, List

from stockpick.core.exceptions import InvalidDemandError
from stockpick.schemas.picking import PickingLocation, PlanStatus

ZERO = Decimal("0")


@dataclass
class AllocationResult:
    """Candidates annotated with pick quantities, plus the feasibility verdict"""
    total_needed: Decimal
    total_available: Decimal
    status: PlanStatus
    percentage: float
    locations: List[PickingLocation] = field(default_factory=list)

    @property
    def active_locations(self) -> List[PickingLocation]:
        return [location for location in self.locations if location.to_pick > 0]

    @property
    def total_to_pick(self) -> Decimal:
        return sum((location.to_pick for location in self.locations), ZERO)


def calculate_percentage(total_available: Decimal, total_needed: Decimal) -> float:
    """Coverage of the need, capped at 100"""
    if total_available <= 0 or total_needed <= 0:
        return 0.0
    return float(min(total_available / total_needed, Decimal("1")) * 100)


def allocate(sorted_candidates: Iterable[PickingLocation], total_needed: Decimal) -> AllocationResult:
    """
    Take ``min(available, remaining need)`` from each candidate in order.

    Every candidate is visited even once the need is met, so
    ``total_available`` covers all matching locations.
    """
    total_needed = Decimal(str(total_needed))
    if total_needed <= 0:
        raise InvalidDemandError(f"Total needed must be greater than zero, got {total_needed}")

    remaining_need = total_needed
    total_available = ZERO
    allocated: List[PickingLocation] = []

    for candidate in sorted_candidates:
        total_available += candidate.available
        to_pick = min(candidate.available, remaining_need) if remaining_need > 0 else ZERO
        remaining_need -= to_pick
        allocated.append(candidate.model_copy(update={
            "to_pick": to_pick,
            "remaining": candidate.available - to_pick,
        }))

    if not allocated:
        status = PlanStatus.NOT_FOUND
    elif total_available >= total_needed:
        status = PlanStatus.SUFFICIENT
    else:
        status = PlanStatus.INSUFFICIENT

    return AllocationResult(
        total_needed=total_needed,
        total_available=total_available,
        status=status,
        percentage=calculate_percentage(total_available, total_needed),
        locations=allocated,
    )
