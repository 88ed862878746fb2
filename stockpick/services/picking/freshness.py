"""
Freshness ordering (FEFO)

Older manufacture dates are picked first; lot and physical location break
ties. Records without a date or lot sort after those that have one.
"""
from datetime import date
from typing import Iterable, List

from stockpick.schemas.picking import PickingLocation


def route_key(location: PickingLocation):
    """Physical walking order: zone, then position, then level"""
    return (location.zone, location.position, location.level)


def freshness_key(location: PickingLocation):
    mfd = location.manufacture_date
    lot = location.lot
    return (
        mfd is None, mfd or date.min,
        # Unlotted after lotted, so the key stays a total order
        not lot, lot or "",
        *route_key(location),
        location.stock_record_id,
    )


def sort_by_freshness(candidates: Iterable[PickingLocation]) -> List[PickingLocation]:
    """Total, deterministic FEFO order over picking candidates"""
    return sorted(candidates, key=freshness_key)
