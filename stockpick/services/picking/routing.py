"""
Picking route generation

Flattens the active lines of every plan in a batch into one walk ordered by
zone, position and level.
"""
from typing import Iterable, List

from stockpick.schemas.picking import PickingPlan, PickingRouteEntry
from stockpick.services.picking.freshness import route_key


def generate_picking_route(plans: Iterable[PickingPlan]) -> List[PickingRouteEntry]:
    """
    Merge allocation lines from all plans into a single sequenced route.

    Lines at the same location keep plan order, then line order.
    """
    lines = [
        (plan, location)
        for plan in plans
        for location in plan.locations
        if location.to_pick > 0
    ]
    lines.sort(key=lambda item: route_key(item[1]))

    return [
        PickingRouteEntry(
            sequence=sequence,
            location=location.location,
            normalized_location=location.normalized_location,
            zone=location.zone,
            position=location.position,
            level=location.level,
            product_code=plan.original_code,
            product_name=plan.product_name,
            quantity=location.to_pick,
            lot=location.lot,
            stock_record_id=location.stock_record_id,
        )
        for sequence, (plan, location) in enumerate(lines, 1)
    ]
