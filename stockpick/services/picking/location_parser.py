"""
Location token parsing for pick ordering and routing
"""
import re
from dataclasses import dataclass
from typing import Optional

from stockpick.services.picking.location_format import normalize_location

LOCATION_TOKEN_PATTERN = re.compile(r"^([A-Z])(\d+)/(\d+)$")


@dataclass(frozen=True)
class LocationToken:
    zone: str
    position: int
    level: int
    normalized: str


def parse_location(location: Optional[str]) -> Optional[LocationToken]:
    """
    Decompose a location into zone letter, position and level.

    Returns None when the location cannot be routed.
    """
    normalized = normalize_location(location)
    if not normalized:
        return None

    match = LOCATION_TOKEN_PATTERN.match(normalized)
    if not match:
        return None

    zone, position, level = match.groups()
    return LocationToken(
        zone=zone,
        position=int(position),
        level=int(level),
        normalized=normalized
    )
