"""Stock picking allocation engine - pure planning functions"""

from .code_multiplier import ParsedCode, parse_code_multiplier, apply_code_multiplier
from .unit_hierarchy import (
    RateFallback, resolve_base_quantity, breakdown_base_quantity, format_units_display
)
from .rate_lookup import ConversionRate, ConversionRateLookup
from .location_format import normalize_location, is_valid_location, locations_equal, format_location
from .location_parser import LocationToken, parse_location
from .candidates import select_candidates, build_picking_locations
from .freshness import sort_by_freshness
from .allocation import AllocationResult, allocate
from .routing import generate_picking_route
from .planner import calculate_picking_plan, generate_bulk_picking_plans
from .stock_check import detect_stock_changes, is_plan_expired

__all__ = [
    "ParsedCode",
    "parse_code_multiplier",
    "apply_code_multiplier",
    "RateFallback",
    "resolve_base_quantity",
    "breakdown_base_quantity",
    "format_units_display",
    "ConversionRate",
    "ConversionRateLookup",
    "normalize_location",
    "is_valid_location",
    "locations_equal",
    "format_location",
    "LocationToken",
    "parse_location",
    "select_candidates",
    "build_picking_locations",
    "sort_by_freshness",
    "AllocationResult",
    "allocate",
    "generate_picking_route",
    "calculate_picking_plan",
    "generate_bulk_picking_plans",
    "detect_stock_changes",
    "is_plan_expired",
]
