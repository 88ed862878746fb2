"""
Product code multiplier parsing

A composite code such as ``L3-8GX6`` denotes six units of the base code
``L3-8G``. Stock is always held under the base code.
"""
import re
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional, Tuple, Union

# <base><X|x><1-3 digits>, anchored at the end of the code
MULTIPLIER_PATTERN = re.compile(r"^(.+)X(\d{1,3})$", re.IGNORECASE)


@dataclass(frozen=True)
class ParsedCode:
    """Result of splitting a product code into base code and multiplier"""
    base_code: str
    multiplier: int = 1
    has_multiplier: bool = False


def parse_code_multiplier(code: Optional[str]) -> ParsedCode:
    """
    Split a product code into its base code and quantity multiplier.

    A suffix multiplier of 0 or 1 is not a multiplier: the whole trimmed
    code is returned as the base code. Never raises.
    """
    cleaned = (code or "").strip()
    match = MULTIPLIER_PATTERN.match(cleaned)
    if match:
        multiplier = int(match.group(2))
        if multiplier > 1:
            return ParsedCode(
                base_code=match.group(1),
                multiplier=multiplier,
                has_multiplier=True
            )
    return ParsedCode(base_code=cleaned)


def apply_code_multiplier(
    code: Optional[str],
    quantity: Union[Decimal, int, float, str]
) -> Tuple[ParsedCode, Decimal]:
    """
    Parse ``code`` and scale ``quantity`` to base-code units.

    Returns (parsed code, quantity * multiplier)
    """
    parsed = parse_code_multiplier(code)
    return parsed, Decimal(str(quantity)) * parsed.multiplier
