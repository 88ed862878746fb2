"""
Per-code conversion rate lookup

An explicit rate map handed to the unit resolver. The caller owns its
lifecycle (typically one lookup per planning run); nothing here is global.
"""
from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, Iterable, Mapping, Optional


@dataclass(frozen=True)
class ConversionRate:
    level1_rate: Optional[Decimal] = None
    level2_rate: Optional[Decimal] = None
    level1_name: Optional[str] = None
    level2_name: Optional[str] = None
    level3_name: Optional[str] = None


def _key(code: Optional[str]) -> str:
    return (code or "").strip().lower()


class ConversionRateLookup:
    """Case-insensitive map of stock code -> ConversionRate"""

    def __init__(self, rates: Optional[Mapping[str, ConversionRate]] = None):
        self._rates: Dict[str, ConversionRate] = {}
        for code, rate in (rates or {}).items():
            self.add(code, rate)

    @classmethod
    def from_rows(cls, rows: Iterable) -> "ConversionRateLookup":
        """
        Build a lookup from conversion rate rows

        Rows need ``sku``, ``unit_level1_rate`` and ``unit_level2_rate``
        attributes; unit name attributes are optional.
        """
        lookup = cls()
        for row in rows:
            lookup.add(row.sku, ConversionRate(
                level1_rate=row.unit_level1_rate,
                level2_rate=row.unit_level2_rate,
                level1_name=getattr(row, "unit_level1_name", None),
                level2_name=getattr(row, "unit_level2_name", None),
                level3_name=getattr(row, "unit_level3_name", None),
            ))
        return lookup

    def add(self, code: str, rate: ConversionRate) -> None:
        key = _key(code)
        if key:
            self._rates[key] = rate

    def get(self, code: Optional[str]) -> Optional[ConversionRate]:
        return self._rates.get(_key(code))

    def __contains__(self, code) -> bool:
        return _key(code) in self._rates

    def __len__(self) -> int:
        return len(self._rates)
