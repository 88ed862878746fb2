"""
Location string normalization

Standard format is ``<Row><Position>/<Level>``, e.g. ``A4/1`` is row A,
position 4, level 1. Positions run 1-20 and levels 1-4. Older records use
several legacy layouts which are converted here.
"""
import re
from typing import Optional

from stockpick.core.exceptions import ValidationError

MIN_POSITION, MAX_POSITION = 1, 20
MIN_LEVEL, MAX_LEVEL = 1, 4

STANDARD_PATTERN = re.compile(r"^[A-Z]([1-9]|1[0-9]|20)/[1-4]$")
# A/1/01 (row/level/position)
LEGACY_ROW_LEVEL_POSITION = re.compile(r"^([A-Z])/([1-4])/([0-9]|[01][0-9]|20)$")
# A01/4 (zero padded position)
PADDED_POSITION = re.compile(r"^([A-Z])([0-9]|[01][0-9]|20)/([1-4])$")
# A14 -> A1/4, A014 -> A14/1
CONCATENATED = re.compile(r"^([A-Z])(\d{2,3})$")
ROW_WITH_POSITION = re.compile(r"^[A-Z]\d+$")
SEPARATORS = re.compile(r"[/\-\s.]+")


def _in_range(position: int, level: int) -> bool:
    return MIN_POSITION <= position <= MAX_POSITION and MIN_LEVEL <= level <= MAX_LEVEL


def _standard(row: str, position: int, level: int) -> Optional[str]:
    if _in_range(position, level):
        return f"{row}{position}/{level}"
    return None


def _convert(cleaned: str) -> Optional[str]:
    match = LEGACY_ROW_LEVEL_POSITION.match(cleaned)
    if match:
        row, level, position = match.groups()
        return _standard(row, int(position), int(level))

    match = PADDED_POSITION.match(cleaned)
    if match:
        row, position, level = match.groups()
        return _standard(row, int(position), int(level))

    parts = [part for part in SEPARATORS.split(cleaned) if part]

    # A1-4, A1 4, A1.4
    if len(parts) == 2 and ROW_WITH_POSITION.match(parts[0]) and parts[1].isdigit():
        return _standard(parts[0][0], int(parts[0][1:]), int(parts[1]))

    # A-1-5, A 1 5 (row, level, position)
    if len(parts) >= 3:
        row, level, position = parts[:3]
        if re.match(r"^[A-Z]$", row) and level.isdigit() and position.isdigit():
            return _standard(row, int(position), int(level))

    match = CONCATENATED.match(cleaned)
    if match:
        row, numbers = match.groups()
        if len(numbers) == 2:
            return _standard(row, int(numbers[0]), int(numbers[1]))
        return _standard(row, int(numbers[:2]), int(numbers[2]))

    return None


def normalize_location(location: Optional[str]) -> str:
    """
    Normalize a location string to the standard ``A1/1`` format.

    Unrecognised input is returned unchanged; empty input gives ``""``.
    """
    if not location:
        return ""

    cleaned = location.strip().upper()
    if STANDARD_PATTERN.match(cleaned):
        return cleaned

    return _convert(cleaned) or location


def is_valid_location(location: Optional[str]) -> bool:
    """Check whether a location normalizes to the standard format"""
    if not location:
        return False
    return bool(STANDARD_PATTERN.match(normalize_location(location)))


def locations_equal(location1: Optional[str], location2: Optional[str]) -> bool:
    """Compare two locations regardless of their stored format"""
    if not location1 or not location2:
        return False
    return normalize_location(location1) == normalize_location(location2)


def format_location(row: str, position: int, level: int) -> str:
    """Build a standard location string from its components"""
    row = (row or "").upper()
    if not re.match(r"^[A-Z]$", row) or not _in_range(position, level):
        raise ValidationError(
            f"Invalid location parameters: row={row}, position={position}, level={level}"
        )
    return f"{row}{position}/{level}"
