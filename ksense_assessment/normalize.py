"""
Normalizers for the three vital-sign fields of a patient record.

Each parser accepts whatever the API sent and returns either a validated
value or ``None`` when the field is missing, malformed or outside its sanity
range. They never raise.
"""

import math
import re
from typing import Any, NamedTuple, Optional

BP_PATTERN = re.compile(r"([0-9]+)\s*[/\\]\s*([0-9]+)")
NUMBER_PREFIX = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")

TEMP_UNIT_CHARS = re.compile(r"[°FfCc]")
NON_NUMERIC_CHARS = re.compile(r"[^0-9.]")

TEMP_RANGE = (90.0, 115.0)
AGE_RANGE = (0.0, 150.0)


class BloodPressure(NamedTuple):
    systolic: int
    diastolic: int


def _is_missing(value):
    return value is None or value == ""


def _is_number(value):
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _to_float(value: Any) -> Optional[float]:
    try:
        return float(value)
    except (OverflowError, ValueError):
        return None


def _leading_number(text: str) -> Optional[float]:
    # reads the numeric prefix, so "98.6 (oral)" gives 98.6
    match = NUMBER_PREFIX.match(text.strip())
    if not match:
        return None
    return _to_float(match.group(0))


def _in_range(value: Optional[float], bounds) -> bool:
    if value is None or math.isnan(value):
        return False
    low, high = bounds
    return low <= value <= high


def parse_blood_pressure(value: Any) -> Optional[BloodPressure]:
    """
    Parse "SYS/DIA" (a backslash separator and spaces around it are accepted).

    Both sides must be positive and systolic must not be below diastolic.
    """
    if _is_missing(value):
        return None

    match = BP_PATTERN.fullmatch(str(value).strip())
    if not match:
        return None

    try:
        systolic, diastolic = int(match.group(1)), int(match.group(2))
    except ValueError:
        # over the interpreter's int digit limit
        return None
    if systolic <= 0 or diastolic <= 0 or systolic < diastolic:
        return None
    return BloodPressure(systolic, diastolic)


def parse_temperature(value: Any) -> Optional[float]:
    """Degrees Fahrenheit in [90, 115]. Unit marks are dropped, no conversion is done."""
    if _is_missing(value):
        return None

    if _is_number(value):
        temp = _to_float(value)
    else:
        temp = _leading_number(TEMP_UNIT_CHARS.sub("", str(value)))

    if not _in_range(temp, TEMP_RANGE):
        return None
    return temp


def parse_age(value: Any) -> Optional[int]:
    """Whole years in [0, 150]; text keeps only digits and dots, so "45 years" is 45."""
    if _is_missing(value):
        return None

    if _is_number(value):
        age = _to_float(value)
    else:
        age = _leading_number(NON_NUMERIC_CHARS.sub("", str(value)))

    if not _in_range(age, AGE_RANGE):
        return None
    return math.floor(age)
