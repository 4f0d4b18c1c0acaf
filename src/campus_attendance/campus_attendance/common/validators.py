from __future__ import annotations

import re
from typing import Any, Optional

from ..core.exceptions import ValidationError

_LEADING_DIGITS = re.compile(r"^\s*(\d+)")


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def loose_int(value: Any) -> Optional[int]:
    """Read an integer out of loosely typed import data.

    Accepts ints, numeric strings and ordinals ("1", 1, "1st", "2ND").
    Returns None when no leading number is present.
    """

    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    m = _LEADING_DIGITS.match(str(value))
    return int(m.group(1)) if m else None


def require_year(value: Any) -> int:
    year = loose_int(value)
    if year is None or year <= 0:
        raise ValidationError(f"Invalid year '{value}'")
    return year
