from __future__ import annotations

from typing import Optional

from ..core.exceptions import ValidationError


def require_non_empty(value: Optional[str], field_name: str) -> str:
    if not value or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    return str(value).strip()


def round_half_up(value: float) -> int:
    """Round .5 away from zero for non-negative values.

    Python's round() uses banker's rounding; rates and averages here follow the
    conventional rule (82.5 -> 83).
    """
    return int(value + 0.5) if value >= 0 else -int(-value + 0.5)
