from __future__ import annotations

import math
import re
from typing import Any

_LEADING_NUMBER = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


def leading_float(text: str) -> float | None:
    """Read the numeric prefix of a CSS value ("12.5px" -> 12.5), or None."""
    match = _LEADING_NUMBER.match(text)
    if not match:
        return None
    value = float(match.group(1))
    if not math.isfinite(value):
        return None
    return value


def parse_length(value: Any) -> float:
    """Normalize a captured gap/length to pixels.

    Accepts numbers, "10px" and the two-value shorthand "10px 20px" (first
    value wins). Anything unreadable or negative becomes 0.
    """
    if value is None:
        return 0.0
    if isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        text = str(value).strip().split()
        if not text:
            return 0.0
        number = leading_float(text[0]) or 0.0
    if not math.isfinite(number):
        return 0.0
    return max(0.0, number)


def to_px(value: float) -> int:
    """Round a layout value for a real surface; surfaces reject sizes below 1px."""
    return max(1, int(round(value)))
