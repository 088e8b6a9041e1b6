"""Named sentinel values returned in place of undefined ratios."""

from __future__ import annotations

import math
from enum import Enum

# Interpretation shown when a ratio cannot be read as a number.
NO_DATA_LABEL = "Insufficient Data"


class Sentinel(str, Enum):
    """Fixed display values for degenerate inputs.

    Members are strings, so they render and compare like any formatted
    ratio while remaining distinguishable by identity.
    """

    ZERO = "0.00"
    MAX_RATIO = "999.99"
    NEGATIVE_EQUITY = "-999.99"


def format_ratio(value: float) -> str:
    """Round to two decimals for display."""
    text = f"{value:.2f}"
    # Avoid "-0.00" for tiny negatives.
    if text == "-0.00":
        return "0.00"
    return text


def is_sentinel(value: object) -> bool:
    return isinstance(value, Sentinel)


def ratio_value(value: str | float) -> float | None:
    """Numeric value of a ratio result (formatted string or sentinel).

    Returns:
        The float value, or None when the input is not a finite number
        (e.g. a provider placeholder such as "N/A").
    """
    if isinstance(value, Sentinel):
        return float(value.value)
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return number
