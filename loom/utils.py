"""Numeric helpers shared by the scorers and upstream parsers."""
import math
from typing import Any


def safe_normalize(value: float, low: float, high: float, fallback: float = 0.5) -> float:
    """Clamp ``value`` into [low, high]; non-finite values become ``fallback``."""
    try:
        value = float(value)
    except (TypeError, ValueError):
        return fallback
    if not math.isfinite(value):
        return fallback
    return max(low, min(high, value))


def safe_float(value: Any, fallback: float = 0.0) -> float:
    """Parse a float from upstream data, ``fallback`` if missing or garbage."""
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        return fallback
    return parsed if math.isfinite(parsed) else fallback
