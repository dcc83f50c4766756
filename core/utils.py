"""
Core utility functions used across domains
"""
import math
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, Iterable, List, Tuple

MONTH_LABELS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def round_half_up(value: float, places: int) -> float:
    """Round to a fixed number of decimals, halves away from zero"""
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def clamp(value: float, lower: float, upper: float) -> float:
    """Clamp value into [lower, upper]"""
    return max(lower, min(upper, value))


def is_finite_number(value: Any) -> bool:
    """True for real ints/floats that are neither NaN nor infinite"""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def safe_divide(numerator: float, denominator: float, default: float = 0.0) -> float:
    """Safely divide two numbers, returning default if denominator is zero"""
    if denominator == 0:
        return default
    return numerator / denominator


def trailing_months(reference: date, count: int = 6) -> List[Tuple[str, int, int]]:
    """
    Calendar months ending at the reference month, oldest first.

    Returns:
        List of (short label, month number, year) tuples
    """
    months = []
    for offset in range(count - 1, -1, -1):
        index = reference.year * 12 + (reference.month - 1) - offset
        year, month_zero = divmod(index, 12)
        months.append((MONTH_LABELS[month_zero], month_zero + 1, year))
    return months


def first_by_key(items: Iterable[Any], key_func) -> Dict[Any, Any]:
    """Index items by key, keeping the first occurrence of each key"""
    index: Dict[Any, Any] = {}
    for item in items:
        index.setdefault(key_func(item), item)
    return index
