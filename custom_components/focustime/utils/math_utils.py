# File: utils/math_utils.py
"""Math and calculation utilities for FocusTime.

Pure Python math functions with ZERO Home Assistant dependencies.
All functions here can be unit tested without Home Assistant mocking.

DIRECTIVE - UTILS PURITY: NO `homeassistant.*` imports allowed.

Functions:
    - round_minutes: Consistent rounding to configured precision
    - add_minutes: Exact addition that keeps integers as integers
    - round_breakdown: Display rounding of a category breakdown
    - calculate_percentage: Progress percentage calculations
    - clamp: Bound a value to a range
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Mapping

# ==============================================================================
# Constants (local copies to avoid circular imports)
# ==============================================================================

# Default float precision for minute rounding
DATA_FLOAT_PRECISION = 2


def round_minutes(value: float, precision: int = DATA_FLOAT_PRECISION) -> float:
    """Round a minute value to the configured precision.

    Examples:
        round_minutes(10.456) → 10.46
        round_minutes(10.0) → 10.0
    """
    return round(value, precision)


def add_minutes(current: int | float, value: int | float) -> int | float:
    """Add two minute values without rounding.

    Stored totals must stay exact so that they equal the sum of their
    contributions; round only when presenting. Integer totals stay integers.

    Examples:
        add_minutes(25, 30) → 55
        add_minutes(25, 0.5) → 25.5
    """
    return current + value


def round_breakdown(breakdown: Mapping[str, int | float]) -> dict[str, int | float]:
    """Return a copy of a category breakdown with every value rounded.

    Examples:
        round_breakdown({"study": 5.0999}) → {"study": 5.1}
    """
    return {label: round_minutes(value) for label, value in breakdown.items()}


def calculate_percentage(
    current: float,
    target: float,
    precision: int = DATA_FLOAT_PRECISION,
) -> float:
    """Calculate progress percentage with proper rounding.

    Returns:
        Percentage with proper rounding, or 0.0 if target is 0

    Examples:
        calculate_percentage(50, 100) → 50.0
        calculate_percentage(1, 3) → 33.33
        calculate_percentage(5, 0) → 0.0  # Division by zero protection
    """
    if target <= 0:
        return 0.0
    return round_minutes((current / target) * 100, precision)


def clamp(value: float, min_val: float, max_val: float) -> float:
    """Clamp a value between minimum and maximum bounds.

    Examples:
        clamp(150, 0, 100) → 100
        clamp(-10, 0, 100) → 0
    """
    return max(min_val, min(value, max_val))
