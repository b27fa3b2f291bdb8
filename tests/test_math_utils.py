"""Tests for pure math utilities."""

import pytest

from custom_components.focustime.utils import math_utils


def test_add_minutes_keeps_integers() -> None:
    """Integer sums stay integers."""
    result = math_utils.add_minutes(25, 30)

    assert result == 55
    assert isinstance(result, int)


def test_add_minutes_does_not_round() -> None:
    """Float sums are exact so that tiny contributions are never lost."""
    total: float = 0
    for _ in range(100):
        total = math_utils.add_minutes(total, 0.004)

    assert total == pytest.approx(0.4)
    assert math_utils.add_minutes(10, 0.25) == 10.25


def test_round_breakdown() -> None:
    """Breakdown values are rounded for display; integers stay integers."""
    breakdown = {"study": 5.0999999, "programming": 30}

    assert math_utils.round_breakdown(breakdown) == {"study": 5.1, "programming": 30}
    assert breakdown["study"] == 5.0999999


@pytest.mark.parametrize(
    ("current", "target", "expected"),
    [(50, 100, 50.0), (1, 3, 33.33), (5, 0, 0.0), (5, -1, 0.0)],
)
def test_calculate_percentage(current: float, target: float, expected: float) -> None:
    """Percentages are rounded and protected against zero targets."""
    assert math_utils.calculate_percentage(current, target) == expected


def test_clamp() -> None:
    """Values are bounded on both sides."""
    assert math_utils.clamp(150, 0, 100) == 100
    assert math_utils.clamp(-10, 0, 100) == 0
    assert math_utils.clamp(42, 0, 100) == 42
