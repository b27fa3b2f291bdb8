"""Engine modules for FocusTime integration.

Contains specialized computation engines:
- statistics_engine: Period keys, rollups, best records, retention, rolling window
"""

# Use relative imports within package to avoid mypy module resolution issues
from .statistics_engine import (
    DEFAULT_RETENTION,
    StatisticsEngine,
    normalize_category,
    validate_retention,
)

__all__ = [
    "DEFAULT_RETENTION",
    "StatisticsEngine",
    "normalize_category",
    "validate_retention",
]
