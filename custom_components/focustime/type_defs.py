"""Type definitions for FocusTime data structures.

Hybrid approach, as in the rest of the integration:

1. **TypedDict for STATIC structures** (fixed keys known at design time):
   buckets, lifetime totals, goals, best records, raw events.

2. **dict[str, Any] for DYNAMIC structures** (keys determined at runtime):
   the period maps keyed by period key (`daily["2026-01-16"]`) and the
   category breakdowns keyed by label.

Stored field names follow the legacy camelCase document so that documents
written by earlier releases load unchanged.

NOTE: TypedDict is STATIC ANALYSIS ONLY. Runtime normalization of missing
fields lives in data_builders.normalize_document().
"""

from typing import Any, TypedDict

# =============================================================================
# Type Aliases (for readability)
# =============================================================================

PeriodKey = str  # "2026-01-16" (day / week start) or "2026-01" (month)
ISODatetime = str  # ISO 8601 datetime string "2026-01-16T12:30:00+00:00"
ISODate = str  # ISO 8601 date string "2026-01-16"
CategoryBreakdown = dict[str, int | float]


# =============================================================================
# Stored Structures
# =============================================================================


class BucketData(TypedDict):
    """Aggregate for one day, week or month."""

    minutes: int | float
    sessions: int
    labels: CategoryBreakdown


class LifetimeData(TypedDict):
    """All-time aggregate. startDate is written once and never changed."""

    totalMinutes: int | float
    totalSessions: int
    startDate: ISODate
    labels: CategoryBreakdown


class GoalsData(TypedDict):
    """User-editable targets used for completion percentages."""

    dailyMinutes: int
    weeklyMinutes: int
    monthlyMinutes: int


class BestRecordData(TypedDict):
    """High-water mark for one granularity."""

    minutes: int | float
    periodKey: PeriodKey
    sessions: int


class BestRecordsData(TypedDict):
    """The three independent high-water marks."""

    bestDay: BestRecordData
    bestWeek: BestRecordData
    bestMonth: BestRecordData


class EventData(TypedDict):
    """One raw timed-work event in the bounded event log."""

    timestamp: ISODatetime
    minutes: int | float
    label: str
    sessions: int


# Root document: fixed top-level keys, but the period maps are dynamic so the
# whole document is handled as dict[str, Any].
FocusTimeDocument = dict[str, Any]


# =============================================================================
# Presentation Structures (never persisted)
# =============================================================================


class PeriodView(TypedDict):
    """Read-only view of one bucket returned to callers."""

    period_key: PeriodKey
    total_minutes: int | float
    session_count: int
    category_breakdown: CategoryBreakdown
    formatted: str


class RecentStats(TypedDict):
    """Aggregate over a trailing window computed from raw events."""

    window_minutes: int | float
    total_minutes: int | float
    session_count: int
    category_breakdown: CategoryBreakdown
    formatted: str
