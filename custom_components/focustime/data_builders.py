"""Document structure builders and schema normalization.

This module is the SINGLE SOURCE OF TRUTH for:
- Field defaults of every stored structure (buckets, lifetime, goals, ...)
- The empty document skeleton written on first access
- Field-presence-driven migration of documents written by older releases

## Normalization (no explicit schema version)

Stored documents carry no version number. Older releases simply did not
write some fields, so `normalize_document()` backfills whatever is absent:

| Missing field            | Backfilled with                                 |
|--------------------------|-------------------------------------------------|
| goals / goals.*          | DEFAULT_GOAL_* targets                          |
| labels                   | DEFAULT_LABELS                                  |
| previousPeriods          | three empty snapshots                           |
| lifetime / lifetime.*    | zeroed lifetime, startDate = today              |
| bucket.labels            | {} (legacy minutes attributed to "other")      |
| bestRecords              | seeded from the maxima of surviving buckets     |
| timestampedSessions      | []                                              |

Normalization only touches the in-memory copy. Defaults reach storage with
the next real mutation, never merely because a document was read.

Consumers:
- store.py (load path)
- engines/statistics_engine.py (bucket creation during ingestion/cleanup)
"""

from __future__ import annotations

import copy
import math
from typing import Any

from . import const
from .type_defs import (
    BestRecordData,
    BestRecordsData,
    BucketData,
    EventData,
    FocusTimeDocument,
    GoalsData,
    LifetimeData,
)

# ==============================================================================
# STRUCTURE BUILDERS
# ==============================================================================


def build_bucket() -> BucketData:
    """Return a zeroed day/week/month bucket."""
    return {
        const.DATA_BUCKET_MINUTES: const.DEFAULT_ZERO,
        const.DATA_BUCKET_SESSIONS: const.DEFAULT_ZERO,
        const.DATA_BUCKET_LABELS: {},
    }  # type: ignore[return-value]


def build_lifetime(start_date: str) -> LifetimeData:
    """Return a zeroed lifetime aggregate starting on `start_date`."""
    return {
        const.DATA_LIFETIME_TOTAL_MINUTES: const.DEFAULT_ZERO,
        const.DATA_LIFETIME_TOTAL_SESSIONS: const.DEFAULT_ZERO,
        const.DATA_LIFETIME_START_DATE: start_date,
        const.DATA_LIFETIME_LABELS: {},
    }  # type: ignore[return-value]


def build_goals(
    daily_minutes: int = const.DEFAULT_GOAL_DAILY_MINUTES,
    weekly_minutes: int = const.DEFAULT_GOAL_WEEKLY_MINUTES,
    monthly_minutes: int = const.DEFAULT_GOAL_MONTHLY_MINUTES,
) -> GoalsData:
    """Return a goals structure with the floor constraints applied.

    Floors: daily >= 30, weekly >= 180, monthly >= 720 minutes.
    """
    return {
        const.DATA_GOALS_DAILY: max(const.MIN_GOAL_DAILY_MINUTES, daily_minutes),
        const.DATA_GOALS_WEEKLY: max(const.MIN_GOAL_WEEKLY_MINUTES, weekly_minutes),
        const.DATA_GOALS_MONTHLY: max(
            const.MIN_GOAL_MONTHLY_MINUTES, monthly_minutes
        ),
    }  # type: ignore[return-value]


def build_best_record(
    minutes: int | float = const.DEFAULT_ZERO,
    period_key: str = "",
    sessions: int = const.DEFAULT_ZERO,
) -> BestRecordData:
    """Return a single high-water mark."""
    return {
        const.DATA_BEST_MINUTES: minutes,
        const.DATA_BEST_PERIOD_KEY: period_key,
        const.DATA_BEST_SESSIONS: sessions,
    }  # type: ignore[return-value]


def build_best_records() -> BestRecordsData:
    """Return an empty best-record set."""
    return {
        const.DATA_BEST_DAY: build_best_record(),
        const.DATA_BEST_WEEK: build_best_record(),
        const.DATA_BEST_MONTH: build_best_record(),
    }  # type: ignore[return-value]


def build_previous_periods() -> dict[str, dict[str, Any]]:
    """Return empty previous-period snapshots."""
    return {
        const.DATA_PREVIOUS_DAY: {},
        const.DATA_PREVIOUS_WEEK: {},
        const.DATA_PREVIOUS_MONTH: {},
    }


def build_event(
    timestamp: str, minutes: int | float, label: str, sessions: int
) -> EventData:
    """Return one raw event record."""
    return {
        const.DATA_EVENT_TIMESTAMP: timestamp,
        const.DATA_EVENT_MINUTES: minutes,
        const.DATA_EVENT_LABEL: label,
        const.DATA_EVENT_SESSIONS: sessions,
    }  # type: ignore[return-value]


def build_default_document(period_keys: dict[str, str]) -> FocusTimeDocument:
    """Return the empty document skeleton created on first access.

    Today / this week / this month buckets are present and zeroed.

    Args:
        period_keys: Current keys as returned by StatisticsEngine.get_period_keys().
    """
    return {
        const.DATA_DAILY: {period_keys[const.PERIOD_DAILY]: build_bucket()},
        const.DATA_WEEKLY: {period_keys[const.PERIOD_WEEKLY]: build_bucket()},
        const.DATA_MONTHLY: {period_keys[const.PERIOD_MONTHLY]: build_bucket()},
        const.DATA_LIFETIME: build_lifetime(period_keys[const.PERIOD_DAILY]),
        const.DATA_GOALS: build_goals(),
        const.DATA_LABELS: list(const.DEFAULT_LABELS),
        const.DATA_PREVIOUS_PERIODS: build_previous_periods(),
        const.DATA_BEST_RECORDS: build_best_records(),
        const.DATA_EVENTS: [],
    }


# ==============================================================================
# NORMALIZATION / MIGRATION
# ==============================================================================


def _is_minutes(value: Any) -> bool:
    """Return True for a finite, non-negative number of minutes."""
    return (
        isinstance(value, int | float)
        and not isinstance(value, bool)
        and math.isfinite(value)
        and value >= 0
    )


def _normalize_bucket(bucket: Any) -> BucketData:
    """Backfill a single bucket; legacy minutes without labels go to "other"."""
    if not isinstance(bucket, dict):
        return build_bucket()

    minutes = bucket.get(const.DATA_BUCKET_MINUTES)
    if not _is_minutes(minutes):
        minutes = const.DEFAULT_ZERO
    sessions = bucket.get(const.DATA_BUCKET_SESSIONS)
    if not isinstance(sessions, int) or sessions < 0:
        sessions = const.DEFAULT_ZERO

    labels = bucket.get(const.DATA_BUCKET_LABELS)
    if not isinstance(labels, dict):
        labels = {const.FALLBACK_CATEGORY: minutes} if minutes else {}
    else:
        labels = {
            label: value for label, value in labels.items() if _is_minutes(value)
        }

    bucket[const.DATA_BUCKET_MINUTES] = minutes
    bucket[const.DATA_BUCKET_SESSIONS] = sessions
    bucket[const.DATA_BUCKET_LABELS] = labels
    return bucket  # type: ignore[return-value]


def _normalize_period_map(value: Any) -> dict[str, BucketData]:
    """Backfill every bucket of a daily/weekly/monthly map."""
    if not isinstance(value, dict):
        return {}
    return {key: _normalize_bucket(bucket) for key, bucket in value.items()}


def _seed_best_record(period_map: dict[str, BucketData]) -> BestRecordData:
    """Seed a high-water mark from the largest surviving bucket.

    Iterates keys in chronological order so that the earliest bucket keeps
    credit for a tied maximum.
    """
    best = build_best_record()
    for key in sorted(period_map):
        bucket = period_map[key]
        if bucket[const.DATA_BUCKET_MINUTES] > best[const.DATA_BEST_MINUTES]:
            best = build_best_record(
                bucket[const.DATA_BUCKET_MINUTES],
                key,
                bucket[const.DATA_BUCKET_SESSIONS],
            )
    return best


def normalize_document(raw: Any, today_key: str) -> tuple[FocusTimeDocument, bool]:
    """Normalize a stored document, backfilling every missing field.

    Idempotent and side-effect free beyond the returned copy: the input is
    deep-copied and nothing is persisted here.

    Args:
        raw: Whatever the store returned (may be malformed).
        today_key: Day key used as lifetime startDate when none is stored.

    Returns:
        (document, recovered) where `recovered` is True when `raw` was not a
        usable document and a fresh skeleton without current buckets was
        returned instead. The caller is responsible for logging.
    """
    if not isinstance(raw, dict):
        fresh = {
            const.DATA_DAILY: {},
            const.DATA_WEEKLY: {},
            const.DATA_MONTHLY: {},
            const.DATA_LIFETIME: build_lifetime(today_key),
            const.DATA_GOALS: build_goals(),
            const.DATA_LABELS: list(const.DEFAULT_LABELS),
            const.DATA_PREVIOUS_PERIODS: build_previous_periods(),
            const.DATA_BEST_RECORDS: build_best_records(),
            const.DATA_EVENTS: [],
        }
        return fresh, True

    doc: FocusTimeDocument = copy.deepcopy(raw)

    # Period maps
    for data_key in (const.DATA_DAILY, const.DATA_WEEKLY, const.DATA_MONTHLY):
        doc[data_key] = _normalize_period_map(doc.get(data_key))

    # Goals (whole structure, then individual targets)
    goals = doc.get(const.DATA_GOALS)
    if not isinstance(goals, dict):
        doc[const.DATA_GOALS] = build_goals()
    else:
        defaults = build_goals()
        for goal_key, default in defaults.items():
            if not goals.get(goal_key):
                goals[goal_key] = default

    # Labels
    labels = doc.get(const.DATA_LABELS)
    if not isinstance(labels, list) or not labels:
        doc[const.DATA_LABELS] = list(const.DEFAULT_LABELS)

    # Previous-period snapshots
    previous = doc.get(const.DATA_PREVIOUS_PERIODS)
    if not isinstance(previous, dict):
        doc[const.DATA_PREVIOUS_PERIODS] = build_previous_periods()
    else:
        for snapshot_key, default in build_previous_periods().items():
            if not isinstance(previous.get(snapshot_key), dict):
                previous[snapshot_key] = default

    # Lifetime
    lifetime = doc.get(const.DATA_LIFETIME)
    if not isinstance(lifetime, dict):
        doc[const.DATA_LIFETIME] = build_lifetime(today_key)
    else:
        if not _is_minutes(lifetime.get(const.DATA_LIFETIME_TOTAL_MINUTES)):
            lifetime[const.DATA_LIFETIME_TOTAL_MINUTES] = const.DEFAULT_ZERO
        lifetime.setdefault(const.DATA_LIFETIME_TOTAL_SESSIONS, const.DEFAULT_ZERO)
        lifetime.setdefault(const.DATA_LIFETIME_START_DATE, today_key)
        if not isinstance(lifetime.get(const.DATA_LIFETIME_LABELS), dict):
            total = lifetime[const.DATA_LIFETIME_TOTAL_MINUTES]
            lifetime[const.DATA_LIFETIME_LABELS] = (
                {const.FALLBACK_CATEGORY: total} if total else {}
            )
        else:
            lifetime[const.DATA_LIFETIME_LABELS] = {
                label: value
                for label, value in lifetime[const.DATA_LIFETIME_LABELS].items()
                if _is_minutes(value)
            }

    # Best records
    best = doc.get(const.DATA_BEST_RECORDS)
    if not isinstance(best, dict):
        best = {}
        doc[const.DATA_BEST_RECORDS] = best
    for record_key, data_key in (
        (const.DATA_BEST_DAY, const.DATA_DAILY),
        (const.DATA_BEST_WEEK, const.DATA_WEEKLY),
        (const.DATA_BEST_MONTH, const.DATA_MONTHLY),
    ):
        record = best.get(record_key)
        if not isinstance(record, dict) or not _is_minutes(
            record.get(const.DATA_BEST_MINUTES)
        ):
            best[record_key] = _seed_best_record(doc[data_key])

    # Raw event log
    events = doc.get(const.DATA_EVENTS)
    if not isinstance(events, list):
        doc[const.DATA_EVENTS] = []
    else:
        doc[const.DATA_EVENTS] = [
            event
            for event in events
            if isinstance(event, dict)
            and _is_minutes(event.get(const.DATA_EVENT_MINUTES))
            and event.get(const.DATA_EVENT_TIMESTAMP)
        ]

    return doc, False
