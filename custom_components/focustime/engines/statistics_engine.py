"""Statistics Engine - Time-bucketed focus time rollups.

This engine owns every rule about how timed-work events turn into
statistics:
- Period keys (calendar day, Saturday-anchored week, calendar month)
- Ingestion into day/week/month/lifetime buckets with category breakdown
- All-time-high records per granularity
- Retention pruning of buckets and raw events
- Exact rolling-window totals over the raw event log
- Read-only bucket views and goal completion

Design Principles:
    - Stateless: operates on the document passed in, never persists
    - Consistent: every key of one operation comes from one "now" snapshot
    - Local time: keys are derived from local dates, never UTC-shifted
"""

from __future__ import annotations

import math
from datetime import UTC, date, datetime, timedelta
from typing import TYPE_CHECKING, Any, Final

from .. import const
from ..data_builders import build_best_record, build_bucket, build_event
from ..utils.dt_utils import (
    as_local,
    as_utc,
    dt_add_months,
    dt_format_duration,
    dt_now_utc,
    dt_parse,
)
from ..utils.math_utils import (
    add_minutes,
    calculate_percentage,
    clamp,
    round_breakdown,
    round_minutes,
)

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from ..type_defs import (
        BucketData,
        EventData,
        FocusTimeDocument,
        PeriodView,
        RecentStats,
    )


# Default retention periods (can be overridden by config)
DEFAULT_RETENTION: Final[dict[str, int]] = {
    const.PERIOD_DAILY: const.DEFAULT_RETENTION_DAILY,
    const.PERIOD_WEEKLY: const.DEFAULT_RETENTION_WEEKLY,
    const.PERIOD_MONTHLY: const.DEFAULT_RETENTION_MONTHLY,
    const.RETENTION_EVENTS: const.DEFAULT_RETENTION_EVENTS,
}

# Smallest retention that keeps the previous period reachable by key arithmetic
MIN_RETENTION: Final[dict[str, int]] = {
    const.PERIOD_DAILY: const.MIN_RETENTION_DAILY,
    const.PERIOD_WEEKLY: const.MIN_RETENTION_WEEKLY,
    const.PERIOD_MONTHLY: const.MIN_RETENTION_MONTHLY,
    const.RETENTION_EVENTS: const.MIN_RETENTION_EVENTS,
}

# Period type -> (document key, best-record key)
PERIOD_DATA_KEYS: Final[dict[str, tuple[str, str]]] = {
    const.PERIOD_DAILY: (const.DATA_DAILY, const.DATA_BEST_DAY),
    const.PERIOD_WEEKLY: (const.DATA_WEEKLY, const.DATA_BEST_WEEK),
    const.PERIOD_MONTHLY: (const.DATA_MONTHLY, const.DATA_BEST_MONTH),
}


def normalize_category(category: str | None) -> str:
    """Trim and lowercase a category; empty input falls back to the default."""
    normalized = (category or "").strip().lower()
    return normalized or const.DEFAULT_CATEGORY


def is_valid_contribution(minutes: int | float, sessions: int = 1) -> bool:
    """Return True for a finite, positive duration of at least one session."""
    return math.isfinite(minutes) and minutes > 0 and sessions >= 1


def validate_retention(retention_config: Mapping[str, int]) -> None:
    """Assert that retention horizons cover the previous-period lookback.

    Previous-period views are computed by key arithmetic, so a horizon
    shorter than one period would silently turn them into zeroed views.

    Raises:
        ValueError: if any horizon is below its minimum.
    """
    for period_type, minimum in MIN_RETENTION.items():
        value = retention_config.get(period_type, DEFAULT_RETENTION[period_type])
        if value < minimum:
            raise ValueError(
                f"Retention for '{period_type}' is {value}, "
                f"must be at least {minimum} to keep the previous period"
            )


class StatisticsEngine:
    """Unified engine for focus time period statistics.

    All methods are stateless - they operate on the document passed as an
    argument. The engine does NOT persist data; the caller is responsible
    for persistence.

    Example:
        stats = StatisticsEngine()
        now = stats.now_local()

        stats.record_session(document, 25, "study", reference=now)
        today = stats.get_period_view(document, const.PERIOD_DAILY, reference=now)
        stats.prune_history(document, reference=now)
    """

    # ────────────────────────────────────────────────────────────────
    # Clock
    # ────────────────────────────────────────────────────────────────

    @staticmethod
    def now_local() -> datetime:
        """Return current datetime in local timezone."""
        return as_local(dt_now_utc())

    def _resolve_reference(self, reference: date | datetime | None) -> date:
        """Return the local date for a reference point (default: now)."""
        if reference is None:
            return self.now_local().date()
        if isinstance(reference, datetime):
            return as_local(reference).date()
        return reference

    # ────────────────────────────────────────────────────────────────
    # Period Key Generation
    # ────────────────────────────────────────────────────────────────

    @staticmethod
    def day_key(ref: date) -> str:
        """Return the day key `YYYY-MM-DD`."""
        return ref.strftime(const.PERIOD_FORMAT_DAILY)

    @staticmethod
    def week_start(ref: date) -> date:
        """Return the Saturday that starts the week containing `ref`.

        With Sunday=0 numbering the walk back is `(weekday + 1) % 7` days,
        which is zero on Saturday. Python's weekday() has Monday=0, so the
        same offset is `(weekday() - 5) % 7`.
        """
        days_back = (ref.weekday() - const.WEEK_START_WEEKDAY) % 7
        return ref - timedelta(days=days_back)

    @classmethod
    def week_key(cls, ref: date) -> str:
        """Return the week key: the Saturday starting the week, `YYYY-MM-DD`."""
        return cls.week_start(ref).strftime(const.PERIOD_FORMAT_DAILY)

    @staticmethod
    def month_key(ref: date) -> str:
        """Return the month key `YYYY-MM`."""
        return ref.strftime(const.PERIOD_FORMAT_MONTHLY)

    def get_period_keys(
        self, reference: date | datetime | None = None
    ) -> dict[str, str]:
        """Generate day, week and month keys from one snapshot of "now".

        Args:
            reference: Date or datetime to generate keys for. Datetimes are
                converted to local time first. Defaults to now (local).

        Returns:
            Dictionary with keys "daily", "weekly", "monthly".

        Example:
            >>> stats.get_period_keys(date(2026, 1, 16))  # a Friday
            {"daily": "2026-01-16", "weekly": "2026-01-10", "monthly": "2026-01"}
        """
        ref = self._resolve_reference(reference)
        return {
            const.PERIOD_DAILY: self.day_key(ref),
            const.PERIOD_WEEKLY: self.week_key(ref),
            const.PERIOD_MONTHLY: self.month_key(ref),
        }

    def get_previous_period_keys(
        self, reference: date | datetime | None = None
    ) -> dict[str, str]:
        """Generate the keys of the period before the current one.

        Previous day = today - 1 day; previous week = current week's Saturday
        - 7 days; previous month = current month - 1 calendar month.
        """
        ref = self._resolve_reference(reference)
        return {
            const.PERIOD_DAILY: self.day_key(ref - timedelta(days=1)),
            const.PERIOD_WEEKLY: self.day_key(self.week_start(ref) - timedelta(days=7)),
            const.PERIOD_MONTHLY: self.month_key(
                dt_add_months(ref.replace(day=1), -1)
            ),
        }

    # ────────────────────────────────────────────────────────────────
    # Ingestion
    # ────────────────────────────────────────────────────────────────

    def ensure_current_buckets(
        self, document: FocusTimeDocument, keys: Mapping[str, str]
    ) -> bool:
        """Create zeroed buckets for the given keys where missing.

        Returns:
            True if any bucket was created.
        """
        created = False
        for period_type, (data_key, _record_key) in PERIOD_DATA_KEYS.items():
            period_map = document.setdefault(data_key, {})
            if keys[period_type] not in period_map:
                period_map[keys[period_type]] = build_bucket()
                created = True
        return created

    def record_session(
        self,
        document: FocusTimeDocument,
        minutes: int | float,
        category: str | None,
        sessions: int = 1,
        reference: datetime | None = None,
        max_events: int = const.DEFAULT_MAX_EVENTS,
    ) -> bool:
        """Record timed work into the raw log and every aggregate.

        Steps: append the raw event, add to day/week/month/lifetime buckets
        (creating them zeroed if missing), then run the best-record check
        against the just-updated buckets.

        This method mutates `document` in place.

        Args:
            document: Normalized FocusTime document.
            minutes: Duration; non-positive or non-finite values are ignored.
            category: Category label; normalized (trim + lowercase). Labels
                outside the label set are recorded as ad hoc categories.
            sessions: Number of sessions this entry represents; below 1 is
                ignored.
            reference: Event time (aware). Defaults to now.
            max_events: Cap of the raw event log; oldest events drop first.

        Returns:
            True if anything was recorded, False for a no-op.
        """
        if not is_valid_contribution(minutes, sessions):
            return False

        now = reference or self.now_local()
        label = normalize_category(category)
        keys = self.get_period_keys(now)

        events: list[EventData] = document.setdefault(const.DATA_EVENTS, [])
        events.append(build_event(as_utc(now).isoformat(), minutes, label, sessions))
        if len(events) > max_events:
            events.sort(key=self._event_sort_key)
            del events[: len(events) - max_events]

        self.ensure_current_buckets(document, keys)
        for period_type, (data_key, _record_key) in PERIOD_DATA_KEYS.items():
            self._apply_to_bucket(
                document[data_key][keys[period_type]], minutes, label, sessions
            )

        lifetime = document[const.DATA_LIFETIME]
        lifetime[const.DATA_LIFETIME_TOTAL_MINUTES] = add_minutes(
            lifetime[const.DATA_LIFETIME_TOTAL_MINUTES], minutes
        )
        lifetime[const.DATA_LIFETIME_TOTAL_SESSIONS] += sessions
        lifetime_labels = lifetime[const.DATA_LIFETIME_LABELS]
        lifetime_labels[label] = add_minutes(lifetime_labels.get(label, 0), minutes)

        self.update_best_records(document, keys)
        return True

    @staticmethod
    def _apply_to_bucket(
        bucket: BucketData, minutes: int | float, label: str, sessions: int
    ) -> None:
        """Add one contribution to a bucket."""
        bucket[const.DATA_BUCKET_MINUTES] = add_minutes(
            bucket[const.DATA_BUCKET_MINUTES], minutes
        )
        bucket[const.DATA_BUCKET_SESSIONS] += sessions
        labels = bucket[const.DATA_BUCKET_LABELS]
        labels[label] = add_minutes(labels.get(label, 0), minutes)

    # ────────────────────────────────────────────────────────────────
    # Best Records
    # ────────────────────────────────────────────────────────────────

    def update_best_records(
        self, document: FocusTimeDocument, keys: Mapping[str, str]
    ) -> list[str]:
        """Replace high-water marks beaten by the buckets at `keys`.

        Compares the bucket's current total, not the delta, so records stay
        correct under out-of-order backfills. Ties keep the earlier holder.

        Returns:
            Period types whose record was replaced.
        """
        best_records = document[const.DATA_BEST_RECORDS]
        replaced: list[str] = []
        for period_type, (data_key, record_key) in PERIOD_DATA_KEYS.items():
            period_key = keys[period_type]
            bucket = document.get(data_key, {}).get(period_key)
            if bucket is None:
                continue
            record = best_records.setdefault(record_key, build_best_record())
            if bucket[const.DATA_BUCKET_MINUTES] > record[const.DATA_BEST_MINUTES]:
                best_records[record_key] = build_best_record(
                    bucket[const.DATA_BUCKET_MINUTES],
                    period_key,
                    bucket[const.DATA_BUCKET_SESSIONS],
                )
                replaced.append(period_type)
        return replaced

    # ────────────────────────────────────────────────────────────────
    # History Pruning
    # ────────────────────────────────────────────────────────────────

    def prune_history(
        self,
        document: FocusTimeDocument,
        retention_config: Mapping[str, int] | None = None,
        reference: datetime | None = None,
    ) -> int:
        """Remove buckets and raw events older than their retention horizon.

        - Day buckets older than `daily` days before today
        - Week buckets older than `weekly` weeks before the current week key
        - Month buckets older than `monthly` months before the current month
        - Raw events older than `events` days before now

        Current-period buckets are re-created zeroed afterwards. Best records
        and lifetime totals are never touched.

        This method mutates `document` in place.

        Returns:
            Total number of buckets and events removed.
        """
        now = reference or self.now_local()
        today = as_local(now).date()
        if retention_config is None:
            retention_config = DEFAULT_RETENTION

        def _retention(period_type: str) -> int:
            return retention_config.get(period_type, DEFAULT_RETENTION[period_type])

        cutoffs = {
            const.PERIOD_DAILY: self.day_key(
                today - timedelta(days=_retention(const.PERIOD_DAILY))
            ),
            const.PERIOD_WEEKLY: self.day_key(
                self.week_start(today)
                - timedelta(weeks=_retention(const.PERIOD_WEEKLY))
            ),
            const.PERIOD_MONTHLY: self.month_key(
                dt_add_months(today.replace(day=1), -_retention(const.PERIOD_MONTHLY))
            ),
        }

        total_pruned = 0
        for period_type, (data_key, _record_key) in PERIOD_DATA_KEYS.items():
            period_map = document.get(data_key, {})
            for period_key in list(period_map.keys()):
                if period_key < cutoffs[period_type]:
                    del period_map[period_key]
                    total_pruned += 1

        total_pruned += self.prune_events(
            document, _retention(const.RETENTION_EVENTS), now
        )

        self.ensure_current_buckets(document, self.get_period_keys(now))
        return total_pruned

    def prune_events(
        self, document: FocusTimeDocument, retention_days: int, now: datetime
    ) -> int:
        """Drop raw events older than `retention_days` (or unparseable)."""
        cutoff = as_utc(now) - timedelta(days=retention_days)
        events: list[EventData] = document.get(const.DATA_EVENTS, [])
        kept = [
            event
            for event in events
            if (timestamp := dt_parse(event.get(const.DATA_EVENT_TIMESTAMP)))
            is not None
            and timestamp >= cutoff
        ]
        pruned = len(events) - len(kept)
        document[const.DATA_EVENTS] = kept
        return pruned

    @staticmethod
    def _event_sort_key(event: EventData) -> datetime:
        return dt_parse(event.get(const.DATA_EVENT_TIMESTAMP)) or datetime.min.replace(
            tzinfo=UTC
        )

    # ────────────────────────────────────────────────────────────────
    # Rolling Window
    # ────────────────────────────────────────────────────────────────

    def compute_recent_stats(
        self,
        events: Iterable[EventData],
        window_minutes: int | float = const.DEFAULT_RECENT_WINDOW_MINUTES,
        reference: datetime | None = None,
    ) -> RecentStats:
        """Sum raw events with timestamp in `[now - window, now]`.

        Computed from raw events only, never from bucket totals, because a
        trailing window crosses bucket boundaries. Event order is not
        assumed; events in the future (clock adjusted backwards) are excluded.
        """
        now = as_utc(reference or self.now_local())
        start = now - timedelta(minutes=window_minutes)

        total: int | float = 0
        sessions = 0
        breakdown: dict[str, int | float] = {}
        if window_minutes > 0:
            for event in events:
                timestamp = dt_parse(event.get(const.DATA_EVENT_TIMESTAMP))
                if timestamp is None or not start <= timestamp <= now:
                    continue
                minutes = event[const.DATA_EVENT_MINUTES]
                label = event.get(const.DATA_EVENT_LABEL) or const.DEFAULT_CATEGORY
                total = add_minutes(total, minutes)
                sessions += event.get(const.DATA_EVENT_SESSIONS, 1)
                breakdown[label] = add_minutes(breakdown.get(label, 0), minutes)

        return {
            const.PRES_WINDOW_MINUTES: window_minutes,
            const.PRES_TOTAL_MINUTES: round_minutes(total),
            const.PRES_SESSION_COUNT: sessions,
            const.PRES_CATEGORY_BREAKDOWN: round_breakdown(breakdown),
            const.PRES_FORMATTED: dt_format_duration(total),
        }  # type: ignore[return-value]

    # ────────────────────────────────────────────────────────────────
    # Read-side Views
    # ────────────────────────────────────────────────────────────────

    @staticmethod
    def build_view(period_key: str, bucket: Mapping[str, Any] | None) -> PeriodView:
        """Return a read-only view of a bucket; missing buckets read as zero.

        Stored totals are exact; rounding happens here, for display only.
        """
        if bucket is None:
            bucket = build_bucket()
        minutes = bucket.get(const.DATA_BUCKET_MINUTES, 0)
        return {
            const.PRES_PERIOD_KEY: period_key,
            const.PRES_TOTAL_MINUTES: round_minutes(minutes),
            const.PRES_SESSION_COUNT: bucket.get(const.DATA_BUCKET_SESSIONS, 0),
            const.PRES_CATEGORY_BREAKDOWN: round_breakdown(
                bucket.get(const.DATA_BUCKET_LABELS) or {}
            ),
            const.PRES_FORMATTED: dt_format_duration(minutes),
        }  # type: ignore[return-value]

    def get_period_view(
        self,
        document: FocusTimeDocument,
        period_type: str,
        period_key: str | None = None,
        reference: date | datetime | None = None,
    ) -> PeriodView:
        """Look up a bucket view without mutating the document.

        Args:
            period_type: "daily", "weekly" or "monthly".
            period_key: Explicit key; defaults to the current period's key.
        """
        if period_key is None:
            period_key = self.get_period_keys(reference)[period_type]
        data_key = PERIOD_DATA_KEYS[period_type][0]
        return self.build_view(period_key, document.get(data_key, {}).get(period_key))

    @staticmethod
    def calculate_goal_completion(total_minutes: float, goal_minutes: float) -> float:
        """Return `min(100, 100 * total / goal)`, never negative."""
        return clamp(calculate_percentage(total_minutes, goal_minutes), 0.0, 100.0)
