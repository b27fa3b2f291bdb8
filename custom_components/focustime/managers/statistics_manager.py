"""Statistics Manager - owns the FocusTime document and serializes writes.

This manager is the single long-lived instance an entry holds. It:
- Loads and normalizes the stored document once at setup
- Funnels every mutation through one asyncio.Lock (read-modify-write is
  atomic within the process; overlapping service calls cannot lose updates)
- Applies mutations to a copy and commits it only after a successful write,
  so a failed save leaves the last known good state in memory
- Fires the stats-updated dispatcher signal and the optional post-write hook
  after each successful write
- Serves read-only views (today/this week/this month/lifetime, previous
  periods, rolling window, records, goals, labels) without mutating anything

If storage fails the caller gets FocusTimeStorageError and the in-memory
data stays at the last saved state.
"""

from __future__ import annotations

import asyncio
import copy
from typing import TYPE_CHECKING, Any

from .. import const
from ..data_builders import build_default_document, build_goals
from ..engines.statistics_engine import (
    DEFAULT_RETENTION,
    PERIOD_DATA_KEYS,
    StatisticsEngine,
    is_valid_contribution,
    normalize_category,
    validate_retention,
)
from ..utils.dt_utils import dt_format_duration
from ..utils.math_utils import round_breakdown, round_minutes
from .base_manager import BaseManager, PostWriteHook

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping
    from datetime import datetime

    from homeassistant.core import HomeAssistant

    from ..store import FocusTimeStore
    from ..type_defs import FocusTimeDocument, PeriodView, RecentStats


__all__ = ["StatisticsManager"]

MINUTES_PER_HOUR = 60

# Period type -> previous-period snapshot key
PREVIOUS_SNAPSHOT_KEYS = {
    const.PERIOD_DAILY: const.DATA_PREVIOUS_DAY,
    const.PERIOD_WEEKLY: const.DATA_PREVIOUS_WEEK,
    const.PERIOD_MONTHLY: const.DATA_PREVIOUS_MONTH,
}


class StatisticsManager(BaseManager):
    """Manager for focus time statistics.

    Responsibilities:
    - Record sessions and manual time entries
    - Maintain goals and the label set
    - Run the retention sweep at most once per instance
    - Expose read-only statistics views

    NOT responsible for:
    - Period/rollup rules (StatisticsEngine)
    - Document shape and migration (data_builders)
    - Storage I/O (FocusTimeStore)
    """

    def __init__(
        self,
        hass: HomeAssistant,
        entry_id: str,
        store: FocusTimeStore,
        *,
        retention_config: Mapping[str, int] | None = None,
        recent_window_minutes: int = const.DEFAULT_RECENT_WINDOW_MINUTES,
        max_events: int = const.DEFAULT_MAX_EVENTS,
        post_write_hook: PostWriteHook | None = None,
        clock: Callable[[], datetime] | None = None,
        engine: StatisticsEngine | None = None,
    ) -> None:
        """Initialize the StatisticsManager.

        Args:
            hass: Home Assistant instance
            entry_id: Config entry ID (scopes the dispatcher signal)
            store: Storage wrapper holding the document
            retention_config: Retention horizons; see DEFAULT_RETENTION
            recent_window_minutes: Default trailing window for recent_stats()
            max_events: Cap of the raw event log
            post_write_hook: Called with the snapshot after every write
            clock: Wall-clock source returning an aware datetime
            engine: Statistics engine (a fresh one by default)

        Raises:
            ValueError: if a retention horizon is shorter than one period.
        """
        super().__init__(hass, entry_id, post_write_hook)
        self._store = store
        self._engine = engine or StatisticsEngine()
        self._retention: dict[str, int] = {
            **DEFAULT_RETENTION,
            **(retention_config or {}),
        }
        validate_retention(self._retention)
        self._recent_window_minutes = recent_window_minutes
        self._max_events = max_events
        self._clock = clock or self._engine.now_local

        self._lock = asyncio.Lock()
        self._document: FocusTimeDocument | None = None
        self._cleanup_performed = False

    # ────────────────────────────────────────────────────────────────
    # Lifecycle
    # ────────────────────────────────────────────────────────────────

    async def async_setup(self) -> None:
        """Load the document and run the startup retention sweep."""
        keys = self._engine.get_period_keys(self._clock())
        self._document = await self._store.async_load_document(keys)
        await self.async_cleanup()
        const.LOGGER.debug(
            "DEBUG: StatisticsManager setup complete for %s", self.entry_id
        )

    @property
    def document(self) -> FocusTimeDocument:
        """Return the committed document (treat as read-only)."""
        if self._document is None:
            raise RuntimeError("StatisticsManager used before async_setup()")
        return self._document

    @property
    def retention_config(self) -> dict[str, int]:
        """Return the effective retention horizons."""
        return dict(self._retention)

    async def _async_mutate(
        self, mutator: Callable[[FocusTimeDocument, datetime], bool]
    ) -> bool:
        """Run one serialized read-modify-write cycle.

        The mutator receives a working copy and the "now" snapshot for the
        whole operation, and returns True if the copy should be persisted.
        """
        async with self._lock:
            now = self._clock()
            working = copy.deepcopy(self.document)
            if not mutator(working, now):
                return False
            await self._store.async_save(working)
            self._document = working

        self._after_write()
        return True

    def _after_write(self) -> None:
        """Announce a committed write with the fresh snapshot."""
        self.announce_write(const.SIGNAL_SUFFIX_STATS_UPDATED, self.snapshot())

    # ────────────────────────────────────────────────────────────────
    # Ingestion
    # ────────────────────────────────────────────────────────────────

    async def async_record(
        self,
        minutes: float,
        category: str | None = const.DEFAULT_CATEGORY,
        sessions: int = 1,
    ) -> dict[str, Any]:
        """Record timed work and return the updated snapshot.

        Non-positive or non-finite durations and fewer than one session are
        a no-op (callers may compute a zero delta).
        """
        if not is_valid_contribution(minutes, sessions):
            const.LOGGER.debug(
                "DEBUG: Ignoring invalid contribution %s min / %s session(s) for '%s'",
                minutes,
                sessions,
                category,
            )
            return self.snapshot()

        def _record(document: FocusTimeDocument, now: datetime) -> bool:
            return self._engine.record_session(
                document,
                minutes,
                category,
                sessions,
                reference=now,
                max_events=self._max_events,
            )

        await self._async_mutate(_record)
        const.LOGGER.info(
            "INFO: Recorded %s minutes of '%s' (%s session(s))",
            minutes,
            normalize_category(category),
            sessions,
        )
        return self.snapshot()

    async def async_add_manual_time(
        self,
        hours: int,
        minutes: int,
        category: str | None = const.DEFAULT_CATEGORY,
    ) -> dict[str, Any]:
        """Record a manual "add time" entry as one synthetic session."""
        return await self.async_record(hours * MINUTES_PER_HOUR + minutes, category, 1)

    # ────────────────────────────────────────────────────────────────
    # Retention
    # ────────────────────────────────────────────────────────────────

    async def async_cleanup(self) -> bool:
        """Run the retention sweep once per manager lifetime.

        Later calls return immediately, so callers may invoke it
        on every session start. The document is only written when the sweep
        removed something, re-created a current bucket, or refreshed a
        previous-period snapshot.

        Returns:
            True if the sweep ran during this call.
        """
        if self._cleanup_performed:
            return False

        def _cleanup(document: FocusTimeDocument, now: datetime) -> bool:
            snapshots_changed = self._refresh_previous_snapshots(document, now)
            keys = self._engine.get_period_keys(now)
            created = self._engine.ensure_current_buckets(document, keys)
            pruned = self._engine.prune_history(document, self._retention, now)
            const.LOGGER.debug(
                "DEBUG: Cleanup pruned %s entries (buckets created: %s)",
                pruned,
                created,
            )
            return bool(pruned or created or snapshots_changed)

        await self._async_mutate(_cleanup)
        self._cleanup_performed = True
        return True

    def _refresh_previous_snapshots(
        self, document: FocusTimeDocument, now: datetime
    ) -> bool:
        """Cache previous-period buckets so they outlive retention."""
        changed = False
        previous_keys = self._engine.get_previous_period_keys(now)
        snapshots = document[const.DATA_PREVIOUS_PERIODS]
        for period_type, snapshot_key in PREVIOUS_SNAPSHOT_KEYS.items():
            period_key = previous_keys[period_type]
            data_key = PERIOD_DATA_KEYS[period_type][0]
            bucket = document[data_key].get(period_key)
            if bucket is None:
                continue
            snapshot = {const.DATA_PREVIOUS_PERIOD_KEY: period_key, **copy.deepcopy(bucket)}
            if snapshots.get(snapshot_key) != snapshot:
                snapshots[snapshot_key] = snapshot
                changed = True
        return changed

    async def async_reset(self) -> None:
        """Replace all statistics with a fresh document."""

        def _reset(document: FocusTimeDocument, now: datetime) -> bool:
            fresh = build_default_document(self._engine.get_period_keys(now))
            document.clear()
            document.update(fresh)
            return True

        await self._async_mutate(_reset)
        const.LOGGER.warning("WARNING: All FocusTime statistics were reset")

    # ────────────────────────────────────────────────────────────────
    # Goals & Labels
    # ────────────────────────────────────────────────────────────────

    async def async_set_goals(
        self, daily_minutes: int, weekly_minutes: int, monthly_minutes: int
    ) -> dict[str, int]:
        """Replace the goals, applying the floor constraints."""
        goals = build_goals(daily_minutes, weekly_minutes, monthly_minutes)

        def _set_goals(document: FocusTimeDocument, now: datetime) -> bool:
            if document[const.DATA_GOALS] == goals:
                return False
            document[const.DATA_GOALS] = dict(goals)
            return True

        await self._async_mutate(_set_goals)
        return self.goals()

    async def async_add_label(self, name: str) -> list[str]:
        """Add a label (trimmed, lowercased). Duplicates and blanks are no-ops."""
        label = (name or "").strip().lower()

        def _add_label(document: FocusTimeDocument, now: datetime) -> bool:
            labels: list[str] = document[const.DATA_LABELS]
            if not label or label in labels:
                return False
            labels.append(label)
            return True

        await self._async_mutate(_add_label)
        return self.labels()

    async def async_remove_label(self, name: str) -> list[str]:
        """Remove a label; the last remaining label is never removed.

        Historical category breakdowns are left untouched.
        """
        label = (name or "").strip().lower()

        def _remove_label(document: FocusTimeDocument, now: datetime) -> bool:
            labels: list[str] = document[const.DATA_LABELS]
            if len(labels) <= 1:
                const.LOGGER.warning(
                    "WARNING: Refusing to remove '%s': at least one label must remain",
                    label,
                )
                return False
            if label not in labels:
                return False
            labels.remove(label)
            return True

        await self._async_mutate(_remove_label)
        return self.labels()

    # ────────────────────────────────────────────────────────────────
    # Read-side Accessors (never mutate)
    # ────────────────────────────────────────────────────────────────

    def _current_view(self, period_type: str) -> PeriodView:
        return self._engine.get_period_view(
            self.document, period_type, reference=self._clock()
        )

    def today(self) -> PeriodView:
        """Return today's bucket view."""
        return self._current_view(const.PERIOD_DAILY)

    def this_week(self) -> PeriodView:
        """Return this (Saturday-anchored) week's bucket view."""
        return self._current_view(const.PERIOD_WEEKLY)

    def this_month(self) -> PeriodView:
        """Return this month's bucket view."""
        return self._current_view(const.PERIOD_MONTHLY)

    def lifetime(self) -> dict[str, Any]:
        """Return the lifetime aggregate view."""
        lifetime = self.document[const.DATA_LIFETIME]
        total = lifetime[const.DATA_LIFETIME_TOTAL_MINUTES]
        return {
            const.PRES_TOTAL_MINUTES: round_minutes(total),
            const.PRES_SESSION_COUNT: lifetime[const.DATA_LIFETIME_TOTAL_SESSIONS],
            const.PRES_START_DATE: lifetime[const.DATA_LIFETIME_START_DATE],
            const.PRES_CATEGORY_BREAKDOWN: round_breakdown(
                lifetime[const.DATA_LIFETIME_LABELS]
            ),
            const.PRES_FORMATTED: dt_format_duration(total),
        }

    def _previous_view(self, period_type: str) -> PeriodView:
        """Look up the previous period by key arithmetic.

        Falls back to the snapshot cached at cleanup when retention already
        removed the bucket; otherwise a zeroed view.
        """
        period_key = self._engine.get_previous_period_keys(self._clock())[period_type]
        bucket = self.document[PERIOD_DATA_KEYS[period_type][0]].get(period_key)
        if bucket is None:
            snapshot = self.document[const.DATA_PREVIOUS_PERIODS].get(
                PREVIOUS_SNAPSHOT_KEYS[period_type], {}
            )
            if snapshot.get(const.DATA_PREVIOUS_PERIOD_KEY) == period_key:
                bucket = snapshot
        return self._engine.build_view(period_key, bucket)

    def previous_day(self) -> PeriodView:
        """Return yesterday's bucket view."""
        return self._previous_view(const.PERIOD_DAILY)

    def previous_week(self) -> PeriodView:
        """Return the view of the week starting 7 days before this week's Saturday."""
        return self._previous_view(const.PERIOD_WEEKLY)

    def previous_month(self) -> PeriodView:
        """Return last calendar month's bucket view."""
        return self._previous_view(const.PERIOD_MONTHLY)

    def recent_stats(self, window_minutes: float | None = None) -> RecentStats:
        """Return exact totals over the trailing window (default 6 hours)."""
        if window_minutes is None:
            window_minutes = self._recent_window_minutes
        return self._engine.compute_recent_stats(
            self.document[const.DATA_EVENTS], window_minutes, self._clock()
        )

    def best_records(self) -> dict[str, dict[str, Any]]:
        """Return copies of the three high-water marks, minutes rounded."""
        records = copy.deepcopy(self.document[const.DATA_BEST_RECORDS])
        for record in records.values():
            record[const.DATA_BEST_MINUTES] = round_minutes(
                record[const.DATA_BEST_MINUTES]
            )
        return records

    def goals(self) -> dict[str, int]:
        """Return the current goals."""
        return dict(self.document[const.DATA_GOALS])

    def goal_progress(self) -> dict[str, float]:
        """Return completion percentages (0-100) for day, week and month."""
        goals = self.document[const.DATA_GOALS]
        completion = self._engine.calculate_goal_completion
        return {
            const.PERIOD_DAILY: completion(
                self.today()[const.PRES_TOTAL_MINUTES], goals[const.DATA_GOALS_DAILY]
            ),
            const.PERIOD_WEEKLY: completion(
                self.this_week()[const.PRES_TOTAL_MINUTES],
                goals[const.DATA_GOALS_WEEKLY],
            ),
            const.PERIOD_MONTHLY: completion(
                self.this_month()[const.PRES_TOTAL_MINUTES],
                goals[const.DATA_GOALS_MONTHLY],
            ),
        }

    def labels(self) -> list[str]:
        """Return the ordered label set."""
        return list(self.document[const.DATA_LABELS])

    def snapshot(self) -> dict[str, Any]:
        """Return the aggregate snapshot returned by record() and services."""
        return {
            const.PRES_TODAY: self.today(),
            const.PRES_THIS_WEEK: self.this_week(),
            const.PRES_THIS_MONTH: self.this_month(),
            const.PRES_LIFETIME: self.lifetime(),
            const.PRES_BEST_RECORDS: self.best_records(),
            const.PRES_GOALS: self.goals(),
            const.PRES_GOAL_PROGRESS: self.goal_progress(),
            const.PRES_LABELS: self.labels(),
        }
