# File: utils/dt_utils.py
"""Date and time utilities for FocusTime.

Pure Python date/time functions with ZERO Home Assistant dependencies.
All functions here can be unit tested without Home Assistant mocking.

DIRECTIVE - UTILS PURITY: NO `homeassistant.*` imports allowed.
   Uses standard library: datetime, zoneinfo, dateutil.

Functions:
    - set_default_timezone / get_default_timezone: Local timezone configuration
    - dt_now_utc: Current time helper
    - as_utc / as_local: Timezone conversion
    - dt_parse: Parse ISO strings into timezone-aware datetimes
    - dt_add_months: Calendar month arithmetic (clamps to month end)
    - dt_format_duration: Format minutes as "1h 30m"
"""

from __future__ import annotations

from datetime import UTC, date, datetime
import logging
from zoneinfo import ZoneInfo

# Third-party date utilities (no HA dependency)
from dateutil.relativedelta import relativedelta

# Module-level logger (no HA dependency)
_LOGGER = logging.getLogger(__name__)

# Default timezone - can be overridden by caller
DEFAULT_TIME_ZONE: ZoneInfo = ZoneInfo("UTC")

MINUTES_PER_HOUR = 60


# ==============================================================================
# Timezone Configuration
# ==============================================================================


def set_default_timezone(tz: ZoneInfo) -> None:
    """Set the default timezone for all dt_utils functions.

    Call this during integration setup to configure the user's timezone.

    Args:
        tz: ZoneInfo object representing the default timezone
    """
    global DEFAULT_TIME_ZONE  # noqa: PLW0603
    DEFAULT_TIME_ZONE = tz


def get_default_timezone() -> ZoneInfo:
    """Get the current default timezone."""
    return DEFAULT_TIME_ZONE


# ==============================================================================
# Current Date/Time Functions
# ==============================================================================


def dt_now_utc() -> datetime:
    """Return the current datetime in UTC (timezone-aware)."""
    return datetime.now(UTC)


# ==============================================================================
# Timezone Conversion
# ==============================================================================


def as_utc(dt_obj: datetime) -> datetime:
    """Convert a datetime to UTC timezone.

    Naive datetimes are treated as UTC, the same as in as_local and dt_parse.
    """
    if dt_obj.tzinfo is None:
        return dt_obj.replace(tzinfo=UTC)
    return dt_obj.astimezone(UTC)


def as_local(dt_obj: datetime, tz: ZoneInfo | None = None) -> datetime:
    """Convert a datetime to local timezone.

    Args:
        dt_obj: Datetime object (naive values are treated as UTC)
        tz: Optional timezone override. Uses DEFAULT_TIME_ZONE if not provided.

    Returns:
        Datetime in local timezone
    """
    tz_info = tz or DEFAULT_TIME_ZONE
    if dt_obj.tzinfo is None:
        # Assume it's in UTC if naive
        dt_obj = dt_obj.replace(tzinfo=UTC)
    return dt_obj.astimezone(tz_info)


# ==============================================================================
# Parsing
# ==============================================================================


def dt_parse(dt_input: str | datetime | None) -> datetime | None:
    """Parse an ISO 8601 string (or pass through a datetime) as UTC-aware.

    Naive values are treated as UTC, matching how raw events are written.

    Returns:
        UTC-aware datetime, or None if the input could not be parsed.

    Example:
        "2026-01-16T12:00:00+00:00" → datetime(2026, 1, 16, 12, 0, tzinfo=UTC)
    """
    if not dt_input:
        return None

    if isinstance(dt_input, datetime):
        result = dt_input
    elif isinstance(dt_input, str):
        try:
            result = datetime.fromisoformat(dt_input)
        except ValueError:
            _LOGGER.debug("Unable to parse datetime string: %s", dt_input)
            return None
    else:
        return None

    if result.tzinfo is None:
        result = result.replace(tzinfo=UTC)
    return result.astimezone(UTC)


# ==============================================================================
# Arithmetic
# ==============================================================================


def dt_add_months(ref: date, months: int) -> date:
    """Add (or subtract) calendar months, clamping to the last day of month.

    Examples:
        dt_add_months(date(2026, 3, 31), -1) → date(2026, 2, 28)
        dt_add_months(date(2026, 1, 15), -1) → date(2025, 12, 15)
    """
    return ref + relativedelta(months=months)


# ==============================================================================
# Formatting
# ==============================================================================


def dt_format_duration(minutes: float | None) -> str:
    """Format a number of minutes as a compact duration string.

    Fractional minutes are rounded to the nearest whole minute.

    Examples:
        dt_format_duration(45) → "45m"
        dt_format_duration(120) → "2h"
        dt_format_duration(90) → "1h 30m"
        dt_format_duration(None) → "0m"
    """
    if not minutes or minutes <= 0:
        return "0m"

    total = round(minutes)
    hours, mins = divmod(total, MINUTES_PER_HOUR)

    if hours == 0:
        return f"{mins}m"
    if mins == 0:
        return f"{hours}h"
    return f"{hours}h {mins}m"
