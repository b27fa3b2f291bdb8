"""Tests for pure date/time utilities."""

from __future__ import annotations

from datetime import UTC, date, datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest

from custom_components.focustime.utils import dt_utils


class TestTimezone:
    """Tests for timezone configuration and conversion."""

    def test_set_default_timezone(self) -> None:
        """The configured timezone drives local conversions."""
        dt_utils.set_default_timezone(ZoneInfo("Europe/Berlin"))

        local = dt_utils.as_local(datetime(2026, 1, 16, 23, 30, tzinfo=UTC))

        assert dt_utils.get_default_timezone() == ZoneInfo("Europe/Berlin")
        assert local.date() == date(2026, 1, 17)

    def test_as_local_treats_naive_as_utc(self) -> None:
        """Naive values passed to as_local are UTC."""
        dt_utils.set_default_timezone(ZoneInfo("America/New_York"))

        local = dt_utils.as_local(datetime(2026, 1, 16, 3, 0))

        assert local.date() == date(2026, 1, 15)

    def test_naive_values_are_utc_in_both_directions(self) -> None:
        """as_utc and as_local agree that naive values are UTC."""
        dt_utils.set_default_timezone(ZoneInfo("America/New_York"))
        naive = datetime(2026, 1, 16, 20, 0)

        assert dt_utils.as_utc(naive) == datetime(2026, 1, 16, 20, 0, tzinfo=UTC)
        assert dt_utils.as_local(naive) == dt_utils.as_local(dt_utils.as_utc(naive))
        assert dt_utils.as_utc(naive) == dt_utils.dt_parse(naive)


class TestParse:
    """Tests for dt_parse."""

    def test_parses_offset_string(self) -> None:
        """Strings with an offset are converted to UTC."""
        assert dt_utils.dt_parse("2026-01-16T14:00:00+02:00") == datetime(
            2026, 1, 16, 12, 0, tzinfo=UTC
        )

    def test_naive_string_is_utc(self) -> None:
        """Strings without offset are UTC."""
        assert dt_utils.dt_parse("2026-01-16T12:00:00") == datetime(
            2026, 1, 16, 12, 0, tzinfo=UTC
        )

    def test_datetime_passthrough(self) -> None:
        """Aware datetimes are returned in UTC."""
        value = datetime(2026, 1, 16, 7, 0, tzinfo=timezone(timedelta(hours=-5)))

        assert dt_utils.dt_parse(value) == datetime(2026, 1, 16, 12, 0, tzinfo=UTC)

    @pytest.mark.parametrize("value", [None, "", "yesterday", 12345])
    def test_invalid_returns_none(self, value: object) -> None:
        """Unparseable input yields None."""
        assert dt_utils.dt_parse(value) is None  # type: ignore[arg-type]


class TestArithmeticAndFormatting:
    """Tests for month arithmetic and duration formatting."""

    @pytest.mark.parametrize(
        ("ref", "months", "expected"),
        [
            (date(2026, 3, 31), -1, date(2026, 2, 28)),
            (date(2026, 1, 15), -1, date(2025, 12, 15)),
            (date(2026, 1, 1), -12, date(2025, 1, 1)),
            (date(2025, 11, 30), 3, date(2026, 2, 28)),
        ],
    )
    def test_add_months(self, ref: date, months: int, expected: date) -> None:
        """Month arithmetic clamps to the end of the month."""
        assert dt_utils.dt_add_months(ref, months) == expected

    @pytest.mark.parametrize(
        ("minutes", "expected"),
        [
            (None, "0m"),
            (0, "0m"),
            (-3, "0m"),
            (45, "45m"),
            (60, "1h"),
            (120, "2h"),
            (90, "1h 30m"),
            (89.6, "1h 30m"),
            (1500, "25h"),
        ],
    )
    def test_format_duration(self, minutes: float | None, expected: str) -> None:
        """Durations render as compact hour/minute strings."""
        assert dt_utils.dt_format_duration(minutes) == expected
