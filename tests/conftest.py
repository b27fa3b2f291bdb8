"""Shared fixtures for FocusTime tests."""

from datetime import UTC, date, datetime
from typing import Any
from zoneinfo import ZoneInfo

import pytest
from homeassistant.core import HomeAssistant
from pytest_homeassistant_custom_component.common import MockConfigEntry

from custom_components.focustime import const
from custom_components.focustime.utils import dt_utils

# pylint: disable=invalid-name
pytest_plugins = "pytest_homeassistant_custom_component"
# pylint: enable=invalid-name

# 2026-01-16 is a Friday; its week started on Saturday 2026-01-10
FRIDAY = date(2026, 1, 16)
WEEK_START = date(2026, 1, 10)


def noon_utc(day: date) -> datetime:
    """Return 12:00 UTC on `day` (same calendar date in UTC and US/Pacific)."""
    return datetime(day.year, day.month, day.day, 12, 0, tzinfo=UTC)


class FakeClock:
    """Settable clock injected into the StatisticsManager."""

    def __init__(self, now: datetime) -> None:
        """Initialize the clock at `now`."""
        self.now = now

    def __call__(self) -> datetime:
        """Return the current fake time."""
        return self.now

    def move_to(self, now: datetime) -> None:
        """Jump to another point in time."""
        self.now = now


@pytest.fixture(autouse=True)
def auto_enable_custom_integrations(enable_custom_integrations: Any) -> Any:
    """Enable custom integrations in tests."""
    # pylint: disable=unused-argument
    yield


@pytest.fixture(autouse=True)
def default_timezone_utc() -> Any:
    """Run every test with UTC as the local timezone unless setup changes it."""
    original = dt_utils.get_default_timezone()
    dt_utils.set_default_timezone(ZoneInfo("UTC"))
    yield
    dt_utils.set_default_timezone(original)


@pytest.fixture
def mock_config_entry() -> MockConfigEntry:
    """Return a mock config entry with default options."""
    return MockConfigEntry(
        domain=const.DOMAIN,
        title=const.FOCUSTIME_TITLE,
        data={},
        options={
            const.CONF_RETENTION_DAILY: const.DEFAULT_RETENTION_DAILY,
            const.CONF_RETENTION_WEEKLY: const.DEFAULT_RETENTION_WEEKLY,
            const.CONF_RETENTION_MONTHLY: const.DEFAULT_RETENTION_MONTHLY,
            const.CONF_RETENTION_EVENTS: const.DEFAULT_RETENTION_EVENTS,
            const.CONF_RECENT_WINDOW_MINUTES: const.DEFAULT_RECENT_WINDOW_MINUTES,
        },
        entry_id="test_entry_id",
    )


@pytest.fixture
def legacy_document() -> dict[str, Any]:
    """Return a document written by an older release (no labels, no records)."""
    return {
        const.DATA_DAILY: {
            "2026-01-14": {const.DATA_BUCKET_MINUTES: 50, const.DATA_BUCKET_SESSIONS: 2},
            "2026-01-15": {const.DATA_BUCKET_MINUTES: 75, const.DATA_BUCKET_SESSIONS: 3},
        },
        const.DATA_WEEKLY: {
            "2026-01-10": {
                const.DATA_BUCKET_MINUTES: 125,
                const.DATA_BUCKET_SESSIONS: 5,
            },
        },
        const.DATA_MONTHLY: {
            "2026-01": {const.DATA_BUCKET_MINUTES: 125, const.DATA_BUCKET_SESSIONS: 5},
        },
        const.DATA_LIFETIME: {
            const.DATA_LIFETIME_TOTAL_MINUTES: 125,
            const.DATA_LIFETIME_TOTAL_SESSIONS: 5,
            const.DATA_LIFETIME_START_DATE: "2026-01-14",
        },
    }


@pytest.fixture
async def init_integration(
    hass: HomeAssistant,
    mock_config_entry: MockConfigEntry,  # pylint: disable=redefined-outer-name
    freezer: Any,
) -> MockConfigEntry:
    """Set up the FocusTime integration on Friday 2026-01-16 at noon local time."""
    # 20:00 UTC is 12:00 in the default US/Pacific test timezone
    freezer.move_to("2026-01-16 20:00:00+00:00")
    mock_config_entry.add_to_hass(hass)
    assert await hass.config_entries.async_setup(mock_config_entry.entry_id)
    await hass.async_block_till_done()
    return mock_config_entry
