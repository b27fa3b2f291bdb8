# File: ft_helpers.py
"""FocusTime helper functions shared by services and managers."""

from __future__ import annotations

from typing import TYPE_CHECKING

from homeassistant.config_entries import ConfigEntryState
from homeassistant.exceptions import HomeAssistantError

from . import const

if TYPE_CHECKING:
    from homeassistant.core import HomeAssistant

    from .managers.statistics_manager import StatisticsManager


def get_event_signal(entry_id: str, suffix: str) -> str:
    """Build instance-scoped event signal name for dispatcher.

    Format: 'focustime_{entry_id}_{suffix}'

    Example:
        get_event_signal("abc123", "stats_updated") → "focustime_abc123_stats_updated"
    """
    return f"{const.DOMAIN}_{entry_id}_{suffix}"


def get_first_focustime_entry(hass: HomeAssistant) -> str | None:
    """Retrieve the ID of the first loaded FocusTime config entry."""
    for entry in hass.config_entries.async_entries(const.DOMAIN):
        if entry.state == ConfigEntryState.LOADED:
            return entry.entry_id
    return None


def get_statistics_manager(hass: HomeAssistant) -> StatisticsManager:
    """Return the StatisticsManager of the first loaded entry.

    Raises:
        HomeAssistantError: if no FocusTime entry is loaded.
    """
    entry_id = get_first_focustime_entry(hass)
    if not entry_id:
        const.LOGGER.warning("WARNING: %s", const.MSG_NO_ENTRY_FOUND)
        raise HomeAssistantError(
            translation_domain=const.DOMAIN,
            translation_key=const.TRANS_KEY_ERROR_NO_ENTRY,
        )
    return hass.data[const.DOMAIN][entry_id][const.STATISTICS_MANAGER]
