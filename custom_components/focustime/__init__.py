# File: __init__.py
"""Initialization file for the FocusTime integration.

Handles setting up the integration from its config entry: configuring the
local timezone, loading the statistics document through the store, building
the single long-lived StatisticsManager, and registering services.
"""

from __future__ import annotations

from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant
from homeassistant.exceptions import ConfigEntryNotReady
import homeassistant.util.dt as dt_util

from . import const
from .managers.statistics_manager import StatisticsManager
from .services import async_setup_services, async_unload_services
from .store import FocusTimeStorageError, FocusTimeStore
from .utils import dt_utils


def _retention_from_options(entry: ConfigEntry) -> dict[str, int]:
    """Read retention horizons from the entry options."""
    options = entry.options
    return {
        const.PERIOD_DAILY: options.get(
            const.CONF_RETENTION_DAILY, const.DEFAULT_RETENTION_DAILY
        ),
        const.PERIOD_WEEKLY: options.get(
            const.CONF_RETENTION_WEEKLY, const.DEFAULT_RETENTION_WEEKLY
        ),
        const.PERIOD_MONTHLY: options.get(
            const.CONF_RETENTION_MONTHLY, const.DEFAULT_RETENTION_MONTHLY
        ),
        const.RETENTION_EVENTS: options.get(
            const.CONF_RETENTION_EVENTS, const.DEFAULT_RETENTION_EVENTS
        ),
    }


async def async_setup_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    """Set up the integration from a config entry."""
    const.LOGGER.info("INFO: Starting setup for FocusTime entry: %s", entry.entry_id)

    # Must be done before any period key is derived
    time_zone = dt_util.get_time_zone(hass.config.time_zone)
    if time_zone is not None:
        dt_utils.set_default_timezone(time_zone)

    store = FocusTimeStore(hass, const.STORAGE_KEY)
    manager = StatisticsManager(
        hass,
        entry.entry_id,
        store,
        retention_config=_retention_from_options(entry),
        recent_window_minutes=entry.options.get(
            const.CONF_RECENT_WINDOW_MINUTES, const.DEFAULT_RECENT_WINDOW_MINUTES
        ),
    )

    try:
        await manager.async_setup()
    except FocusTimeStorageError as err:
        const.LOGGER.error("ERROR: Failed to load FocusTime statistics: %s", err)
        raise ConfigEntryNotReady from err

    hass.data.setdefault(const.DOMAIN, {})[entry.entry_id] = {
        const.STATISTICS_MANAGER: manager,
        const.STORE: store,
    }

    async_setup_services(hass)

    entry.async_on_unload(entry.add_update_listener(async_reload_entry))

    const.LOGGER.info("INFO: FocusTime setup complete for entry: %s", entry.entry_id)
    return True


async def async_reload_entry(hass: HomeAssistant, entry: ConfigEntry) -> None:
    """Reload the entry when options change."""
    await hass.config_entries.async_reload(entry.entry_id)


async def async_unload_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    """Unload a config entry."""
    const.LOGGER.info("INFO: Unloading FocusTime entry: %s", entry.entry_id)
    hass.data[const.DOMAIN].pop(entry.entry_id, None)
    if not hass.data[const.DOMAIN]:
        async_unload_services(hass)
    return True


async def async_remove_entry(hass: HomeAssistant, entry: ConfigEntry) -> None:
    """Delete the stored statistics when the entry is removed."""
    const.LOGGER.info("INFO: Removing FocusTime storage for entry: %s", entry.entry_id)
    await FocusTimeStore(hass, const.STORAGE_KEY).async_remove()
