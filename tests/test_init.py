"""Tests for FocusTime setup, reload, unload and removal."""

# pylint: disable=redefined-outer-name  # Pytest fixtures redefine names

from typing import Any
from unittest.mock import AsyncMock, patch

import pytest
from homeassistant.config_entries import ConfigEntryState
from homeassistant.core import HomeAssistant
from homeassistant.exceptions import HomeAssistantError
from pytest_homeassistant_custom_component.common import MockConfigEntry

from custom_components.focustime import const
from custom_components.focustime import ft_helpers as fh
from custom_components.focustime.managers import StatisticsManager
from custom_components.focustime.store import FocusTimeStorageError
from custom_components.focustime.utils import dt_utils


async def test_setup_entry(
    hass: HomeAssistant, init_integration: MockConfigEntry
) -> None:
    """Setup stores the manager and installs the local timezone."""
    assert init_integration.state is ConfigEntryState.LOADED

    manager = fh.get_statistics_manager(hass)
    assert isinstance(manager, StatisticsManager)
    assert hass.data[const.DOMAIN][init_integration.entry_id][
        const.STATISTICS_MANAGER
    ] is manager
    assert str(dt_utils.get_default_timezone()) == hass.config.time_zone
    assert manager.today()[const.PRES_PERIOD_KEY] == "2026-01-16"


async def test_setup_storage_failure_retries(
    hass: HomeAssistant, mock_config_entry: MockConfigEntry
) -> None:
    """A store read failure puts the entry into setup retry."""
    mock_config_entry.add_to_hass(hass)

    with patch(
        "custom_components.focustime.store.FocusTimeStore.async_load_document",
        AsyncMock(side_effect=FocusTimeStorageError("unreadable")),
    ):
        await hass.config_entries.async_setup(mock_config_entry.entry_id)
        await hass.async_block_till_done()

    assert mock_config_entry.state is ConfigEntryState.SETUP_RETRY


async def test_unload_entry(
    hass: HomeAssistant, init_integration: MockConfigEntry
) -> None:
    """Unloading removes services and the manager."""
    assert await hass.config_entries.async_unload(init_integration.entry_id)
    await hass.async_block_till_done()

    assert init_integration.state is ConfigEntryState.NOT_LOADED
    assert not hass.services.has_service(const.DOMAIN, const.SERVICE_RECORD_TIME)
    assert init_integration.entry_id not in hass.data[const.DOMAIN]

    with pytest.raises(HomeAssistantError):
        fh.get_statistics_manager(hass)


async def test_options_update_reloads(
    hass: HomeAssistant, init_integration: MockConfigEntry
) -> None:
    """Changing options rebuilds the manager with the new settings."""
    old_manager = fh.get_statistics_manager(hass)

    hass.config_entries.async_update_entry(
        init_integration,
        options={**init_integration.options, const.CONF_RETENTION_DAILY: 90},
    )
    await hass.async_block_till_done()

    new_manager = fh.get_statistics_manager(hass)
    assert new_manager is not old_manager
    assert new_manager.retention_config[const.PERIOD_DAILY] == 90


async def test_remove_entry_deletes_storage(
    hass: HomeAssistant,
    init_integration: MockConfigEntry,
    hass_storage: dict[str, Any],
) -> None:
    """Removing the entry deletes the statistics file."""
    await hass.services.async_call(
        const.DOMAIN, const.SERVICE_RECORD_TIME, {const.FIELD_MINUTES: 5}, blocking=True
    )
    assert const.STORAGE_KEY in hass_storage

    await hass.config_entries.async_remove(init_integration.entry_id)
    await hass.async_block_till_done()

    assert const.STORAGE_KEY not in hass_storage
