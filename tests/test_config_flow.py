"""Tests for the FocusTime config and options flows."""

import pytest
from homeassistant import config_entries
from homeassistant.core import HomeAssistant
from homeassistant.data_entry_flow import FlowResultType, InvalidData
from pytest_homeassistant_custom_component.common import MockConfigEntry

from custom_components.focustime import const


async def test_user_flow_creates_entry(hass: HomeAssistant) -> None:
    """The user step creates an entry with default options."""
    result = await hass.config_entries.flow.async_init(
        const.DOMAIN, context={"source": config_entries.SOURCE_USER}
    )
    assert result["type"] is FlowResultType.FORM
    assert result["step_id"] == "user"

    result = await hass.config_entries.flow.async_configure(result["flow_id"], {})
    await hass.async_block_till_done()

    assert result["type"] is FlowResultType.CREATE_ENTRY
    assert result["title"] == const.FOCUSTIME_TITLE
    entry = result["result"]
    assert entry.options == {
        const.CONF_RETENTION_DAILY: 30,
        const.CONF_RETENTION_WEEKLY: 12,
        const.CONF_RETENTION_MONTHLY: 12,
        const.CONF_RETENTION_EVENTS: 7,
        const.CONF_RECENT_WINDOW_MINUTES: 360,
    }


async def test_single_instance(
    hass: HomeAssistant, mock_config_entry: MockConfigEntry
) -> None:
    """A second entry is refused."""
    mock_config_entry.add_to_hass(hass)

    result = await hass.config_entries.flow.async_init(
        const.DOMAIN, context={"source": config_entries.SOURCE_USER}
    )

    assert result["type"] is FlowResultType.ABORT
    assert result["reason"] == const.TRANS_KEY_ERROR_SINGLE_INSTANCE


async def test_options_flow(
    hass: HomeAssistant, mock_config_entry: MockConfigEntry
) -> None:
    """Options are shown with current values and saved."""
    mock_config_entry.add_to_hass(hass)

    result = await hass.config_entries.options.async_init(mock_config_entry.entry_id)
    assert result["type"] is FlowResultType.FORM
    assert result["step_id"] == "init"

    result = await hass.config_entries.options.async_configure(
        result["flow_id"],
        user_input={
            const.CONF_RETENTION_DAILY: 60,
            const.CONF_RETENTION_WEEKLY: 26,
            const.CONF_RETENTION_MONTHLY: 24,
            const.CONF_RETENTION_EVENTS: 14,
            const.CONF_RECENT_WINDOW_MINUTES: 120,
        },
    )

    assert result["type"] is FlowResultType.CREATE_ENTRY
    assert mock_config_entry.options[const.CONF_RETENTION_DAILY] == 60
    assert mock_config_entry.options[const.CONF_RECENT_WINDOW_MINUTES] == 120


async def test_options_flow_rejects_zero_retention(
    hass: HomeAssistant, mock_config_entry: MockConfigEntry
) -> None:
    """Retention shorter than one period is not accepted."""
    mock_config_entry.add_to_hass(hass)
    result = await hass.config_entries.options.async_init(mock_config_entry.entry_id)

    with pytest.raises(InvalidData):
        await hass.config_entries.options.async_configure(
            result["flow_id"],
            user_input={
                const.CONF_RETENTION_DAILY: 0,
                const.CONF_RETENTION_WEEKLY: 12,
                const.CONF_RETENTION_MONTHLY: 12,
                const.CONF_RETENTION_EVENTS: 7,
                const.CONF_RECENT_WINDOW_MINUTES: 360,
            },
        )
