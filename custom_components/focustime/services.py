# File: services.py
"""Defines custom services for the FocusTime integration.

These services let scripts, automations and dashboards record focus time,
manage goals and labels, and read statistics. Mutating services can
optionally return the updated state; get_stats always returns a response.
"""

from __future__ import annotations

from typing import Any

from homeassistant.core import (
    HomeAssistant,
    ServiceCall,
    ServiceResponse,
    SupportsResponse,
)
from homeassistant.exceptions import HomeAssistantError
from homeassistant.helpers import config_validation as cv
import voluptuous as vol

from . import const
from . import ft_helpers as fh
from .store import FocusTimeStorageError

# --- Service Schemas ---
RECORD_TIME_SCHEMA = vol.Schema(
    {
        vol.Required(const.FIELD_MINUTES): vol.All(
            vol.Coerce(float), vol.Range(min=0, max=const.MAX_RECORD_MINUTES)
        ),
        vol.Optional(const.FIELD_CATEGORY, default=const.DEFAULT_CATEGORY): cv.string,
        vol.Optional(const.FIELD_SESSIONS, default=1): vol.All(
            vol.Coerce(int), vol.Range(min=1)
        ),
    }
)

ADD_MANUAL_TIME_SCHEMA = vol.Schema(
    {
        vol.Optional(const.FIELD_HOURS, default=0): vol.All(
            vol.Coerce(int), vol.Range(min=0, max=const.MAX_MANUAL_HOURS)
        ),
        vol.Optional(const.FIELD_MINUTES, default=0): vol.All(
            vol.Coerce(int), vol.Range(min=0, max=59)
        ),
        vol.Optional(const.FIELD_CATEGORY, default=const.DEFAULT_CATEGORY): cv.string,
    }
)

SET_GOALS_SCHEMA = vol.Schema(
    {
        vol.Required(const.FIELD_DAILY_MINUTES): vol.Coerce(int),
        vol.Required(const.FIELD_WEEKLY_MINUTES): vol.Coerce(int),
        vol.Required(const.FIELD_MONTHLY_MINUTES): vol.Coerce(int),
    }
)

LABEL_SCHEMA = vol.Schema({vol.Required(const.FIELD_LABEL): cv.string})

GET_STATS_SCHEMA = vol.Schema(
    {
        vol.Optional(const.FIELD_WINDOW_MINUTES): vol.All(
            vol.Coerce(float), vol.Range(min=1, max=const.MAX_WINDOW_MINUTES)
        ),
    }
)

EMPTY_SCHEMA = vol.Schema({})

SERVICES = (
    const.SERVICE_RECORD_TIME,
    const.SERVICE_ADD_MANUAL_TIME,
    const.SERVICE_SET_GOALS,
    const.SERVICE_ADD_LABEL,
    const.SERVICE_REMOVE_LABEL,
    const.SERVICE_CLEANUP,
    const.SERVICE_GET_STATS,
    const.SERVICE_RESET_STATS,
)


def _storage_failure(err: FocusTimeStorageError) -> HomeAssistantError:
    """Return the user-facing error for a failed write."""
    return HomeAssistantError(
        translation_domain=const.DOMAIN,
        translation_key=const.TRANS_KEY_ERROR_STORAGE,
        translation_placeholders={"error": str(err)},
    )


def async_setup_services(hass: HomeAssistant) -> None:
    """Register FocusTime services."""

    if hass.services.has_service(const.DOMAIN, const.SERVICE_RECORD_TIME):
        return

    async def handle_record_time(call: ServiceCall) -> ServiceResponse:
        """Handle recording a completed timer interval."""
        manager = fh.get_statistics_manager(hass)
        try:
            snapshot = await manager.async_record(
                call.data[const.FIELD_MINUTES],
                call.data[const.FIELD_CATEGORY],
                call.data[const.FIELD_SESSIONS],
            )
        except FocusTimeStorageError as err:
            raise _storage_failure(err) from err
        return snapshot if call.return_response else None

    async def handle_add_manual_time(call: ServiceCall) -> ServiceResponse:
        """Handle a manual "add time" entry (hours + minutes)."""
        manager = fh.get_statistics_manager(hass)
        try:
            snapshot = await manager.async_add_manual_time(
                call.data[const.FIELD_HOURS],
                call.data[const.FIELD_MINUTES],
                call.data[const.FIELD_CATEGORY],
            )
        except FocusTimeStorageError as err:
            raise _storage_failure(err) from err
        return snapshot if call.return_response else None

    async def handle_set_goals(call: ServiceCall) -> ServiceResponse:
        """Handle updating the daily/weekly/monthly goals."""
        manager = fh.get_statistics_manager(hass)
        try:
            goals = await manager.async_set_goals(
                call.data[const.FIELD_DAILY_MINUTES],
                call.data[const.FIELD_WEEKLY_MINUTES],
                call.data[const.FIELD_MONTHLY_MINUTES],
            )
        except FocusTimeStorageError as err:
            raise _storage_failure(err) from err
        const.LOGGER.info("INFO: FocusTime goals updated: %s", goals)
        return {const.PRES_GOALS: goals} if call.return_response else None

    async def handle_add_label(call: ServiceCall) -> ServiceResponse:
        """Handle adding a label to the label set."""
        manager = fh.get_statistics_manager(hass)
        try:
            labels = await manager.async_add_label(call.data[const.FIELD_LABEL])
        except FocusTimeStorageError as err:
            raise _storage_failure(err) from err
        return {const.PRES_LABELS: labels} if call.return_response else None

    async def handle_remove_label(call: ServiceCall) -> ServiceResponse:
        """Handle removing a label from the label set."""
        manager = fh.get_statistics_manager(hass)
        try:
            labels = await manager.async_remove_label(call.data[const.FIELD_LABEL])
        except FocusTimeStorageError as err:
            raise _storage_failure(err) from err
        return {const.PRES_LABELS: labels} if call.return_response else None

    async def handle_cleanup(call: ServiceCall) -> None:
        """Handle an explicit retention sweep request."""
        manager = fh.get_statistics_manager(hass)
        try:
            performed = await manager.async_cleanup()
        except FocusTimeStorageError as err:
            raise _storage_failure(err) from err
        const.LOGGER.debug("DEBUG: Cleanup requested (performed: %s)", performed)

    async def handle_get_stats(call: ServiceCall) -> ServiceResponse:
        """Return the full statistics view."""
        manager = fh.get_statistics_manager(hass)
        response: dict[str, Any] = manager.snapshot()
        response[const.PRES_PREVIOUS_DAY] = manager.previous_day()
        response[const.PRES_PREVIOUS_WEEK] = manager.previous_week()
        response[const.PRES_PREVIOUS_MONTH] = manager.previous_month()
        response[const.PRES_RECENT] = manager.recent_stats(
            call.data.get(const.FIELD_WINDOW_MINUTES)
        )
        return response

    async def handle_reset_stats(call: ServiceCall) -> None:
        """Handle wiping all statistics."""
        manager = fh.get_statistics_manager(hass)
        try:
            await manager.async_reset()
        except FocusTimeStorageError as err:
            raise _storage_failure(err) from err

    # --- Register Services ---
    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_RECORD_TIME,
        handle_record_time,
        schema=RECORD_TIME_SCHEMA,
        supports_response=SupportsResponse.OPTIONAL,
    )
    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_ADD_MANUAL_TIME,
        handle_add_manual_time,
        schema=ADD_MANUAL_TIME_SCHEMA,
        supports_response=SupportsResponse.OPTIONAL,
    )
    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_SET_GOALS,
        handle_set_goals,
        schema=SET_GOALS_SCHEMA,
        supports_response=SupportsResponse.OPTIONAL,
    )
    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_ADD_LABEL,
        handle_add_label,
        schema=LABEL_SCHEMA,
        supports_response=SupportsResponse.OPTIONAL,
    )
    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_REMOVE_LABEL,
        handle_remove_label,
        schema=LABEL_SCHEMA,
        supports_response=SupportsResponse.OPTIONAL,
    )
    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_CLEANUP,
        handle_cleanup,
        schema=EMPTY_SCHEMA,
    )
    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_GET_STATS,
        handle_get_stats,
        schema=GET_STATS_SCHEMA,
        supports_response=SupportsResponse.ONLY,
    )
    hass.services.async_register(
        const.DOMAIN,
        const.SERVICE_RESET_STATS,
        handle_reset_stats,
        schema=EMPTY_SCHEMA,
    )

    const.LOGGER.info("INFO: FocusTime services have been registered successfully")


def async_unload_services(hass: HomeAssistant) -> None:
    """Unregister FocusTime services when unloading the integration."""
    for service in SERVICES:
        if hass.services.has_service(const.DOMAIN, service):
            hass.services.async_remove(const.DOMAIN, service)

    const.LOGGER.info("INFO: FocusTime services have been unregistered")
