# File: config_flow.py
"""Config flow for the FocusTime integration.

A single instance is allowed. The entry carries no data: statistics live in
the storage file and tunables live in the entry options.
"""

from typing import Any, Optional

import voluptuous as vol
from homeassistant import config_entries
from homeassistant.core import callback

from . import const
from . import flow_helpers as fh
from .options_flow import FocusTimeOptionsFlowHandler


class FocusTimeConfigFlow(config_entries.ConfigFlow, domain=const.DOMAIN):
    """Config Flow for FocusTime."""

    VERSION = 1

    async def async_step_user(self, user_input: Optional[dict[str, Any]] = None):
        """Confirm setup and create the entry with default options."""

        # Check if there's an existing FocusTime entry
        if any(self._async_current_entries()):
            return self.async_abort(reason=const.TRANS_KEY_ERROR_SINGLE_INSTANCE)

        if user_input is not None:
            const.LOGGER.info("INFO: Creating FocusTime config entry")
            return self.async_create_entry(
                title=const.FOCUSTIME_TITLE,
                data={},  # Empty - statistics are loaded from the storage file
                options=fh.build_options_data({}),
            )

        return self.async_show_form(step_id="user", data_schema=vol.Schema({}))

    @staticmethod
    @callback
    def async_get_options_flow(config_entry):
        """Return the Options Flow."""
        return FocusTimeOptionsFlowHandler(config_entry)
