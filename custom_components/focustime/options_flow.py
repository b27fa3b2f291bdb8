# File: options_flow.py
"""Options Flow for the FocusTime integration.

Edits the retention horizons and the default rolling window. Saving the
options reloads the entry through its update listener.
"""

from typing import Any, Optional

from homeassistant import config_entries

from . import const
from . import flow_helpers as fh


class FocusTimeOptionsFlowHandler(config_entries.OptionsFlow):
    """Options Flow for retention and rolling-window settings."""

    def __init__(self, _config_entry: config_entries.ConfigEntry):
        """Initialize the options flow."""
        self._entry_options: dict[str, Any] = {}

    async def async_step_init(self, user_input: Optional[dict[str, Any]] = None):
        """Show and store the options form."""
        self._entry_options = dict(self.config_entry.options)

        if user_input is not None:
            options = fh.build_options_data(user_input)
            const.LOGGER.debug("DEBUG: Updating FocusTime options: %s", options)
            return self.async_create_entry(title="", data=options)

        return self.async_show_form(
            step_id="init",
            data_schema=fh.build_options_schema(self._entry_options),
        )
