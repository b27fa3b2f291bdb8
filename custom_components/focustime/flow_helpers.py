# File: flow_helpers.py
"""Helpers for the FocusTime integration's Config and Options flow.

Provides the options schema builder and the conversion from form input to
the stored entry options.
"""

from __future__ import annotations

from typing import Any, Mapping

import voluptuous as vol

from . import const

# Option key -> (default, minimum)
RETENTION_OPTIONS: dict[str, tuple[int, int]] = {
    const.CONF_RETENTION_DAILY: (
        const.DEFAULT_RETENTION_DAILY,
        const.MIN_RETENTION_DAILY,
    ),
    const.CONF_RETENTION_WEEKLY: (
        const.DEFAULT_RETENTION_WEEKLY,
        const.MIN_RETENTION_WEEKLY,
    ),
    const.CONF_RETENTION_MONTHLY: (
        const.DEFAULT_RETENTION_MONTHLY,
        const.MIN_RETENTION_MONTHLY,
    ),
    const.CONF_RETENTION_EVENTS: (
        const.DEFAULT_RETENTION_EVENTS,
        const.MIN_RETENTION_EVENTS,
    ),
}


def build_options_schema(current: Mapping[str, Any] | None = None) -> vol.Schema:
    """Build the schema for retention horizons and the recent window.

    Defaults come from the entry's current options, falling back to the
    integration defaults.
    """
    current = current or {}
    fields: dict[Any, Any] = {}
    for key, (default, minimum) in RETENTION_OPTIONS.items():
        fields[vol.Required(key, default=current.get(key, default))] = vol.All(
            vol.Coerce(int), vol.Range(min=minimum)
        )
    fields[
        vol.Required(
            const.CONF_RECENT_WINDOW_MINUTES,
            default=current.get(
                const.CONF_RECENT_WINDOW_MINUTES, const.DEFAULT_RECENT_WINDOW_MINUTES
            ),
        )
    ] = vol.All(vol.Coerce(int), vol.Range(min=1))
    return vol.Schema(fields)


def build_options_data(user_input: Mapping[str, Any]) -> dict[str, int]:
    """Build the entry options from form input.

    Missing keys take the integration defaults.
    """
    data = {
        key: int(user_input.get(key, default))
        for key, (default, _minimum) in RETENTION_OPTIONS.items()
    }
    data[const.CONF_RECENT_WINDOW_MINUTES] = int(
        user_input.get(
            const.CONF_RECENT_WINDOW_MINUTES, const.DEFAULT_RECENT_WINDOW_MINUTES
        )
    )
    return data
