"""Base manager class for FocusTime managers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from homeassistant.helpers.dispatcher import async_dispatcher_send

from .. import const
from ..ft_helpers import get_event_signal

if TYPE_CHECKING:
    from homeassistant.core import HomeAssistant

PostWriteHook = Callable[[dict[str, Any]], None]


class BaseManager(ABC):
    """Base class for FocusTime managers that announce their writes.

    Provides:
    - Entry-scoped dispatcher signals (emit)
    - The optional post-write hook (e.g. a remote mirror), isolated so that
      a failing hook never undoes a committed write

    Subclasses must implement:
    - async_setup(): Load state, run startup work
    """

    def __init__(
        self,
        hass: HomeAssistant,
        entry_id: str,
        post_write_hook: PostWriteHook | None = None,
    ) -> None:
        """Initialize manager.

        Args:
            hass: Home Assistant instance
            entry_id: Config entry this manager belongs to
            post_write_hook: Called with the payload of every committed write
        """
        self.hass = hass
        self.entry_id = entry_id
        self._post_write_hook = post_write_hook

    def emit(self, suffix: str, payload: dict[str, Any]) -> None:
        """Send `payload` on the entry-scoped signal for `suffix`."""
        const.LOGGER.debug(
            "DEBUG: Emitting '%s' for entry %s (keys: %s)",
            suffix,
            self.entry_id,
            sorted(payload),
        )
        async_dispatcher_send(self.hass, get_event_signal(self.entry_id, suffix), payload)

    def announce_write(self, suffix: str, payload: dict[str, Any]) -> None:
        """Emit the signal, then run the post-write hook if one is set."""
        self.emit(suffix, payload)
        if self._post_write_hook is None:
            return
        try:
            self._post_write_hook(payload)
        except Exception as err:  # pylint: disable=broad-exception-caught
            const.LOGGER.warning(
                "WARNING: Post-write hook failed for entry %s: %s", self.entry_id, err
            )

    @abstractmethod
    async def async_setup(self) -> None:
        """Set up the manager.

        Called once during config entry setup.
        """
