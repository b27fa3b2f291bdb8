# File: store.py
"""Handles persistent data storage for the FocusTime integration.

Uses Home Assistant's Storage helper to read and write the single FocusTime
document. The document is always read fully and written fully; there are no
partial updates.

Error policy:
- Malformed stored document: recovered by reinitializing, logged as a warning.
- Store I/O failure: raised as FocusTimeStorageError so the caller knows the
  write did not happen. There is no retry here.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from homeassistant.exceptions import HomeAssistantError
from homeassistant.helpers.storage import Store

from . import const
from .data_builders import build_default_document, normalize_document

if TYPE_CHECKING:
    from homeassistant.core import HomeAssistant

    from .type_defs import FocusTimeDocument


class FocusTimeStorageError(HomeAssistantError):
    """Raised when the underlying store cannot be read or written."""


class FocusTimeStore:
    """Thin wrapper around Home Assistant's Store API for the FocusTime document."""

    def __init__(
        self, hass: HomeAssistant, storage_key: str = const.STORAGE_KEY
    ) -> None:
        """Initialize the store.

        Args:
            hass: Home Assistant core object.
            storage_key: Key to identify storage location (default: const.STORAGE_KEY).
        """
        self.hass = hass
        self._storage_key = storage_key
        self._store: Store[dict[str, Any]] = Store(
            hass, const.STORAGE_VERSION, storage_key
        )

    @property
    def storage_key(self) -> str:
        """Return the storage key."""
        return self._storage_key

    def get_storage_path(self) -> str:
        """Get the storage file path."""
        return self._store.path

    async def async_load_document(
        self, period_keys: dict[str, str]
    ) -> FocusTimeDocument:
        """Load and normalize the stored document.

        Missing storage creates the empty skeleton (current buckets present
        and zeroed). Unusable content is discarded with a warning and
        replaced by a fresh document. Nothing is written here.

        Args:
            period_keys: Current day/week/month keys for the skeleton.

        Returns:
            The normalized document.

        Raises:
            FocusTimeStorageError: if the store cannot be read.
        """
        const.LOGGER.debug("DEBUG: FocusTimeStore: Loading data from storage")
        try:
            existing_data = await self._store.async_load()
        except (HomeAssistantError, OSError) as err:
            const.LOGGER.error(
                "ERROR: Failed to read FocusTime storage %s: %s",
                self._storage_key,
                err,
            )
            raise FocusTimeStorageError(
                f"Failed to read FocusTime storage: {err}"
            ) from err

        if existing_data is None:
            const.LOGGER.info("INFO: No existing storage found. Initializing new data")
            return build_default_document(period_keys)

        document, recovered = normalize_document(
            existing_data, period_keys[const.PERIOD_DAILY]
        )
        if recovered:
            const.LOGGER.warning(
                "WARNING: Stored FocusTime data is malformed (%s). "
                "Discarding it and starting with empty statistics",
                type(existing_data).__name__,
            )
            return build_default_document(period_keys)

        const.LOGGER.debug(
            "DEBUG: Loaded existing data from storage: %s",
            {
                "daily": len(document[const.DATA_DAILY]),
                "weekly": len(document[const.DATA_WEEKLY]),
                "monthly": len(document[const.DATA_MONTHLY]),
                "events": len(document[const.DATA_EVENTS]),
            },
        )
        return document

    async def async_save(self, document: FocusTimeDocument) -> None:
        """Write the full document.

        Raises:
            FocusTimeStorageError: on file system errors or non-serializable data.
        """
        try:
            await self._store.async_save(document)
        except OSError as err:
            const.LOGGER.error(
                "ERROR: Failed to save storage due to file system error: %s. "
                "Check disk space and file permissions for %s",
                err,
                self._store.path,
            )
            raise FocusTimeStorageError(f"Failed to save FocusTime data: {err}") from err
        except (TypeError, ValueError) as err:
            const.LOGGER.error(
                "ERROR: Failed to save storage due to invalid data: %s", err
            )
            raise FocusTimeStorageError(f"Failed to save FocusTime data: {err}") from err
        const.LOGGER.debug("DEBUG: Data saved successfully to storage")

    async def async_remove(self) -> None:
        """Delete the storage file completely."""
        try:
            await self._store.async_remove()
        except OSError as err:
            raise FocusTimeStorageError(
                f"Failed to remove FocusTime storage: {err}"
            ) from err
        const.LOGGER.info("INFO: Storage file removed: %s", self._store.path)
