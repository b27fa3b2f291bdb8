"""Direct unit tests for FocusTimeStore.

Covers the load path (missing, legacy and malformed documents) and the
translation of storage I/O failures into FocusTimeStorageError.
"""

# pylint: disable=protected-access  # Accessing _store for testing
# pylint: disable=redefined-outer-name  # Pytest fixtures redefine names

from typing import Any
from unittest.mock import AsyncMock, patch

import pytest
from homeassistant.core import HomeAssistant
from homeassistant.exceptions import HomeAssistantError

from custom_components.focustime import const
from custom_components.focustime.data_builders import build_bucket
from custom_components.focustime.store import FocusTimeStorageError, FocusTimeStore

KEYS = {
    const.PERIOD_DAILY: "2026-01-16",
    const.PERIOD_WEEKLY: "2026-01-10",
    const.PERIOD_MONTHLY: "2026-01",
}


@pytest.fixture
def store(hass: HomeAssistant) -> FocusTimeStore:
    """Return a store instance."""
    return FocusTimeStore(hass)


def _stored(data: Any) -> dict[str, Any]:
    """Wrap data the way Home Assistant's Store persists it."""
    return {
        "version": const.STORAGE_VERSION,
        "minor_version": 1,
        "key": const.STORAGE_KEY,
        "data": data,
    }


async def test_load_without_storage_creates_skeleton(
    store: FocusTimeStore, hass_storage: dict[str, Any]
) -> None:
    """A first start yields the empty skeleton and writes nothing."""
    document = await store.async_load_document(KEYS)

    assert document[const.DATA_DAILY] == {"2026-01-16": build_bucket()}
    assert document[const.DATA_LIFETIME][const.DATA_LIFETIME_START_DATE] == "2026-01-16"
    assert const.STORAGE_KEY not in hass_storage


async def test_load_legacy_document(
    store: FocusTimeStore,
    hass_storage: dict[str, Any],
    legacy_document: dict[str, Any],
) -> None:
    """Legacy documents are normalized in memory only."""
    hass_storage[const.STORAGE_KEY] = _stored(legacy_document)

    document = await store.async_load_document(KEYS)

    assert document[const.DATA_DAILY]["2026-01-15"][const.DATA_BUCKET_LABELS] == {
        const.FALLBACK_CATEGORY: 75
    }
    assert const.DATA_GOALS in document
    assert hass_storage[const.STORAGE_KEY]["data"] == legacy_document


async def test_load_malformed_document_recovers(
    store: FocusTimeStore,
    hass_storage: dict[str, Any],
    caplog: pytest.LogCaptureFixture,
) -> None:
    """Unusable stored data is replaced by a fresh document with a warning."""
    hass_storage[const.STORAGE_KEY] = _stored(["not", "a", "document"])

    document = await store.async_load_document(KEYS)

    assert document[const.DATA_DAILY] == {"2026-01-16": build_bucket()}
    assert document[const.DATA_EVENTS] == []
    assert "malformed" in caplog.text


async def test_load_io_error_raises(store: FocusTimeStore) -> None:
    """Read failures surface as FocusTimeStorageError."""
    with (
        patch.object(
            store._store, "async_load", side_effect=HomeAssistantError("corrupt")
        ),
        pytest.raises(FocusTimeStorageError),
    ):
        await store.async_load_document(KEYS)


async def test_save_writes_document(
    store: FocusTimeStore, hass_storage: dict[str, Any]
) -> None:
    """Saving writes the full document."""
    document = await store.async_load_document(KEYS)
    document[const.DATA_LABELS].append("reading")

    await store.async_save(document)

    assert hass_storage[const.STORAGE_KEY]["data"][const.DATA_LABELS][-1] == "reading"


@pytest.mark.parametrize(
    "error", [OSError("disk full"), TypeError("not serializable"), ValueError("bad")]
)
async def test_save_error_raises(store: FocusTimeStore, error: Exception) -> None:
    """Write failures surface as FocusTimeStorageError."""
    with (
        patch.object(store._store, "async_save", AsyncMock(side_effect=error)),
        pytest.raises(FocusTimeStorageError),
    ):
        await store.async_save({})


async def test_remove(store: FocusTimeStore, hass_storage: dict[str, Any]) -> None:
    """Removing the store deletes the persisted document."""
    await store.async_save({const.DATA_LABELS: ["study"]})
    assert const.STORAGE_KEY in hass_storage

    await store.async_remove()

    assert const.STORAGE_KEY not in hass_storage


def test_storage_key(store: FocusTimeStore) -> None:
    """The default key is the integration's storage key."""
    assert store.storage_key == const.STORAGE_KEY
    assert store.get_storage_path().endswith(const.STORAGE_KEY)
