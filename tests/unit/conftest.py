"""
Unit Test Fixtures.

Fixtures for unit tests - the store is mocked.
Unit tests should be fast and isolated, never touching a database.
"""

from unittest.mock import AsyncMock

import pytest

from mynotes.schemas.color import ColorRead
from mynotes.schemas.note import NoteRead


@pytest.fixture
def stored_note() -> NoteRead:
    """A note as the store would return it."""
    return NoteRead(
        id=7,
        title="Ter",
        content="0816353115",
        category="Home",
        color_id=2,
    )


@pytest.fixture
def mock_store(stored_note: NoteRead) -> AsyncMock:
    """
    Mock note store.

    Usage:
        def test_session(mock_store):
            session = NoteSession(mock_store, publish_events=True)
    """
    store = AsyncMock()
    store.default_color.return_value = ColorRead(id=1, hex="#FFFFFF", name="White")
    store.list_colors.return_value = [
        ColorRead(id=1, hex="#FFFFFF", name="White"),
        ColorRead(id=2, hex="#E57373", name="Red"),
    ]
    store.get.return_value = stored_note
    store.update.side_effect = lambda note: NoteRead.model_validate(note.model_dump())
    return store
