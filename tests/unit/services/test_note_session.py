"""
Unit Tests for NoteSession.

The store is an AsyncMock; these tests cover the session lifecycle,
draft edits and how writes are handed to the store.
"""

import asyncio

import pytest

from mynotes.core.exceptions import ConflictError, NotFoundError, ValidationError
from mynotes.models.note import NEW_NOTE_ID
from mynotes.schemas.note import NoteRead
from mynotes.services.note_session import NoteSession, SessionState


@pytest.fixture
def session(mock_store):
    return NoteSession(mock_store, publish_events=True)


@pytest.fixture
def received(session):
    events = []
    session.subscribe(events.append)
    return events


class TestLoadDraft:
    """Tests for load_draft."""

    @pytest.mark.asyncio
    async def test_new_draft_uses_sentinel_and_default_color(self, session, mock_store):
        draft = await session.load_draft()

        assert draft.id == NEW_NOTE_ID
        assert draft.title == ""
        assert draft.color_id == 1
        assert session.state is SessionState.EDITING
        assert not session.is_editing_existing
        mock_store.get.assert_not_called()

    @pytest.mark.asyncio
    async def test_existing_note_copied_into_draft(self, session, mock_store, stored_note):
        draft = await session.load_draft(7)

        assert draft.model_dump() == stored_note.model_dump()
        assert session.is_editing_existing
        mock_store.get.assert_awaited_once_with(7)

    @pytest.mark.asyncio
    async def test_missing_note_raises_and_keeps_state(self, session, mock_store):
        mock_store.get.return_value = None

        with pytest.raises(NotFoundError):
            await session.load_draft(99)

        assert session.state is SessionState.EMPTY
        assert session.draft is None

    @pytest.mark.asyncio
    async def test_reload_replaces_draft(self, session):
        await session.load_draft()
        await session.update_draft_field("title", "scratch")

        draft = await session.load_draft(7)

        assert draft.id == 7
        assert session.draft.title == "Ter"


class TestUpdateDraftField:
    """Tests for update_draft_field."""

    @pytest.mark.asyncio
    async def test_updates_memory_only(self, session, mock_store):
        await session.load_draft(7)

        draft = await session.update_draft_field("title", "Ter (work)")

        assert draft.title == "Ter (work)"
        assert session.draft.title == "Ter (work)"
        mock_store.update.assert_not_called()
        mock_store.insert.assert_not_called()

    @pytest.mark.asyncio
    async def test_empty_string_accepted(self, session):
        await session.load_draft(7)
        draft = await session.update_draft_field("content", "")
        assert draft.content == ""

    @pytest.mark.asyncio
    async def test_unknown_field_rejected(self, session):
        await session.load_draft()

        with pytest.raises(ValidationError) as exc_info:
            await session.update_draft_field("priority", 3)

        assert exc_info.value.details == {"field": "priority"}

    @pytest.mark.asyncio
    async def test_id_not_editable(self, session):
        await session.load_draft(7)

        with pytest.raises(ValidationError):
            await session.update_draft_field("id", 8)

        assert session.draft.id == 7

    @pytest.mark.asyncio
    async def test_wrong_type_leaves_draft_unchanged(self, session):
        await session.load_draft(7)

        with pytest.raises(ValidationError) as exc_info:
            await session.update_draft_field("color_id", "blue")

        assert exc_info.value.details["field"] == "color_id"
        assert exc_info.value.details["errors"]
        assert session.draft.color_id == 2

    @pytest.mark.asyncio
    async def test_requires_loaded_draft(self, session):
        with pytest.raises(ConflictError):
            await session.update_draft_field("title", "x")

    @pytest.mark.asyncio
    async def test_rejected_while_saving(self, session, mock_store):
        await session.load_draft()
        errors = []

        async def insert(note):
            try:
                await session.update_draft_field("title", "late")
            except ConflictError as e:
                errors.append(e)
            return 3

        mock_store.insert.side_effect = insert
        mock_store.get.return_value = NoteRead(id=3)

        await session.save()

        assert len(errors) == 1

    @pytest.mark.asyncio
    async def test_discard_rejected_while_saving(self, session, mock_store, received):
        await session.load_draft()
        await session.update_draft_field("title", "racing")
        errors = []

        async def insert(note):
            try:
                await session.discard()
            except ConflictError as e:
                errors.append(e)
            return 3

        mock_store.insert.side_effect = insert
        mock_store.get.return_value = NoteRead(id=3, title="racing")

        await session.save()

        assert len(errors) == 1
        assert session.state is SessionState.SAVED
        assert "discarded" not in [event.state for event in received]

    @pytest.mark.asyncio
    async def test_discard_from_other_task_while_saving(self, session, mock_store):
        await session.load_draft()
        inserting = asyncio.Event()
        release = asyncio.Event()

        async def insert(note):
            inserting.set()
            await release.wait()
            return 3

        mock_store.insert.side_effect = insert
        mock_store.get.return_value = NoteRead(id=3)

        task = asyncio.create_task(session.save())
        await inserting.wait()

        with pytest.raises(ConflictError):
            await session.discard()

        release.set()
        await task
        assert session.state is SessionState.SAVED


class TestSave:
    """Tests for save."""

    @pytest.mark.asyncio
    async def test_new_draft_inserted(self, session, mock_store):
        await session.load_draft()
        await session.update_draft_field("title", "Dentist")
        mock_store.insert.return_value = 3
        mock_store.get.return_value = NoteRead(id=3, title="Dentist")

        saved = await session.save()

        inserted = mock_store.insert.await_args.args[0]
        assert inserted.id == NEW_NOTE_ID
        assert inserted.title == "Dentist"
        assert saved.id == 3
        assert session.state is SessionState.SAVED
        mock_store.update.assert_not_called()

    @pytest.mark.asyncio
    async def test_existing_draft_updated(self, session, mock_store):
        await session.load_draft(7)
        await session.update_draft_field("category", "Work")

        saved = await session.save()

        updated = mock_store.update.await_args.args[0]
        assert updated.id == 7
        assert updated.category == "Work"
        assert saved.category == "Work"
        mock_store.insert.assert_not_called()

    @pytest.mark.asyncio
    async def test_second_save_conflicts(self, session, mock_store):
        await session.load_draft()
        mock_store.insert.return_value = 3
        mock_store.get.return_value = NoteRead(id=3)
        await session.save()

        with pytest.raises(ConflictError):
            await session.save()

        mock_store.insert.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_concurrent_saves_insert_once(self, session, mock_store):
        await session.load_draft()
        mock_store.insert.return_value = 3
        mock_store.get.return_value = NoteRead(id=3)

        results = await asyncio.gather(
            session.save(), session.save(), return_exceptions=True,
        )

        conflicts = [r for r in results if isinstance(r, ConflictError)]
        assert len(conflicts) == 1
        mock_store.insert.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_interrupted_read_back_keeps_assigned_id(self, session, mock_store):
        await session.load_draft()
        await session.update_draft_field("title", "once")
        mock_store.insert.return_value = 3
        mock_store.get.side_effect = asyncio.CancelledError

        with pytest.raises(asyncio.CancelledError):
            await session.save()

        assert session.state is SessionState.EDITING
        assert session.draft.id == 3

        await session.save()

        mock_store.insert.assert_awaited_once()
        assert mock_store.update.await_args.args[0].id == 3
        assert session.state is SessionState.SAVED

    @pytest.mark.asyncio
    async def test_failed_save_keeps_editing(self, session, mock_store):
        await session.load_draft(7)
        mock_store.update.side_effect = NotFoundError("Note 7 not found")

        with pytest.raises(NotFoundError):
            await session.save()

        assert session.state is SessionState.EDITING


class TestMoveToTrash:
    @pytest.mark.asyncio
    async def test_existing_note_trashed(self, session, mock_store):
        await session.load_draft(7)

        draft = await session.move_to_trash()

        assert mock_store.update.await_args.args[0].is_in_trash is True
        assert draft.is_in_trash
        assert session.state is SessionState.SAVED

    @pytest.mark.asyncio
    async def test_new_draft_conflicts(self, session, mock_store):
        await session.load_draft()

        with pytest.raises(ConflictError):
            await session.move_to_trash()

        mock_store.update.assert_not_called()
        assert session.state is SessionState.EDITING


class TestDiscard:
    @pytest.mark.asyncio
    async def test_discard_writes_nothing(self, session, mock_store):
        await session.load_draft(7)
        await session.update_draft_field("title", "changed")

        await session.discard()

        assert session.state is SessionState.DISCARDED
        assert session.draft is None
        mock_store.update.assert_not_called()

    @pytest.mark.asyncio
    async def test_terminal_states_reject_everything(self, session):
        await session.load_draft(7)
        await session.discard()

        with pytest.raises(ConflictError):
            await session.load_draft()
        with pytest.raises(ConflictError):
            await session.update_draft_field("title", "x")
        with pytest.raises(ConflictError):
            await session.save()
        with pytest.raises(ConflictError):
            await session.discard()


class TestSessionEvents:
    @pytest.mark.asyncio
    async def test_every_change_published(self, session, received):
        await session.load_draft(7)
        await session.update_draft_field("title", "Ter (work)")
        await session.save()

        assert [event.state for event in received] == ["editing", "editing", "saved"]
        assert received[1].draft.title == "Ter (work)"
        assert all(event.correlation_id == session.session_id for event in received)

    @pytest.mark.asyncio
    async def test_rejected_edit_not_published(self, session, received):
        await session.load_draft(7)

        with pytest.raises(ValidationError):
            await session.update_draft_field("nope", 1)

        assert len(received) == 1

    @pytest.mark.asyncio
    async def test_disabled_session_publishes_nothing(self, mock_store):
        session = NoteSession(mock_store, publish_events=False)
        events = []
        session.subscribe(events.append)

        await session.load_draft(7)

        assert events == []


class TestListColors:
    @pytest.mark.asyncio
    async def test_delegates_to_store(self, session, mock_store):
        colors = await session.list_colors()
        assert [color.name for color in colors] == ["White", "Red"]
