"""
Note Session.

Holds the one draft an edit screen works on and mediates between that
screen and the note store. A session is an explicit object handed to its
caller; every screen gets its own.

Lifecycle:

    EMPTY -> LOADING -> EDITING -> SAVED
                                -> DISCARDED

SAVED and DISCARDED are terminal. A new edit needs a new session.
"""

import asyncio
from collections.abc import Callable
from enum import Enum
from typing import Any
from uuid import uuid4

from pydantic import ValidationError as PydanticValidationError

from mynotes.core.exceptions import ConflictError, NotFoundError, ValidationError
from mynotes.core.logging import get_logger
from mynotes.events.broker import EventBroker, Handler
from mynotes.events.publishers import DraftEventPublisher
from mynotes.schemas.color import ColorRead
from mynotes.schemas.note import EDITABLE_FIELDS, NoteDraft
from mynotes.services.note_store import NoteStore

logger = get_logger(__name__)


class SessionState(str, Enum):
    """Where a session is in its lifecycle."""

    EMPTY = "empty"
    LOADING = "loading"
    EDITING = "editing"
    SAVED = "saved"
    DISCARDED = "discarded"


TERMINAL_STATES = frozenset({SessionState.SAVED, SessionState.DISCARDED})


class NoteSession:
    """
    Draft holder for a single create or edit flow.

    Field edits only touch memory. ``save`` and ``move_to_trash`` are the
    only calls that write, and they are serialized so two rapid saves
    cannot insert the same draft twice.
    """

    def __init__(
        self,
        store: NoteStore,
        broker: EventBroker | None = None,
        publish_events: bool | None = None,
    ) -> None:
        self.store = store
        self.session_id = str(uuid4())
        self.events = DraftEventPublisher(broker or EventBroker(), enabled=publish_events)
        self._draft: NoteDraft | None = None
        self._state = SessionState.EMPTY
        self._lock = asyncio.Lock()
        self._logger = logger.bind(session_id=self.session_id, source="session")

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def draft(self) -> NoteDraft | None:
        """Copy of the current draft, or None when nothing is loaded."""
        return self._draft.model_copy() if self._draft is not None else None

    @property
    def is_editing_existing(self) -> bool:
        """True when the draft mirrors a stored note rather than a new one."""
        return self._draft is not None and not self._draft.is_new

    def subscribe(self, handler: Handler) -> Callable[[], None]:
        """
        Receive a draft snapshot after every change.

        Returns:
            Callable that removes the subscription
        """
        return self.events.broker.subscribe(self.events.channel, handler)

    async def load_draft(self, note_id: int | None = None) -> NoteDraft:
        """
        Start editing a stored note, or a new one when ``note_id`` is None.

        A new draft gets the NEW_NOTE_ID sentinel and the default color.
        Loading again while editing replaces the current draft.

        Raises:
            NotFoundError: If no note has that id; the session keeps its
                previous state
            ConflictError: If the session is already closed
        """
        async with self._lock:
            self._ensure_open()
            previous_state = self._state
            self._state = SessionState.LOADING

            try:
                if note_id is None:
                    color = await self.store.default_color()
                    draft = NoteDraft(color_id=color.id)
                else:
                    note = await self.store.get(note_id)
                    if note is None:
                        raise NotFoundError(f"Note {note_id} not found")
                    draft = NoteDraft.model_validate(note.model_dump())
            except BaseException:
                self._state = previous_state
                raise

            self._draft = draft
            self._state = SessionState.EDITING

        self._logger.debug("Draft loaded", extra={"note_id": draft.id, "is_new": draft.is_new})
        await self._publish()
        return draft.model_copy()

    async def update_draft_field(self, field: str, value: Any) -> NoteDraft:
        """
        Merge one field into the draft. Nothing is persisted.

        Only the field type is checked; empty strings are accepted.

        Raises:
            ValidationError: If the field is unknown, is ``id``, or the
                value has the wrong type. The draft is left unchanged.
            ConflictError: If no draft is being edited, or a save is running
        """
        self._ensure_editing()
        if self._lock.locked():
            raise ConflictError("Draft is being written")

        if field not in EDITABLE_FIELDS:
            raise ValidationError(
                f"Unknown note field: {field}",
                details={"field": field},
            )

        try:
            setattr(self._draft, field, value)
        except PydanticValidationError as e:
            raise ValidationError(
                f"Invalid value for {field}",
                details={"field": field, "errors": e.errors(include_url=False)},
            ) from e

        await self._publish()
        return self._draft.model_copy()

    async def save(self) -> NoteDraft:
        """
        Write the draft: insert when new, full update otherwise.

        The draft takes the stored values afterwards, including the
        assigned id and any color fallback.

        Raises:
            ConflictError: If the session is not editing (already saved,
                discarded, or never loaded)
            NotFoundError: If the stored note vanished meanwhile
        """
        async with self._lock:
            self._ensure_editing()
            draft = self._draft.model_copy()

            if draft.is_new:
                note_id = await self.store.insert(draft)
                # Row is committed; a retry must update it
                self._draft = draft.model_copy(update={"id": note_id})
                stored = await self.store.get(note_id)
                saved = (
                    NoteDraft.model_validate(stored.model_dump())
                    if stored is not None
                    else self._draft.model_copy()
                )
            else:
                stored = await self.store.update(draft)
                saved = NoteDraft.model_validate(stored.model_dump())

            self._draft = saved
            self._state = SessionState.SAVED

        self._logger.info("Draft saved", extra={"note_id": saved.id})
        await self._publish()
        return saved.model_copy()

    async def move_to_trash(self) -> NoteDraft:
        """
        Soft-delete the note behind the draft.

        Raises:
            ConflictError: If the draft was never saved, or the session is
                not editing
            NotFoundError: If the stored note vanished meanwhile
        """
        async with self._lock:
            self._ensure_editing()
            if self._draft.is_new:
                raise ConflictError("Cannot move an unsaved note to the trash")

            trashed = self._draft.model_copy(update={"is_in_trash": True})
            stored = await self.store.update(trashed)

            self._draft = NoteDraft.model_validate(stored.model_dump())
            self._state = SessionState.SAVED

        self._logger.info("Draft moved to trash", extra={"note_id": stored.id})
        await self._publish()
        return self._draft.model_copy()

    async def discard(self) -> None:
        """
        Drop the draft without writing anything.

        Raises:
            ConflictError: If the session is already closed, or a save is
                running
        """
        self._ensure_open()
        if self._lock.locked():
            raise ConflictError("Draft is being written")

        self._draft = None
        self._state = SessionState.DISCARDED
        self._logger.debug("Draft discarded")
        await self._publish()

    async def list_colors(self) -> list[ColorRead]:
        """Palette the draft's color can be picked from."""
        return await self.store.list_colors()

    def _ensure_open(self) -> None:
        if self._state in TERMINAL_STATES:
            raise ConflictError(f"Session is {self._state.value}")

    def _ensure_editing(self) -> None:
        self._ensure_open()
        if self._state is not SessionState.EDITING or self._draft is None:
            raise ConflictError("No draft is being edited")

    async def _publish(self) -> None:
        await self.events.draft_changed(
            self._draft,
            self._state.value,
            correlation_id=self.session_id,
        )
