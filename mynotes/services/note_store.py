"""
Note Store.

Durable CRUD over the notes table and read access to the palette. This
is the single source of truth: there is no cache, every read goes to the
database, and each operation is one transaction.

After a write commits, subscribers receive an event carrying the
refreshed list of active notes.
"""

from collections.abc import Callable

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from mynotes.core.exceptions import (
    DatabaseError,
    NotFoundError,
    StorageUnavailableError,
    ValidationError,
)
from mynotes.events.broker import EventBroker, Handler
from mynotes.events.publishers import NoteEventPublisher
from mynotes.models.color import DEFAULT_COLORS, FALLBACK_COLOR, Color
from mynotes.models.note import DEFAULT_NOTES, NEW_NOTE_ID, Note
from mynotes.repositories.color import ColorRepository
from mynotes.repositories.note import NoteRepository
from mynotes.schemas.color import ColorRead
from mynotes.schemas.note import EDITABLE_FIELDS, NoteFields, NoteRead
from mynotes.services.base import BaseService


class NoteStore(BaseService):
    """
    Service for note persistence.

    Ids are assigned on insert, increase monotonically and are never
    reused. Writes are last-write-wins per row.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession] | None = None,
        broker: EventBroker | None = None,
        publish_events: bool | None = None,
    ) -> None:
        if session_factory is None:
            from mynotes.core.database import get_session_factory

            session_factory = get_session_factory()
        super().__init__(session_factory)
        self.events = NoteEventPublisher(broker or EventBroker(), enabled=publish_events)

    def subscribe(self, handler: Handler) -> Callable[[], None]:
        """
        Receive an event after every committed write.

        Returns:
            Callable that removes the subscription
        """
        return self.events.broker.subscribe(self.events.channel, handler)

    # -------------------------------------------------------------------------
    # Seeding
    # -------------------------------------------------------------------------

    async def seed_if_empty(self) -> bool:
        """
        Insert the default palette and notes on first run.

        The palette is seeded when the colors table is empty. The default
        notes are seeded only when the notes table has never held a row,
        so their fixed ids can never collide with an id already handed out.

        Returns:
            True if the default notes were inserted
        """
        async with self._transaction("seed_if_empty") as session:
            colors = ColorRepository(session)
            notes = NoteRepository(session)

            if await colors.count() == 0:
                session.add_all(Color(**data) for data in DEFAULT_COLORS)
                self._log_operation("Seeding palette", count=len(DEFAULT_COLORS))

            seeded = (
                await notes.count() == 0
                and await notes.last_assigned_id() is None
            )
            if seeded:
                session.add_all(Note(**data) for data in DEFAULT_NOTES)
                self._log_operation("Seeding default notes", count=len(DEFAULT_NOTES))

        if seeded:
            await self._notify(self.events.notes_created, [data["id"] for data in DEFAULT_NOTES])
        else:
            self._log_debug("Notes table already initialized, skipping seed")
        return seeded

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    async def insert(self, note: NoteFields) -> int:
        """
        Persist a new note.

        Args:
            note: Note carrying the NEW_NOTE_ID sentinel

        Returns:
            The assigned id

        Raises:
            ValidationError: If the note already has an id
        """
        note_id = getattr(note, "id", NEW_NOTE_ID)
        if note_id != NEW_NOTE_ID:
            raise ValidationError(
                "Only unsaved notes can be inserted",
                details={"id": note_id},
            )

        async with self._transaction("insert_note") as session:
            values = await self._row_values(session, note)
            row = await NoteRepository(session).create(**values)
            note_id = row.id

        self._log_operation("Note inserted", note_id=note_id)
        await self._notify(self.events.notes_created, [note_id])
        return note_id

    async def update(self, note: NoteFields) -> NoteRead:
        """
        Replace every field of a stored note.

        Args:
            note: Note with the id of an existing row

        Returns:
            Snapshot of the stored row

        Raises:
            NotFoundError: If no note has that id; nothing is written
        """
        note_id = getattr(note, "id", NEW_NOTE_ID)
        if note_id == NEW_NOTE_ID:
            raise NotFoundError("Note has not been saved yet")

        async with self._transaction("update_note") as session:
            repo = NoteRepository(session)
            current = await repo.get_by_id(note_id)
            was_in_trash = current.is_in_trash

            values = await self._row_values(session, note)
            changed = [key for key, value in values.items() if getattr(current, key) != value]
            row = await repo.update(note_id, **values)
            snapshot = NoteRead.model_validate(row)

        self._log_operation("Note updated", note_id=note_id, fields=changed)
        if snapshot.is_in_trash and not was_in_trash:
            await self._notify(self.events.notes_trashed, [note_id])
        elif was_in_trash and not snapshot.is_in_trash:
            await self._notify(self.events.notes_restored, [note_id])
        else:
            await self._notify(self.events.note_updated, note_id, fields=changed)
        return snapshot

    async def move_to_trash(self, note_id: int) -> NoteRead:
        """
        Soft-delete a note.

        Raises:
            NotFoundError: If note not found
        """
        async with self._transaction("move_to_trash") as session:
            row = await NoteRepository(session).move_to_trash(note_id)
            snapshot = NoteRead.model_validate(row)

        self._log_operation("Note moved to trash", note_id=note_id)
        await self._notify(self.events.notes_trashed, [note_id])
        return snapshot

    async def restore(self, note_ids: list[int]) -> list[NoteRead]:
        """
        Move notes from the trash back to the active list.

        Raises:
            NotFoundError: If any id is unknown; nothing is restored
        """
        if not note_ids:
            return []

        async with self._transaction("restore_notes") as session:
            rows = await self._get_all_or_raise(NoteRepository(session), note_ids)
            for row in rows:
                row.is_in_trash = False
            await session.flush()
            snapshots = [NoteRead.model_validate(row) for row in rows]

        self._log_operation("Notes restored", note_ids=note_ids)
        await self._notify(self.events.notes_restored, note_ids)
        return snapshots

    async def set_checked_off(self, note_id: int, checked: bool) -> NoteRead:
        """
        Check or uncheck a checklist note.

        Raises:
            NotFoundError: If note not found
            ValidationError: If the note is not a checklist item
        """
        async with self._transaction("set_checked_off") as session:
            repo = NoteRepository(session)
            current = await repo.get_by_id(note_id)
            if not current.can_be_checked_off:
                raise ValidationError(
                    "Note cannot be checked off",
                    details={"id": note_id},
                )
            row = await repo.update(note_id, is_checked_off=checked)
            snapshot = NoteRead.model_validate(row)

        await self._notify(self.events.note_updated, note_id, fields=["is_checked_off"])
        return snapshot

    async def delete(self, note_id: int) -> None:
        """
        Permanently remove a note.

        Raises:
            NotFoundError: If note not found
        """
        async with self._transaction("delete_note") as session:
            await NoteRepository(session).delete(note_id)

        self._log_operation("Note deleted", note_id=note_id)
        await self._notify(self.events.notes_deleted, [note_id])

    async def delete_many(self, note_ids: list[int]) -> None:
        """
        Permanently remove several notes at once.

        Raises:
            NotFoundError: If any id is unknown; nothing is deleted
        """
        if not note_ids:
            return

        async with self._transaction("delete_notes") as session:
            rows = await self._get_all_or_raise(NoteRepository(session), note_ids)
            for row in rows:
                await session.delete(row)
            await session.flush()

        self._log_operation("Notes deleted", note_ids=note_ids)
        await self._notify(self.events.notes_deleted, note_ids)

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    async def get(self, note_id: int) -> NoteRead | None:
        """Get a note by id. Returns None if absent."""
        async with self._transaction("get_note") as session:
            row = await NoteRepository(session).get_by_id_or_none(note_id)
            return NoteRead.model_validate(row) if row is not None else None

    async def list_active(self) -> list[NoteRead]:
        """Notes not in the trash, newest id first."""
        async with self._transaction("list_active") as session:
            rows = await NoteRepository(session).get_all_active()
            return [NoteRead.model_validate(row) for row in rows]

    async def list_trash(self) -> list[NoteRead]:
        """Notes in the trash, newest id first."""
        async with self._transaction("list_trash") as session:
            rows = await NoteRepository(session).get_in_trash()
            return [NoteRead.model_validate(row) for row in rows]

    async def list_colors(self) -> list[ColorRead]:
        """The palette, ordered by id."""
        async with self._transaction("list_colors") as session:
            rows = await ColorRepository(session).get_all()
            return [ColorRead.model_validate(row) for row in rows]

    async def get_color(self, color_id: int) -> ColorRead | None:
        """Get a palette entry by id. Returns None if absent."""
        async with self._transaction("get_color") as session:
            row = await ColorRepository(session).get_by_id_or_none(color_id)
            return ColorRead.model_validate(row) if row is not None else None

    async def default_color(self) -> ColorRead:
        """First palette entry, or the built-in white if the palette is empty."""
        async with self._transaction("default_color") as session:
            row = await ColorRepository(session).get_first()
            if row is None:
                return ColorRead(**FALLBACK_COLOR)
            return ColorRead.model_validate(row)

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    async def _row_values(self, session: AsyncSession, note: NoteFields) -> dict:
        """Column values for a write, with color and checked state normalized."""
        values = note.model_dump(include=set(EDITABLE_FIELDS))
        values["is_checked_off"] = values["can_be_checked_off"] and values["is_checked_off"]
        values["color_id"] = await self._resolve_color_id(session, values["color_id"])
        return values

    async def _resolve_color_id(self, session: AsyncSession, color_id: int) -> int:
        """Keep a known color id, else fall back to the default color."""
        colors = ColorRepository(session)
        if await colors.exists(color_id):
            return color_id

        first = await colors.get_first()
        fallback = first.id if first is not None else FALLBACK_COLOR["id"]
        self._logger.warning(
            "Unknown color, using default",
            extra={"color_id": color_id, "fallback_color_id": fallback},
        )
        return fallback

    async def _get_all_or_raise(self, repo: NoteRepository, note_ids: list[int]) -> list[Note]:
        rows = await repo.get_many(note_ids)
        missing = sorted(set(note_ids) - {row.id for row in rows})
        if missing:
            raise NotFoundError(f"Notes not found: {missing}")
        return rows

    async def _notify(self, publish: Callable, target: int | list[int], **kwargs) -> None:
        """Publish a change with the refreshed active list, if anyone listens."""
        if not self.events.wants_events:
            return

        # Write already committed
        try:
            notes = await self.list_active()
        except (StorageUnavailableError, DatabaseError) as e:
            self._logger.warning(
                "Change notification skipped",
                extra={"note_ids": target, "error": e.message},
            )
            return
        await publish(target, notes, **kwargs)
