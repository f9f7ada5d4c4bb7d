"""
Note Repository.

Data access layer for notes. Handles all database operations
for the Note model.
"""

from sqlalchemy import func, select, text
from sqlalchemy.ext.asyncio import AsyncSession

from mynotes.models.note import Note
from mynotes.repositories.base import BaseRepository


class NoteRepository(BaseRepository[Note]):
    """
    Repository for Note model.

    Inherits standard CRUD operations from BaseRepository
    and adds trash-aware queries.
    """

    model = Note

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)

    async def get_all_active(self) -> list[Note]:
        """
        Get all notes not in the trash.

        Returns:
            Active notes, newest id first
        """
        result = await self.session.execute(
            select(Note)
            .where(Note.is_in_trash == False)  # noqa: E712
            .order_by(Note.id.desc())
        )
        return list(result.scalars().all())

    async def get_in_trash(self) -> list[Note]:
        """
        Get all notes in the trash.

        Returns:
            Trashed notes, newest id first
        """
        result = await self.session.execute(
            select(Note)
            .where(Note.is_in_trash == True)  # noqa: E712
            .order_by(Note.id.desc())
        )
        return list(result.scalars().all())

    async def get_many(self, ids: list[int]) -> list[Note]:
        """Get the notes whose id is in ``ids``, ordered by id."""
        result = await self.session.execute(
            select(Note).where(Note.id.in_(ids)).order_by(Note.id)
        )
        return list(result.scalars().all())

    async def move_to_trash(self, id: int) -> Note:
        """
        Soft-delete a note.

        Raises:
            NotFoundError: If note not found
        """
        return await self.update(id, is_in_trash=True)

    async def last_assigned_id(self) -> int | None:
        """
        Highest id ever handed out, or None if no note was ever stored.

        On SQLite this reads the AUTOINCREMENT counter, which survives
        deletes. Other backends fall back to the current maximum id.
        """
        if self.session.get_bind().dialect.name == "sqlite":
            result = await self.session.execute(
                text("SELECT seq FROM sqlite_sequence WHERE name = :name"),
                {"name": Note.__tablename__},
            )
            return result.scalar_one_or_none()

        result = await self.session.execute(select(func.max(Note.id)))
        return result.scalar_one_or_none()
