"""
Color Repository.

Read access to the palette.
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from mynotes.models.color import Color
from mynotes.repositories.base import BaseRepository


class ColorRepository(BaseRepository[Color]):
    """Repository for Color model."""

    model = Color

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)

    async def get_first(self) -> Color | None:
        """Get the palette entry with the lowest id, or None if empty."""
        result = await self.session.execute(
            select(Color).order_by(Color.id).limit(1)
        )
        return result.scalar_one_or_none()
