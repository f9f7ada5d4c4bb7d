"""
Note Model.

Database model for notes and contacts.
"""

from sqlalchemy import ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from mynotes.models.base import Base

NEW_NOTE_ID = 0
"""Id carried by a note that has not been persisted yet."""


class Note(Base):
    """
    Note database model.

    Ids come from SQLite AUTOINCREMENT, so an id is never handed out
    twice, even after the row holding it has been deleted.
    """

    __tablename__ = "notes"
    __table_args__ = {"sqlite_autoincrement": True}

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    content: Mapped[str] = mapped_column(Text, nullable=False, default="")
    category: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    can_be_checked_off: Mapped[bool] = mapped_column(nullable=False, default=False)
    is_checked_off: Mapped[bool] = mapped_column(nullable=False, default=False)
    color_id: Mapped[int] = mapped_column(ForeignKey("colors.id"), nullable=False)
    is_in_trash: Mapped[bool] = mapped_column(nullable=False, default=False, index=True)

    def __repr__(self) -> str:
        return f"<Note(id={self.id}, title={self.title!r})>"


DEFAULT_NOTES: tuple[dict, ...] = (
    {
        "id": 1,
        "title": "Thanapat Pongpipat",
        "content": "0963711479",
        "category": "Phone",
        "can_be_checked_off": False,
        "is_checked_off": False,
        "color_id": 1,
        "is_in_trash": False,
    },
    {
        "id": 2,
        "title": "Ter",
        "content": "0816353115",
        "category": "Home",
        "can_be_checked_off": False,
        "is_checked_off": False,
        "color_id": 2,
        "is_in_trash": False,
    },
)
"""Notes inserted on first run when the notes table is empty."""
