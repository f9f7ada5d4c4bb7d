"""
Color Model.

Palette entries selectable for notes. The palette is seeded once and is
read-only from the editing flow.
"""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from mynotes.models.base import Base


class Color(Base):
    """
    Color database model.

    Attributes:
        id: Primary key.
        hex: ``#RRGGBB``, six hex digits, no alpha.
        name: Display name.
    """

    __tablename__ = "colors"

    id: Mapped[int] = mapped_column(primary_key=True)
    hex: Mapped[str] = mapped_column(String(7), nullable=False)
    name: Mapped[str] = mapped_column(String(64), nullable=False)

    def __repr__(self) -> str:
        return f"<Color(id={self.id}, hex={self.hex!r})>"


DEFAULT_COLORS: tuple[dict, ...] = (
    {"id": 1, "hex": "#FFFFFF", "name": "White"},
    {"id": 2, "hex": "#E57373", "name": "Red"},
    {"id": 3, "hex": "#F06292", "name": "Pink"},
    {"id": 4, "hex": "#CE93D8", "name": "Purple"},
    {"id": 5, "hex": "#2196F3", "name": "Blue"},
    {"id": 6, "hex": "#00ACC1", "name": "Cyan"},
    {"id": 7, "hex": "#26A69A", "name": "Teal"},
    {"id": 8, "hex": "#4CAF50", "name": "Green"},
    {"id": 9, "hex": "#8BC34A", "name": "Light Green"},
    {"id": 10, "hex": "#CDDC39", "name": "Lime"},
    {"id": 11, "hex": "#FFEB3B", "name": "Yellow"},
    {"id": 12, "hex": "#FF9800", "name": "Orange"},
    {"id": 13, "hex": "#BCAAA4", "name": "Brown"},
    {"id": 14, "hex": "#9E9E9E", "name": "Gray"},
)
"""Palette inserted on first run when the colors table is empty."""

FALLBACK_COLOR: dict = {"id": 1, "hex": "#FFFFFF", "name": "White"}
"""Default color used when the palette is empty."""
