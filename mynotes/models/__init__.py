"""Models package - re-exports all models for convenient imports."""

from mynotes.models.base import Base
from mynotes.models.color import DEFAULT_COLORS, FALLBACK_COLOR, Color
from mynotes.models.note import DEFAULT_NOTES, NEW_NOTE_ID, Note

__all__ = [
    "Base",
    "Color",
    "DEFAULT_COLORS",
    "DEFAULT_NOTES",
    "FALLBACK_COLOR",
    "NEW_NOTE_ID",
    "Note",
]
