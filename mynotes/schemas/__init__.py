"""Schemas package."""

from mynotes.schemas.color import ColorRead
from mynotes.schemas.note import EDITABLE_FIELDS, NoteDraft, NoteFields, NoteRead

__all__ = [
    "ColorRead",
    "EDITABLE_FIELDS",
    "NoteDraft",
    "NoteFields",
    "NoteRead",
]
