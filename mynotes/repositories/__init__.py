"""Repositories package."""

from mynotes.repositories.base import BaseRepository
from mynotes.repositories.color import ColorRepository
from mynotes.repositories.note import NoteRepository

__all__ = [
    "BaseRepository",
    "ColorRepository",
    "NoteRepository",
]
