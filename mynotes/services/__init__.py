"""Services package."""

from mynotes.services.base import BaseService
from mynotes.services.note_session import NoteSession, SessionState
from mynotes.services.note_store import NoteStore

__all__ = [
    "BaseService",
    "NoteSession",
    "NoteStore",
    "SessionState",
]
