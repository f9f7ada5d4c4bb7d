"""
Event Schemas.

Standardized event envelope and domain-specific event types.
All events published through a broker use the EventEnvelope base.

Naming convention for event_type: domain.entity.action (dot notation)
Channel naming convention: {domain}:{entity} (colon-separated)

Usage:
    from mynotes.events.schemas import NoteCreated

    event = NoteCreated(
        source="note-store",
        payload={"note_ids": [note.id]},
        notes=active_notes,
    )
"""

from uuid import uuid4

from pydantic import BaseModel, Field

from mynotes.core.utils import utc_now
from mynotes.schemas.note import NoteDraft, NoteRead


class EventEnvelope(BaseModel):
    """Base event envelope. All events inherit from this.

    Fields:
        event_id: Unique event identifier (auto-generated UUID)
        event_type: Domain event type in dot notation (e.g. notes.note.created)
        event_version: Schema version for forward compatibility
        timestamp: ISO 8601 UTC timestamp
        source: Component that published the event
        correlation_id: Caller-supplied id tying related events together
        payload: Event-specific data
    """

    event_id: str = Field(default_factory=lambda: str(uuid4()))
    event_type: str
    event_version: int = 1
    timestamp: str = Field(default_factory=lambda: utc_now().isoformat())
    source: str
    correlation_id: str | None = None
    payload: dict = Field(default_factory=dict)


class NoteChangeEvent(EventEnvelope):
    """Store write notification carrying the refreshed active list."""

    notes: list[NoteRead] = Field(default_factory=list)


class NoteCreated(NoteChangeEvent):
    """Published when a new note is inserted."""

    event_type: str = "notes.note.created"


class NoteUpdated(NoteChangeEvent):
    """Published when a note row is replaced."""

    event_type: str = "notes.note.updated"


class NoteTrashed(NoteChangeEvent):
    """Published when notes are moved to the trash."""

    event_type: str = "notes.note.trashed"


class NoteRestored(NoteChangeEvent):
    """Published when notes are taken out of the trash."""

    event_type: str = "notes.note.restored"


class NoteDeleted(NoteChangeEvent):
    """Published when notes are permanently deleted."""

    event_type: str = "notes.note.deleted"


class DraftChanged(EventEnvelope):
    """Published by a session after every draft mutation or state change."""

    event_type: str = "notes.draft.changed"
    draft: NoteDraft | None = None
    state: str
