"""
Event Publishers.

Domain-specific event publishers. Each publisher wraps the broker's
publish() method with the correct channel name and event schema.

Publishers check the events_publish_enabled feature flag before publishing.
When disabled, events are silently skipped (no error, no log noise).

Usage:
    from mynotes.events.publishers import NoteEventPublisher

    publisher = NoteEventPublisher(broker)
    await publisher.notes_created([note.id], notes=active_notes)
"""

from mynotes.core.logging import get_logger
from mynotes.events.broker import EventBroker
from mynotes.events.schemas import (
    DraftChanged,
    EventEnvelope,
    NoteChangeEvent,
    NoteCreated,
    NoteDeleted,
    NoteRestored,
    NoteTrashed,
    NoteUpdated,
)
from mynotes.schemas.note import NoteDraft, NoteRead

logger = get_logger(__name__)


class _Publisher:
    """Shared feature-flag check and broker call."""

    channel: str

    def __init__(self, broker: EventBroker, enabled: bool | None = None) -> None:
        self.broker = broker
        self._enabled = enabled

    @property
    def enabled(self) -> bool:
        """Explicit setting, else the events_publish_enabled feature flag."""
        if self._enabled is not None:
            return self._enabled

        from mynotes.core.config import get_app_config

        return get_app_config().features.events_publish_enabled

    @property
    def wants_events(self) -> bool:
        """True when publishing is enabled and someone is listening."""
        return self.enabled and self.broker.has_subscribers(self.channel)

    async def _publish(self, event: EventEnvelope) -> None:
        """Publish an event if the feature flag is enabled."""
        if not self.enabled:
            return

        delivered = await self.broker.publish(event, channel=self.channel)
        logger.debug(
            "Event published",
            extra={
                "channel": self.channel,
                "event_type": event.event_type,
                "event_id": event.event_id,
                "delivered": delivered,
            },
        )


class NoteEventPublisher(_Publisher):
    """Publishes note store writes."""

    channel = "notes:note"
    source = "note-store"

    async def notes_created(
        self, note_ids: list[int], notes: list[NoteRead], correlation_id: str | None = None,
    ) -> None:
        """Publish a notes.note.created event."""
        await self._publish(self._build(NoteCreated, note_ids, notes, correlation_id))

    async def note_updated(
        self,
        note_id: int,
        notes: list[NoteRead],
        fields: list[str] | None = None,
        correlation_id: str | None = None,
    ) -> None:
        """Publish a notes.note.updated event."""
        event = self._build(NoteUpdated, [note_id], notes, correlation_id)
        event.payload["fields_updated"] = fields or []
        await self._publish(event)

    async def notes_trashed(
        self, note_ids: list[int], notes: list[NoteRead], correlation_id: str | None = None,
    ) -> None:
        """Publish a notes.note.trashed event."""
        await self._publish(self._build(NoteTrashed, note_ids, notes, correlation_id))

    async def notes_restored(
        self, note_ids: list[int], notes: list[NoteRead], correlation_id: str | None = None,
    ) -> None:
        """Publish a notes.note.restored event."""
        await self._publish(self._build(NoteRestored, note_ids, notes, correlation_id))

    async def notes_deleted(
        self, note_ids: list[int], notes: list[NoteRead], correlation_id: str | None = None,
    ) -> None:
        """Publish a notes.note.deleted event."""
        await self._publish(self._build(NoteDeleted, note_ids, notes, correlation_id))

    def _build(
        self,
        event_cls: type[NoteChangeEvent],
        note_ids: list[int],
        notes: list[NoteRead],
        correlation_id: str | None,
    ) -> NoteChangeEvent:
        return event_cls(
            source=self.source,
            correlation_id=correlation_id,
            payload={"note_ids": list(note_ids)},
            notes=notes,
        )


class DraftEventPublisher(_Publisher):
    """Publishes draft snapshots from a note session."""

    channel = "notes:draft"
    source = "note-session"

    async def draft_changed(
        self, draft: NoteDraft | None, state: str, correlation_id: str | None = None,
    ) -> None:
        """Publish a notes.draft.changed event."""
        await self._publish(
            DraftChanged(
                source=self.source,
                correlation_id=correlation_id,
                draft=draft.model_copy() if draft is not None else None,
                state=state,
            )
        )
