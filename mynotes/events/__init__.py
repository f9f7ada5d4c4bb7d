"""Events package: envelopes, in-process broker, publishers."""

from mynotes.events.broker import EventBroker
from mynotes.events.publishers import DraftEventPublisher, NoteEventPublisher

__all__ = [
    "DraftEventPublisher",
    "EventBroker",
    "NoteEventPublisher",
]
