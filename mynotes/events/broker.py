"""
Event Broker.

In-process publish/subscribe. Each store and each session owns its own
broker, so there is no process-wide event bus.

Handlers may be plain functions or coroutine functions. They run in
subscription order after the write that triggered them has committed.
A failing handler is logged and skipped; it cannot undo the write.

Usage:
    broker = EventBroker()
    unsubscribe = broker.subscribe("notes:note", on_change)
    await broker.publish(event, channel="notes:note")
    unsubscribe()
"""

import inspect
from collections.abc import Awaitable, Callable

import structlog

from mynotes.core.logging import get_logger
from mynotes.events.schemas import EventEnvelope

logger = get_logger(__name__)

Handler = Callable[[EventEnvelope], Awaitable[None] | None]


class EventBroker:
    """Channel-keyed list of handlers."""

    def __init__(self) -> None:
        self._handlers: dict[str, list[Handler]] = {}

    def subscribe(self, channel: str, handler: Handler) -> Callable[[], None]:
        """
        Register a handler for a channel.

        Returns:
            Callable that removes the handler. Calling it twice is harmless.
        """
        self._handlers.setdefault(channel, []).append(handler)
        logger.debug("Handler subscribed", extra={"channel": channel})

        def unsubscribe() -> None:
            handlers = self._handlers.get(channel, [])
            if handler in handlers:
                handlers.remove(handler)
                logger.debug("Handler unsubscribed", extra={"channel": channel})

        return unsubscribe

    def has_subscribers(self, channel: str) -> bool:
        return bool(self._handlers.get(channel))

    async def publish(self, event: EventEnvelope, channel: str) -> int:
        """
        Deliver an event to every handler of a channel.

        Returns:
            Number of handlers that completed without raising
        """
        delivered = 0
        # Copy: handlers may unsubscribe while being called
        for handler in list(self._handlers.get(channel, [])):
            with structlog.contextvars.bound_contextvars(
                event_id=event.event_id,
                event_type=event.event_type,
                correlation_id=event.correlation_id,
            ):
                try:
                    result = handler(event)
                    if inspect.isawaitable(result):
                        await result
                except Exception:
                    logger.exception(
                        "Event handler failed",
                        extra={"channel": channel, "source": "events"},
                    )
                    continue
            delivered += 1
        return delivered
