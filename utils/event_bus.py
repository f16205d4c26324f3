"""
Simple asynchronous event bus for engine notifications.
"""

import asyncio
import logging
from collections.abc import Callable, Coroutine
from typing import Any

from models.events import EngineEvent

logger_event_bus = logging.getLogger(__name__)

EventCallback = Callable[[EngineEvent], Coroutine[Any, Any, None]]


class EventBus:
    """Fan-out of engine events to async subscribers"""

    def __init__(self):
        self.subscribers: dict[str, list[EventCallback]] = {}

    def subscribe(self, event_type: str, callback: EventCallback) -> None:
        """Subscribe to an event type."""
        if not callable(callback):
            raise TypeError("Callback must be a callable async function.")
        callbacks = self.subscribers.setdefault(event_type, [])
        if callback in callbacks:
            logger_event_bus.warning(f"Callback {callback.__name__} already subscribed to {event_type}")
            return
        callbacks.append(callback)
        logger_event_bus.debug(f"Callback {callback.__name__} subscribed to {event_type}")

    def unsubscribe(self, event_type: str, callback: EventCallback) -> None:
        """Unsubscribe a specific callback from an event type."""
        if event_type not in self.subscribers:
            return
        try:
            self.subscribers[event_type].remove(callback)
            logger_event_bus.debug(f"Callback {callback.__name__} unsubscribed from {event_type}")
            if not self.subscribers[event_type]:
                del self.subscribers[event_type]
        except ValueError:
            logger_event_bus.warning(f"Callback {callback.__name__} not found for event type {event_type}")

    async def publish(self, event: EngineEvent) -> None:
        """Publish an event to subscribers. Subscriber errors are logged, not raised."""
        if not isinstance(event, EngineEvent):
            logger_event_bus.error(f"Attempted to publish invalid event type: {type(event)}")
            return

        logger_event_bus.debug(f"Event published: {event.event_type} from {event.source.value}")
        callbacks = list(self.subscribers.get(event.event_type, []))
        if not callbacks:
            return
        results = await asyncio.gather(
            *(callback(event) for callback in callbacks), return_exceptions=True
        )
        for callback, result in zip(callbacks, results):
            if isinstance(result, Exception):
                logger_event_bus.error(
                    f"Error in subscriber callback '{callback.__name__}' for event {event.event_type}: {result}"
                )
