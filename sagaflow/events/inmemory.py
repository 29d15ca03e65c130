"""In-process event bus with bounded history and replay."""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections import deque
from datetime import datetime
from typing import Awaitable, Callable, Deque, Dict, List, Optional, Union

from ..constants import DEFAULT_EVENT_HISTORY_SIZE
from ..contracts import Event
from .base import EventBus

logger = logging.getLogger(__name__)

EventHandler = Callable[[Event], Union[Awaitable[None], None]]


class InMemoryEventBus(EventBus):
    """Pub/sub bus for a single process.

    Handlers may be coroutine functions or plain callables. Handlers for an
    event type run concurrently on publish; a failing handler is logged and
    does not affect the others or the publisher.
    """

    def __init__(self, max_history: int = DEFAULT_EVENT_HISTORY_SIZE) -> None:
        self._handlers: Dict[str, List[EventHandler]] = {}
        self._history: Deque[Event] = deque(maxlen=max_history)

    def subscribe(self, event_type: str, handler: EventHandler) -> None:
        handlers = self._handlers.setdefault(event_type, [])
        if handler not in handlers:
            handlers.append(handler)

    def unsubscribe(self, event_type: str, handler: EventHandler) -> None:
        handlers = self._handlers.get(event_type)
        if handlers and handler in handlers:
            handlers.remove(handler)

    async def publish(self, event: Event) -> None:
        self._history.append(event)
        handlers = list(self._handlers.get(event.type, ()))
        if not handlers:
            return
        await asyncio.gather(*(self._deliver(handler, event) for handler in handlers))

    async def _deliver(self, handler: EventHandler, event: Event) -> None:
        try:
            result = handler(event)
            if inspect.isawaitable(result):
                await result
        except Exception as e:
            logger.error(f"Event handler failed for {event.type}: {e}")

    def get_history(
        self, event_type: Optional[str] = None, limit: int = 100
    ) -> List[Event]:
        """Return the most recent events, newest first."""
        events = [e for e in self._history if event_type is None or e.type == event_type]
        return list(reversed(events[-limit:])) if limit > 0 else []

    def get_events_by_source(self, source: str, limit: int = 100) -> List[Event]:
        events = [e for e in self._history if e.source == source]
        return list(reversed(events[-limit:])) if limit > 0 else []

    def get_events_by_correlation(self, correlation_id: str) -> List[Event]:
        return [
            e
            for e in reversed(self._history)
            if (e.metadata or {}).get("correlation_id") == correlation_id
        ]

    async def replay(self, from_time: datetime) -> int:
        """Re-deliver stored events at or after ``from_time`` in publish order.

        Returns the number of events replayed.
        """
        events = [e for e in self._history if e.timestamp >= from_time]
        logger.info(f"Replaying {len(events)} events from {from_time.isoformat()}")
        for event in events:
            for handler in list(self._handlers.get(event.type, ())):
                try:
                    result = handler(event)
                    if inspect.isawaitable(result):
                        await result
                except Exception as e:
                    logger.error(f"Replay failed for event {event.id}: {e}")
        return len(events)

    def clear_history(self) -> None:
        self._history.clear()

    def get_event_counts(self) -> Dict[str, int]:
        counts: Dict[str, int] = {}
        for event in self._history:
            counts[event.type] = counts.get(event.type, 0) + 1
        return counts

    def get_handler_count(self, event_type: str) -> int:
        return len(self._handlers.get(event_type, ()))
