"""Base event bus interface for lifecycle notifications."""

from __future__ import annotations

import abc

from ..contracts import Event


class EventBus(metaclass=abc.ABCMeta):
    """Destination for workflow lifecycle events.

    Implementations must not block the publisher for long; the engine awaits
    every publish between steps.
    """

    async def connect(self) -> None:
        """Prepare the bus before the first publish (no-op by default)."""
        pass

    async def disconnect(self) -> None:
        """Release resources held by the bus (no-op by default)."""
        pass

    @abc.abstractmethod
    async def publish(self, event: Event) -> None:
        """Deliver an event to its subscribers."""
        raise NotImplementedError
