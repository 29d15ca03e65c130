"""Redis pub/sub event bus for cross-process notification."""

from __future__ import annotations

from typing import Any, Optional

try:
    import redis.asyncio as redis
except ImportError:
    redis = None

from ..contracts import Event
from .base import EventBus


class RedisEventBus(EventBus):
    """Publish lifecycle events to Redis channels named ``<prefix>:<type>``."""

    def __init__(
        self,
        host: str = "localhost",
        port: int = 6379,
        db: int = 0,
        password: Optional[str] = None,
        channel_prefix: str = "sagaflow",
    ) -> None:
        if redis is None:
            raise ImportError("redis package is required for RedisEventBus")

        self.host = host
        self.port = port
        self.db = db
        self.password = password
        self.channel_prefix = channel_prefix
        self._redis: Optional[Any] = None

    async def connect(self) -> None:
        """Connect to Redis."""
        self._redis = redis.Redis(
            host=self.host,
            port=self.port,
            db=self.db,
            password=self.password,
            decode_responses=True,
        )
        await self._redis.ping()

    async def disconnect(self) -> None:
        """Disconnect from Redis."""
        if self._redis:
            await self._redis.aclose()
            self._redis = None

    def channel_for(self, event_type: str) -> str:
        return f"{self.channel_prefix}:{event_type}"

    async def publish(self, event: Event) -> None:
        """Publish the JSON-encoded event on its type channel."""
        if not self._redis:
            await self.connect()

        await self._redis.publish(self.channel_for(event.type), event.to_json())
