from __future__ import annotations

import asyncio


def compute_backoff(
    attempt: int, delay_ms: float = 1000, multiplier: float = 2
) -> float:
    """Return the delay in milliseconds before the attempt after ``attempt``.

    No jitter is applied: ``delay_ms * multiplier ** (attempt - 1)``.
    """
    return delay_ms * multiplier ** (attempt - 1)


async def schedule_retry(delay_ms: float) -> None:
    """Sleep for the computed backoff delay before retrying."""
    await asyncio.sleep(delay_ms / 1000)
