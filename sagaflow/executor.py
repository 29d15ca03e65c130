"""Single-step execution with retry, backoff and timeout."""

from __future__ import annotations

import asyncio
import inspect
import logging
from typing import Any, Optional, Set

from .config import StepDefaults
from .contracts import ActionHandler, RetryPolicy, WorkflowContext, WorkflowStep
from .errors import StepTimeoutError
from .registry import ActionRegistry
from .utils import retry

logger = logging.getLogger(__name__)


class StepExecutor:
    """Runs one workflow step until it succeeds or runs out of attempts.

    Each attempt races the action against the step timeout. A timed out
    attempt is abandoned, not cancelled: the handler keeps running in the
    background and whatever it eventually returns or raises is discarded.
    Actions that may be retried or abandoned should therefore be idempotent.
    """

    def __init__(
        self, actions: ActionRegistry, defaults: Optional[StepDefaults] = None
    ) -> None:
        self._actions = actions
        self._defaults = defaults or StepDefaults()
        self._abandoned: Set[asyncio.Future] = set()

    @property
    def abandoned_count(self) -> int:
        """Number of timed out handler invocations still running."""
        return len(self._abandoned)

    def max_attempts(
        self, step: WorkflowStep, retry_policy: Optional[RetryPolicy] = None
    ) -> int:
        if step.retry_attempts is not None:
            return step.retry_attempts
        if retry_policy is not None and retry_policy.max_attempts is not None:
            return retry_policy.max_attempts
        return self._defaults.max_attempts

    def timeout_ms(self, step: WorkflowStep) -> float:
        return step.timeout_ms if step.timeout_ms is not None else self._defaults.timeout_ms

    def retry_delay_ms(
        self, attempt: int, retry_policy: Optional[RetryPolicy] = None
    ) -> float:
        """Delay to wait after failed ``attempt`` before the next one."""
        delay_ms = self._defaults.delay_ms
        multiplier = self._defaults.backoff_multiplier
        if retry_policy is not None:
            if retry_policy.delay_ms is not None:
                delay_ms = retry_policy.delay_ms
            if retry_policy.backoff_multiplier is not None:
                multiplier = retry_policy.backoff_multiplier
        return retry.compute_backoff(attempt, delay_ms=delay_ms, multiplier=multiplier)

    async def execute(
        self,
        step: WorkflowStep,
        context: WorkflowContext,
        retry_policy: Optional[RetryPolicy] = None,
    ) -> Any:
        """Return the step result or raise the last error once attempts run out.

        Raises:
            ActionNotFoundError: The step's action is not registered. Not retried.
        """
        handler = self._actions.get(step.action_name)
        max_attempts = self.max_attempts(step, retry_policy)
        timeout_ms = self.timeout_ms(step)

        last_error: Optional[Exception] = None
        for attempt in range(1, max_attempts + 1):
            try:
                return await self._attempt(handler, step, context, timeout_ms)
            except Exception as e:
                last_error = e
                logger.warning(
                    f"Step {step.id} attempt {attempt}/{max_attempts} failed: {e!r}"
                )
                if attempt < max_attempts:
                    delay_ms = self.retry_delay_ms(attempt, retry_policy)
                    logger.info(f"Retrying step {step.id} in {delay_ms:.0f}ms")
                    await retry.schedule_retry(delay_ms)

        raise last_error

    async def _attempt(
        self,
        handler: ActionHandler,
        step: WorkflowStep,
        context: WorkflowContext,
        timeout_ms: float,
    ) -> Any:
        outcome = handler(step.params, context)
        if not inspect.isawaitable(outcome):
            return outcome

        task = asyncio.ensure_future(outcome)
        try:
            done, _ = await asyncio.wait({task}, timeout=timeout_ms / 1000)
        except asyncio.CancelledError:
            task.cancel()
            raise

        if task in done:
            return task.result()

        self._abandon(task, step)
        raise StepTimeoutError(step.id, timeout_ms)

    def _abandon(self, task: asyncio.Future, step: WorkflowStep) -> None:
        logger.warning(f"Step {step.id} timed out; handler left running in background")
        self._abandoned.add(task)

        def _discard(done: asyncio.Future) -> None:
            self._abandoned.discard(done)
            if done.cancelled():
                return
            exc = done.exception()
            if exc is not None:
                logger.debug(f"Abandoned handler for step {step.id} failed: {exc!r}")
            else:
                logger.debug(f"Abandoned handler for step {step.id} finished late")

        task.add_done_callback(_discard)
