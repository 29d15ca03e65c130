"""Named action handlers invoked by workflow steps."""

from __future__ import annotations

import logging
from typing import Callable, Dict, List, Optional

from ..contracts import ActionHandler
from ..errors import ActionNotFoundError

logger = logging.getLogger(__name__)


class ActionRegistry:
    """Maps action names to handlers.

    Handlers receive ``(params, context)`` and return a result or an
    awaitable. Registering an existing name replaces the previous handler.
    Registration is expected to happen before the first workflow runs.
    """

    def __init__(self) -> None:
        self._handlers: Dict[str, ActionHandler] = {}

    def register(self, name: str, handler: ActionHandler) -> None:
        if not callable(handler):
            raise TypeError(f"Handler for action {name!r} is not callable")
        if name in self._handlers:
            logger.debug(f"Replacing handler for action {name}")
        self._handlers[name] = handler

    def action(self, name: Optional[str] = None) -> Callable[[ActionHandler], ActionHandler]:
        """Decorator form of :meth:`register`; defaults to the function name."""

        def decorator(handler: ActionHandler) -> ActionHandler:
            self.register(name or handler.__name__, handler)
            return handler

        return decorator

    def get(self, name: str) -> ActionHandler:
        try:
            return self._handlers[name]
        except KeyError:
            raise ActionNotFoundError(name) from None

    def find(self, name: str) -> Optional[ActionHandler]:
        return self._handlers.get(name)

    def names(self) -> List[str]:
        return list(self._handlers)

    def __contains__(self, name: object) -> bool:
        return name in self._handlers

    def __len__(self) -> int:
        return len(self._handlers)
