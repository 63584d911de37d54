"""Project-scoped "navigation/data changed" broadcast."""

from __future__ import annotations

import inspect
import logging
from collections import defaultdict
from typing import Any, Awaitable, Callable, Union

LOGGER = logging.getLogger(__name__)

NAV_REFRESH_EVENT = "docs-nav-refresh"

RefreshHandler = Callable[[str], Union[Awaitable[Any], Any]]


class EventBus:
    """Let sibling views refresh their own copies of folders and sets.

    Handlers subscribe per project id and may be plain callables or
    coroutine functions.
    """

    def __init__(self) -> None:
        self._handlers: defaultdict[str, list[RefreshHandler]] = defaultdict(list)

    def subscribe(self, project_id: str, handler: RefreshHandler) -> Callable[[], None]:
        """Register ``handler`` for ``project_id`` and return an unsubscriber."""

        self._handlers[project_id].append(handler)

        def unsubscribe() -> None:
            handlers = self._handlers.get(project_id, [])
            if handler in handlers:
                handlers.remove(handler)

        return unsubscribe

    def subscriber_count(self, project_id: str) -> int:
        return len(self._handlers.get(project_id, []))

    async def publish(self, project_id: str) -> None:
        """Notify every handler of ``project_id`` in subscription order."""

        handlers = list(self._handlers.get(project_id, []))
        LOGGER.debug("%s for project %s (%d handler(s))", NAV_REFRESH_EVENT, project_id, len(handlers))
        for handler in handlers:
            try:
                result = handler(project_id)
                if inspect.isawaitable(result):
                    await result
            except Exception:
                LOGGER.exception("%s handler failed for project %s", NAV_REFRESH_EVENT, project_id)


__all__ = ["NAV_REFRESH_EVENT", "EventBus", "RefreshHandler"]
