"""In-process deep-link bus.

Return URLs reach the application from several places (the local return
listener, URLs pasted into the CLI, an embedding app's own URL handler).
They are all published here, and every interested party subscribes.
"""

from __future__ import annotations

import logging
from typing import Awaitable, Callable, List

logger = logging.getLogger(__name__)

Listener = Callable[[str], Awaitable[None]]


class Subscription:
    """Handle returned by ``DeepLinkRouter.add_listener``."""

    def __init__(self, router: "DeepLinkRouter", listener: Listener) -> None:
        self._router = router
        self._listener = listener

    def remove(self) -> None:
        self._router._discard(self._listener)


class DeepLinkRouter:
    def __init__(self) -> None:
        self._listeners: List[Listener] = []

    def add_listener(self, listener: Listener) -> Subscription:
        self._listeners.append(listener)
        return Subscription(self, listener)

    def _discard(self, listener: Listener) -> None:
        try:
            self._listeners.remove(listener)
        except ValueError:
            pass  # already removed

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    async def publish(self, url: str) -> int:
        """Hand ``url`` to every current listener; return how many there were.

        A failing listener is logged and does not stop delivery to the rest.
        """
        listeners = list(self._listeners)
        logger.debug("Publishing deep link to %d listener(s): %s", len(listeners), url)
        for listener in listeners:
            try:
                await listener(url)
            except Exception:
                logger.exception("Deep link listener failed for %s", url)
        return len(listeners)
