from __future__ import annotations

import asyncio
import logging
import webbrowser
from typing import Callable, Optional, Sequence

from ...domain.entities import BrowserResult
from ..linking import DeepLinkRouter

logger = logging.getLogger(__name__)


class SystemBrowserSession:
    """Browser session backed by the desktop's default web browser.

    The system browser gives no completion signal of its own, so the session
    ends when one of these happens first:

    - a URL starting with the return scheme (or one of ``return_prefixes``)
      is published on the deep-link router -> ``success`` with that URL;
    - ``dismiss()`` is called -> ``dismiss``;
    - ``timeout`` seconds pass -> ``dismiss``.
    """

    def __init__(
        self,
        router: DeepLinkRouter,
        *,
        timeout: float = 900.0,
        return_prefixes: Sequence[str] = (),
        open_url: Callable[[str], bool] = webbrowser.open,
    ) -> None:
        self._router = router
        self._timeout = timeout
        self._return_prefixes = tuple(return_prefixes)
        self._open_url = open_url
        self._pending: Optional["asyncio.Future[BrowserResult]"] = None

    async def open(self, url: str, return_scheme: str) -> BrowserResult:
        pending: "asyncio.Future[BrowserResult]" = (
            asyncio.get_running_loop().create_future()
        )
        self._pending = pending
        prefixes = (return_scheme, *self._return_prefixes)

        async def on_url(link: str) -> None:
            if link.startswith(prefixes) and not pending.done():
                pending.set_result(BrowserResult(type="success", url=link))

        subscription = self._router.add_listener(on_url)
        try:
            opened = await asyncio.to_thread(self._open_url, url)
            if not opened:
                logger.warning("Could not launch a browser, open this URL: %s", url)
            try:
                return await asyncio.wait_for(pending, self._timeout)
            except asyncio.TimeoutError:
                logger.info("Browser session timed out after %.0fs", self._timeout)
                return BrowserResult(type="dismiss")
        finally:
            subscription.remove()
            self._pending = None

    def dismiss(self) -> None:
        pending = self._pending
        if pending is not None and not pending.done():
            pending.set_result(BrowserResult(type="dismiss"))
