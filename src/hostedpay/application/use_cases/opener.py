"""Hand-off to the external browser session on the hosted payment page."""

from __future__ import annotations

import logging
from typing import Optional

from ...domain.attempt import PaymentAttempt
from ...domain.entities import BrowserResult
from ...domain.shared import BrowserSessionProtocol

logger = logging.getLogger(__name__)


class ExternalSessionOpener:
    """Opens the hosted payment page and waits for the session to end.

    The result is advisory only: a dismissed session may still belong to a
    payment that succeeded server-side, so nothing here decides the outcome.
    """

    def __init__(self, browser: BrowserSessionProtocol, return_scheme: str) -> None:
        self.browser = browser
        self.return_scheme = return_scheme

    async def open(
        self, url: str, attempt: Optional[PaymentAttempt] = None
    ) -> BrowserResult:
        if attempt is not None:
            attempt.mark_awaiting_result()
        logger.info("Opening hosted payment page")
        result = await self.browser.open(url, self.return_scheme)
        logger.info("Browser result: type=%s url=%s", result.type, result.url)
        return result

    def dismiss(self) -> None:
        self.browser.dismiss()
