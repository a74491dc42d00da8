"""Caller-facing outcome callbacks."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from ..domain.entities import (
    PaymentCancelled,
    PaymentFailed,
    PaymentOutcome,
    PaymentSucceeded,
)

logger = logging.getLogger(__name__)


def _noop(*args: object) -> None:
    return None


@dataclass
class PaymentCallbacks:
    """The three ways an attempt can end, as seen by the caller."""

    on_success: Callable[[PaymentSucceeded], None] = _noop
    on_cancel: Callable[[], None] = _noop
    on_error: Optional[Callable[[str], None]] = None

    def deliver(self, outcome: PaymentOutcome) -> None:
        """Invoke the callback matching ``outcome``.

        A callback that raises is logged; the error never reaches the flow.
        """
        try:
            if isinstance(outcome, PaymentSucceeded):
                self.on_success(outcome)
            elif isinstance(outcome, PaymentCancelled):
                self.on_cancel()
            elif isinstance(outcome, PaymentFailed):
                if self.on_error is not None:
                    self.on_error(outcome.message)
                else:
                    logger.warning("Payment failed: %s", outcome.message)
        except Exception:
            logger.exception("Payment outcome callback raised")
