"""Outcome reconciliation for a payment whose result is not known yet."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Callable, Optional

from ...domain.attempt import PaymentAttempt
from ...domain.entities import (
    BrowserResult,
    PaymentCancelled,
    PaymentOutcome,
    PaymentRequest,
    PaymentSucceeded,
)
from ...domain.errors import PaymentNotFoundError, StatusCheckError
from ...domain.shared import PaymentGatewayProtocol, Sleep
from ..callbacks import PaymentCallbacks
from .return_url import parse_return_url

logger = logging.getLogger(__name__)


class OutcomeReconciler:
    """Turns browser results, deep links and status polls into one outcome.

    The browser channel and the deep-link channel may fire in any order. Both
    go through the attempt's state machine, which latches the first outcome
    and allows a single polling loop.

    Ambiguous endings (dismissed browser, polling exhausted while pending,
    payment never recorded) resolve as cancelled, never as errors.
    """

    def __init__(
        self,
        gateway: PaymentGatewayProtocol,
        attempt: PaymentAttempt,
        request: PaymentRequest,
        callbacks: PaymentCallbacks,
        *,
        max_attempts: int = 5,
        interval_seconds: float = 2.0,
        initial_delay_seconds: float = 1.0,
        sleep: Sleep = asyncio.sleep,
        on_short_circuit: Optional[Callable[[], None]] = None,
    ) -> None:
        self.gateway = gateway
        self.attempt = attempt
        self.request = request
        self.callbacks = callbacks
        self.max_attempts = max_attempts
        self.interval_seconds = interval_seconds
        self.initial_delay_seconds = initial_delay_seconds
        self.sleep = sleep
        self.on_short_circuit = on_short_circuit

    def resolve(self, outcome: PaymentOutcome) -> bool:
        """Deliver ``outcome`` unless the attempt already has one."""
        if not self.attempt.resolve(outcome):
            logger.debug("Attempt already resolved, dropping %r", outcome)
            return False
        self.callbacks.deliver(outcome)
        return True

    def succeeded(self, payment_id: Optional[str] = None) -> PaymentSucceeded:
        resolved_id = payment_id or self.known_payment_id()
        if not resolved_id:
            resolved_id = f"pf_{int(time.time() * 1000)}"
        return PaymentSucceeded(
            amount=self.request.amount,
            item_name=self.request.item_name,
            payment_id=resolved_id,
        )

    def known_payment_id(self) -> Optional[str]:
        session = self.attempt.session
        if session is not None and session.payment_id:
            return session.payment_id
        return self.attempt.payment_id

    async def handle_browser_result(self, result: BrowserResult) -> None:
        if self.attempt.is_resolved:
            logger.debug("Browser returned after the attempt was resolved")
            return

        if result.type == "success" and result.url:
            if not self.attempt.mark_parsing_url():
                return
            signal = parse_return_url(result.url)
            if signal.kind == "success":
                logger.info("Payment successful (detected from URL)")
                self.resolve(self.succeeded(signal.payment_id))
                return
            if signal.kind == "cancel":
                logger.info("Payment cancelled (detected from URL)")
                self.resolve(PaymentCancelled())
                return
            logger.info("Browser closed without redirect, checking payment status")
            await self.poll(signal.payment_id)
        elif result.type in ("cancel", "dismiss"):
            # The user may have closed the browser after paying
            logger.info("Browser dismissed, checking payment status")
            await self.poll()
        else:
            logger.info(
                "Unknown browser result type %r, checking payment status", result.type
            )
            await self.poll()

    async def handle_deep_link(self, url: str) -> None:
        signal = parse_return_url(url)
        if signal.kind == "unknown":
            logger.debug("Ignoring deep link without a payment signal: %s", url)
            return

        if signal.kind == "success":
            resolved = self.resolve(self.succeeded(signal.payment_id))
        else:
            resolved = self.resolve(PaymentCancelled())
        if resolved:
            logger.info("Payment %s via deep link", signal.kind)
            if self.on_short_circuit is not None:
                self.on_short_circuit()

    async def poll(self, payment_id_override: Optional[str] = None) -> None:
        """Poll the status endpoint until the payment settles or attempts run out."""
        payment_id = payment_id_override or self.known_payment_id()
        if not payment_id:
            logger.info("No payment ID to check")
            self.resolve(PaymentCancelled())
            return

        if not self.attempt.begin_polling():
            logger.info("Status check already running, skipping")
            return

        try:
            outcome = await self._poll_status(payment_id)
        except Exception:
            logger.exception("Payment status check error")
            outcome = PaymentCancelled()
        if outcome is not None:
            self.resolve(outcome)

    async def _poll_status(self, payment_id: str) -> Optional[PaymentOutcome]:
        logger.info("Checking payment status for: %s", payment_id)
        # Give the provider's notification time to reach the backend
        await self.sleep(self.initial_delay_seconds)

        for number in range(1, self.max_attempts + 1):
            if self.attempt.is_resolved:
                return None
            logger.info(
                "Payment status check attempt %d/%d", number, self.max_attempts
            )
            try:
                status = await self.gateway.get_payment_status(payment_id)
            except PaymentNotFoundError:
                logger.info("Payment not found in status store yet")
            except StatusCheckError as e:
                logger.warning("Payment status check error: %s", e)
            else:
                if status.is_complete:
                    logger.info("Payment verified as complete via status check")
                    return self.succeeded(payment_id)
                if status.is_failed:
                    logger.info("Payment failed")
                    return PaymentCancelled()
                logger.info("Payment still %s", status.status)

            if number < self.max_attempts:
                await self.sleep(self.interval_seconds)

        logger.warning(
            "Payment %s unresolved after %d attempts, treating as cancelled",
            payment_id,
            self.max_attempts,
        )
        return PaymentCancelled()
