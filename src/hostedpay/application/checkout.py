"""Checkout: one hosted payment attempt from request to outcome."""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from ..domain.attempt import PaymentAttempt
from ..domain.entities import PaymentFailed, PaymentOutcome, PaymentRequest
from ..domain.errors import NetworkError, ValidationError
from ..domain.shared import BrowserSessionProtocol, PaymentGatewayProtocol, Sleep
from ..envs.client_env import Settings
from ..infrastructure.linking import DeepLinkRouter
from .callbacks import PaymentCallbacks
from .use_cases.initiator import PaymentInitiator
from .use_cases.opener import ExternalSessionOpener
from .use_cases.reconciler import OutcomeReconciler

logger = logging.getLogger(__name__)

OPEN_FAILED_MESSAGE = "Failed to open payment page. Please try again."
UNEXPECTED_FAILURE_MESSAGE = "Payment could not be completed. Please try again."


class Checkout:
    """Runs payment attempts: initiate, hand off to the browser, reconcile.

    Every call to ``start`` is an independent attempt with its own
    ``PaymentAttempt`` context; retrying after an error means calling
    ``start`` again. Deep links published on ``links`` while an attempt is
    running reach that attempt's reconciler.
    """

    def __init__(
        self,
        gateway: PaymentGatewayProtocol,
        browser: BrowserSessionProtocol,
        settings: Settings,
        *,
        links: Optional[DeepLinkRouter] = None,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self.gateway = gateway
        self.browser = browser
        self.settings = settings
        self.links = links if links is not None else DeepLinkRouter()
        self.sleep = sleep
        self.initiator = PaymentInitiator(
            gateway,
            settings.backend_base_url,
            placeholder_email=settings.placeholder_email,
            log_identity_fields=settings.log_identity_fields,
        )
        self.opener = ExternalSessionOpener(browser, settings.return_scheme)

    def reconciler_for(
        self,
        attempt: PaymentAttempt,
        request: PaymentRequest,
        callbacks: PaymentCallbacks,
    ) -> OutcomeReconciler:
        return OutcomeReconciler(
            self.gateway,
            attempt,
            request,
            callbacks,
            max_attempts=self.settings.poll_max_attempts,
            interval_seconds=self.settings.poll_interval_seconds,
            initial_delay_seconds=self.settings.poll_initial_delay_seconds,
            sleep=self.sleep,
            on_short_circuit=self.opener.dismiss,
        )

    async def start(
        self,
        request: PaymentRequest,
        callbacks: Optional[PaymentCallbacks] = None,
    ) -> PaymentOutcome:
        """Run one attempt and return its outcome.

        Exactly one of the callbacks fires. Flow failures never raise; they
        are delivered as ``PaymentFailed`` or ``PaymentCancelled``.
        """
        callbacks = callbacks or PaymentCallbacks()
        attempt = PaymentAttempt()
        reconciler = self.reconciler_for(attempt, request, callbacks)
        subscription = self.links.add_listener(reconciler.handle_deep_link)
        try:
            await self._run(request, attempt, reconciler)
        except Exception:
            logger.exception("Unexpected checkout failure")
            reconciler.resolve(PaymentFailed(message=UNEXPECTED_FAILURE_MESSAGE))
        finally:
            subscription.remove()
        return await attempt.wait_resolved()

    async def _run(
        self,
        request: PaymentRequest,
        attempt: PaymentAttempt,
        reconciler: OutcomeReconciler,
    ) -> None:
        try:
            session = await self.initiator.create_payment(request, attempt)
        except ValidationError as e:
            reconciler.resolve(PaymentFailed(message=str(e)))
            return
        except NetworkError as e:
            logger.error("Payment creation error: %s", e)
            reconciler.resolve(
                PaymentFailed(
                    message=f"Failed to initialize payment. Please try again. ({e})"
                )
            )
            return

        if attempt.is_resolved:
            # A return link arrived while the payment was being created
            logger.info("Attempt resolved before the payment page was opened")
            return

        try:
            result = await self.opener.open(session.payment_url, attempt)
        except Exception:
            logger.exception("Browser open error")
            reconciler.resolve(PaymentFailed(message=OPEN_FAILED_MESSAGE))
            return

        await reconciler.handle_browser_result(result)
