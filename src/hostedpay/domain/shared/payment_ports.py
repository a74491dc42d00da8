"""Protocol interfaces for the collaborators of the payment flow.

These protocols define the contracts the flow depends on. They enable
dependency injection and make the flow testable without a backend, a
browser or real timers.
"""

from __future__ import annotations

from typing import Awaitable, Callable, Optional, Protocol, Type, TYPE_CHECKING
from types import TracebackType

if TYPE_CHECKING:
    # Avoid circular imports by only importing types during type checking
    from ...application.dtos import (
        CreatePaymentRequestDTO,
        CreatePaymentResponseDTO,
        PaymentStatusResponseDTO,
    )
    from ..entities import BrowserResult


# Coroutine function used for every delay in the flow (``asyncio.sleep`` in
# production, a fake clock in tests).
Sleep = Callable[[float], Awaitable[None]]


class PaymentGatewayProtocol(Protocol):
    """Backend endpoints consumed by the payment flow."""

    async def create_payment(
        self, dto: "CreatePaymentRequestDTO"
    ) -> "CreatePaymentResponseDTO":
        """Submit a payment creation request.

        Raises:
            NetworkError: If the call fails or returns a non-success status.
        """
        ...

    async def get_payment_status(
        self, payment_id: str
    ) -> "PaymentStatusResponseDTO":
        """Fetch the backend's view of a payment.

        Raises:
            PaymentNotFoundError: If the backend has no record yet (HTTP 404).
            StatusCheckError: On any other failure.
        """
        ...

    async def aclose(self) -> None: ...

    async def __aenter__(self) -> "PaymentGatewayProtocol": ...

    async def __aexit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc_val: Optional[BaseException],
        exc_tb: Optional[TracebackType],
    ) -> None: ...


class BrowserSessionProtocol(Protocol):
    """An external, authenticated browsing session on the hosted page."""

    async def open(self, url: str, return_scheme: str) -> "BrowserResult":
        """Open ``url`` and wait until the session reaches a terminal state."""
        ...

    def dismiss(self) -> None:
        """Close the session if it is still open. Safe to call at any time."""
        ...
