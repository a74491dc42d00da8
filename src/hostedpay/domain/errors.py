"""Domain-specific exceptions."""

from __future__ import annotations


class PaymentError(Exception):
    """Base class for every error raised by the payment flow."""


class ValidationError(PaymentError):
    """Raised when a payment request is missing required identity fields.

    Always raised before any network call is made.
    """

    def __init__(self, message: str, missing: tuple[str, ...] = ()) -> None:
        super().__init__(message)
        self.missing = missing


class NetworkError(PaymentError):
    """Raised when the backend does not accept a payment creation request."""


class PaymentNotFoundError(PaymentError):
    """Raised when the status endpoint has no record of the payment yet."""


class StatusCheckError(PaymentError):
    """Raised when a status check fails for any reason other than a 404."""


class PaymentIdAlreadySetError(PaymentError):
    """Raised when the durable payment id slot is written a second time."""
