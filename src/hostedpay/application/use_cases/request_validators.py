"""Pure validation and redaction helpers for payment requests."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from ...domain.entities import PaymentRequest
from ...domain.errors import ValidationError


def find_missing_identity_fields(request: PaymentRequest) -> List[str]:
    """Return the wire names of the required ids that are absent or empty."""
    missing = []
    if not request.buyer_id:
        missing.append("buyerId")
    if not request.seller_id:
        missing.append("sellerId")
    if not request.listing_id:
        missing.append("listingId")
    return missing


def validate_payment_request(request: PaymentRequest, placeholder_email: str) -> None:
    """Reject a request that cannot be sent to the backend.

    Raises:
        ValidationError: If a required id is missing, or the buyer email is
            missing or still the placeholder value.
    """
    missing = find_missing_identity_fields(request)
    if missing:
        raise ValidationError(
            f"Missing payment information: {', '.join(missing)}. "
            "Please refresh and try again.",
            missing=tuple(missing),
        )

    email = request.buyer_email
    if not email or email.lower() == placeholder_email.lower():
        raise ValidationError(
            "User email is required for payment. Please ensure you are logged in.",
            missing=("userEmail",),
        )


def mask_email(email: Optional[str]) -> Optional[str]:
    if not email:
        return email
    local, _, domain = email.partition("@")
    if not domain:
        return "***"
    return f"{local[:1]}***@{domain}"


def mask_identifier(value: Any) -> Optional[str]:
    if value is None or value == "":
        return None
    text = str(value)
    if len(text) <= 4:
        return "***"
    return f"***{text[-4:]}"


def describe_request(
    request: PaymentRequest, *, include_identity: bool = False
) -> Dict[str, Any]:
    """Build the log-safe shape of an outbound request."""
    shape: Dict[str, Any] = {
        "amount": str(request.amount),
        "itemName": request.item_name,
        "listingId": request.listing_id,
        "buyerIdType": type(request.buyer_id).__name__,
        "sellerIdType": type(request.seller_id).__name__,
        "listingIdType": type(request.listing_id).__name__,
    }
    if include_identity:
        shape["buyerId"] = request.buyer_id
        shape["sellerId"] = request.seller_id
        shape["userEmail"] = request.buyer_email
    else:
        shape["buyerId"] = mask_identifier(request.buyer_id)
        shape["sellerId"] = mask_identifier(request.seller_id)
        shape["userEmail"] = mask_email(request.buyer_email)
    return shape
