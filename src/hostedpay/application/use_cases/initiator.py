"""Payment initiation: validate, then ask the backend for a hosted payment."""

from __future__ import annotations

import logging
from typing import Optional

from ...domain.attempt import PaymentAttempt
from ...domain.entities import PaymentRequest, PaymentSession
from ...domain.errors import NetworkError, ValidationError
from ...domain.shared import PaymentGatewayProtocol
from ..dtos import CreatePaymentRequestDTO
from .request_validators import describe_request, validate_payment_request

logger = logging.getLogger(__name__)


class PaymentInitiator:
    """Builds and submits payment creation requests."""

    def __init__(
        self,
        gateway: PaymentGatewayProtocol,
        backend_base_url: str,
        *,
        placeholder_email: str = "user@example.com",
        log_identity_fields: bool = False,
    ) -> None:
        self.gateway = gateway
        self.backend_base_url = backend_base_url
        self.placeholder_email = placeholder_email
        self.log_identity_fields = log_identity_fields

    def build_request_dto(self, request: PaymentRequest) -> CreatePaymentRequestDTO:
        # Only called after validation, so ids and email are present
        return CreatePaymentRequestDTO(
            amount=request.amount,
            item_name=request.item_name,
            item_description=request.item_description or request.item_name,
            user_email=str(request.buyer_email),
            user_name_first=request.buyer_first_name or "User",
            user_name_last=request.buyer_last_name or "",
            cell_number=request.cell_number or "",
            listing_id=request.listing_id,
            buyer_id=request.buyer_id,
            seller_id=request.seller_id,
            backend_url=request.callback_base_url or self.backend_base_url,
        )

    async def create_payment(
        self, request: PaymentRequest, attempt: Optional[PaymentAttempt] = None
    ) -> PaymentSession:
        """Create a payment on the backend.

        On success the returned payment id is written to the attempt's durable
        slot so later reconciliation can find it.

        Raises:
            ValidationError: Required identity fields are missing. No request
                is sent.
            NetworkError: The backend call failed or did not report success.
        """
        logger.info(
            "Creating payment with data: %s",
            describe_request(request, include_identity=self.log_identity_fields),
        )
        try:
            validate_payment_request(request, self.placeholder_email)
        except ValidationError as e:
            logger.error("Rejected payment request: %s", e)
            raise

        dto = self.build_request_dto(request)
        logger.debug("Using backend URL: %s", dto.backend_url)

        response = await self.gateway.create_payment(dto)
        if not (response.success and response.payment_url):
            raise NetworkError("Invalid payment response")

        session = PaymentSession(
            payment_url=response.payment_url, payment_id=response.m_payment_id
        )
        if attempt is not None:
            attempt.attach_session(session)
        logger.info("Payment created, payment id: %s", session.payment_id)
        return session
