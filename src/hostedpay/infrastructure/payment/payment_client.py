from __future__ import annotations

import logging
from typing import Optional, Type
from types import TracebackType
from urllib.parse import quote

import httpx
from pydantic import ValidationError as PydanticValidationError

from ...application.dtos import (
    CreatePaymentRequestDTO,
    CreatePaymentResponseDTO,
    PaymentStatusResponseDTO,
)
from ...domain.errors import NetworkError, PaymentNotFoundError, StatusCheckError
from ...middleware.timing import log_timing
from ..http.http_client import AsyncHttpClient

logger = logging.getLogger(__name__)


class AsyncPaymentClient:
    """Asynchronous client for the marketplace payment endpoints.

    Methods are bound to the payment DTOs and translate httpx failures into
    domain errors, so callers never see transport exceptions.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._http = AsyncHttpClient(base_url, timeout=timeout, transport=transport)

    @property
    def base_url(self) -> str:
        return self._http.base_url

    @log_timing("create_payment")
    async def create_payment(
        self, dto: CreatePaymentRequestDTO
    ) -> CreatePaymentResponseDTO:
        try:
            resp = await self._http.post(
                "/payment/create-payment", json=dto.to_payload()
            )
        except httpx.HTTPStatusError as e:
            raise NetworkError(
                f"Failed to create payment (HTTP {e.response.status_code})"
            ) from e
        except httpx.RequestError as e:
            raise NetworkError(
                f"Cannot connect to backend server at {self.base_url}: {e}"
            ) from e

        try:
            return CreatePaymentResponseDTO.model_validate(resp.json())
        except (ValueError, PydanticValidationError) as e:
            raise NetworkError("Invalid payment response") from e

    @log_timing("get_payment_status")
    async def get_payment_status(self, payment_id: str) -> PaymentStatusResponseDTO:
        path = f"/payment/status/{quote(payment_id, safe='')}"
        try:
            resp = await self._http.get(path)
        except httpx.HTTPStatusError as e:
            if e.response.status_code == 404:
                raise PaymentNotFoundError(
                    f"Payment {payment_id} not found in status store"
                ) from e
            raise StatusCheckError(
                f"Status check failed: {e.response.status_code} "
                f"{e.response.reason_phrase}"
            ) from e
        except httpx.RequestError as e:
            raise StatusCheckError(f"Could not reach backend: {e}") from e

        try:
            return PaymentStatusResponseDTO.model_validate(resp.json())
        except (ValueError, PydanticValidationError) as e:
            raise StatusCheckError(f"Invalid status response: {e}") from e

    async def aclose(self) -> None:
        await self._http.aclose()

    async def __aenter__(self) -> "AsyncPaymentClient":
        return self

    async def __aexit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc_value: Optional[BaseException],
        traceback: Optional[TracebackType],
    ) -> None:
        await self.aclose()
