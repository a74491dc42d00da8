"""Tests for AsyncPaymentClient against a mocked transport."""

from __future__ import annotations

import json
from decimal import Decimal

import httpx
import pytest

from hostedpay.application.dtos import CreatePaymentRequestDTO
from hostedpay.domain.errors import NetworkError, PaymentNotFoundError, StatusCheckError
from hostedpay.infrastructure.payment.payment_client import AsyncPaymentClient

BASE_URL = "http://backend.test:3050/"


def make_dto() -> CreatePaymentRequestDTO:
    return CreatePaymentRequestDTO(
        amount=Decimal("150.00"),
        item_name="Charizard Base Set Holo",
        item_description="Near mint",
        user_email="thandi@cards.co.za",
        user_name_first="Thandi",
        user_name_last="Mokoena",
        cell_number="",
        listing_id=42,
        buyer_id="usr_buyer_0001",
        seller_id="usr_seller_0002",
        backend_url="http://backend.test:3050",
    )


def client_for(handler) -> AsyncPaymentClient:
    return AsyncPaymentClient(BASE_URL, transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_create_payment_posts_camel_case_body() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(
            200,
            json={
                "success": True,
                "paymentUrl": "https://sandbox.payfast.co.za/eng/process?id=abc",
                "mPaymentId": 98765,
            },
        )

    async with client_for(handler) as client:
        response = await client.create_payment(make_dto())

    assert response.success is True
    assert response.payment_url == "https://sandbox.payfast.co.za/eng/process?id=abc"
    assert response.m_payment_id == "98765"

    request = seen[0]
    assert request.method == "POST"
    assert str(request.url) == "http://backend.test:3050/payment/create-payment"
    body = json.loads(request.content)
    assert body["amount"] == 150.0
    assert body["itemName"] == "Charizard Base Set Holo"
    assert body["userEmail"] == "thandi@cards.co.za"
    assert body["listingId"] == 42
    assert body["backendUrl"] == "http://backend.test:3050"


@pytest.mark.asyncio
async def test_create_payment_http_error_is_network_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, json={"error": "boom"})

    async with client_for(handler) as client:
        with pytest.raises(NetworkError, match="HTTP 500"):
            await client.create_payment(make_dto())


@pytest.mark.asyncio
async def test_create_payment_connection_error_is_network_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    async with client_for(handler) as client:
        with pytest.raises(NetworkError, match="Cannot connect to backend server"):
            await client.create_payment(make_dto())


@pytest.mark.asyncio
async def test_create_payment_non_json_body_is_network_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<html>proxy error</html>")

    async with client_for(handler) as client:
        with pytest.raises(NetworkError, match="Invalid payment response"):
            await client.create_payment(make_dto())


@pytest.mark.asyncio
async def test_get_payment_status() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/payment/status/pay_123"
        return httpx.Response(200, json={"status": "complete"})

    async with client_for(handler) as client:
        status = await client.get_payment_status("pay_123")

    assert status.is_complete


@pytest.mark.asyncio
async def test_get_payment_status_404_is_not_found() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(404, json={"error": "not found"})

    async with client_for(handler) as client:
        with pytest.raises(PaymentNotFoundError):
            await client.get_payment_status("pay_123")


@pytest.mark.asyncio
async def test_get_payment_status_other_errors_are_status_check_errors() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path.endswith("/down"):
            raise httpx.ReadTimeout("timed out", request=request)
        return httpx.Response(503)

    async with client_for(handler) as client:
        with pytest.raises(StatusCheckError, match="503"):
            await client.get_payment_status("pay_123")
        with pytest.raises(StatusCheckError, match="Could not reach backend"):
            await client.get_payment_status("down")


@pytest.mark.asyncio
async def test_get_payment_status_escapes_payment_id() -> None:
    seen: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request.url.raw_path.decode())
        return httpx.Response(200, json={"status": "pending"})

    async with client_for(handler) as client:
        await client.get_payment_status("a/b c")

    assert seen == ["/payment/status/a%2Fb%20c"]
