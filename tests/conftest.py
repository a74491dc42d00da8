"""Shared pytest fixtures for checkout tests."""

from __future__ import annotations

from decimal import Decimal

import pytest

from hostedpay.domain.attempt import PaymentAttempt
from hostedpay.domain.entities import PaymentRequest
from hostedpay.envs.client_env import Settings
from hostedpay.infrastructure.linking import DeepLinkRouter
from tests.fixtures.fake_clock import FakeClock
from tests.fixtures.fake_gateway import FakePaymentGateway
from tests.fixtures.recording_callbacks import RecordingCallbacks


@pytest.fixture
def settings() -> Settings:
    """Settings with the production polling policy."""
    return Settings(backend_base_url="http://backend.test:3050")


@pytest.fixture
def payment_request() -> PaymentRequest:
    """A request that passes client-side validation."""
    return PaymentRequest(
        amount=Decimal("150.00"),
        item_name="Charizard Base Set Holo",
        item_description="Near mint, PSA 9",
        buyer_id="usr_buyer_0001",
        buyer_email="thandi@cards.co.za",
        buyer_first_name="Thandi",
        buyer_last_name="Mokoena",
        seller_id="usr_seller_0002",
        listing_id=42,
    )


@pytest.fixture
def attempt() -> PaymentAttempt:
    return PaymentAttempt()


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def gateway() -> FakePaymentGateway:
    return FakePaymentGateway()


@pytest.fixture
def callbacks() -> RecordingCallbacks:
    return RecordingCallbacks()


@pytest.fixture
def links() -> DeepLinkRouter:
    return DeepLinkRouter()
