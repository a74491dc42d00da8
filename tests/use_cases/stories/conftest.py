"""Fixtures for checkout stories."""

from __future__ import annotations

from typing import Optional

import pytest

from hostedpay.application.checkout import Checkout
from hostedpay.envs.client_env import Settings
from hostedpay.infrastructure.linking import DeepLinkRouter
from tests.fixtures.fake_browser import FakeBrowserSession
from tests.fixtures.fake_clock import FakeClock
from tests.fixtures.fake_gateway import FakePaymentGateway


@pytest.fixture
def make_checkout(settings: Settings, links: DeepLinkRouter, fake_clock: FakeClock):
    """Build a Checkout wired to fakes and the shared deep-link router."""

    def _make(
        gateway: FakePaymentGateway,
        browser: Optional[FakeBrowserSession] = None,
    ) -> Checkout:
        return Checkout(
            gateway,
            browser or FakeBrowserSession(),
            settings,
            links=links,
            sleep=fake_clock.sleep,
        )

    return _make
