import pytest

from hostedpay.application.callbacks import PaymentCallbacks
from hostedpay.application.dtos import CreatePaymentResponseDTO
from hostedpay.domain.entities import PaymentFailed, PaymentRequest
from hostedpay.domain.errors import NetworkError
from tests.fixtures.fake_browser import FakeBrowserSession
from tests.fixtures.fake_gateway import FakePaymentGateway
from tests.fixtures.recording_callbacks import RecordingCallbacks


@pytest.mark.asyncio
async def test_missing_ids_report_error_without_network(
    make_checkout, payment_request, callbacks
) -> None:
    gateway = FakePaymentGateway()
    browser = FakeBrowserSession()
    checkout = make_checkout(gateway, browser)
    request = payment_request.model_copy(update={"seller_id": None})

    outcome = await checkout.start(request, callbacks)

    assert isinstance(outcome, PaymentFailed)
    assert "sellerId" in outcome.message
    assert callbacks.kinds == ["error"]
    assert gateway.create_calls == []
    assert browser.opened == []


@pytest.mark.asyncio
async def test_placeholder_email_reports_error(
    make_checkout, payment_request, callbacks
) -> None:
    gateway = FakePaymentGateway()
    checkout = make_checkout(gateway)
    request = PaymentRequest(
        amount=payment_request.amount,
        item_name=payment_request.item_name,
        buyer_id=payment_request.buyer_id,
        buyer_email="user@example.com",
        seller_id=payment_request.seller_id,
        listing_id=payment_request.listing_id,
    )

    outcome = await checkout.start(request, callbacks)

    assert isinstance(outcome, PaymentFailed)
    assert "email" in outcome.message
    assert gateway.create_calls == []


@pytest.mark.asyncio
async def test_backend_rejection_reports_error_and_allows_retry(
    make_checkout, payment_request, callbacks
) -> None:
    gateway = FakePaymentGateway(create_error=NetworkError("Failed to create payment"))
    checkout = make_checkout(gateway)

    outcome = await checkout.start(payment_request, callbacks)

    assert isinstance(outcome, PaymentFailed)
    assert outcome.message.startswith("Failed to initialize payment")
    assert callbacks.kinds == ["error"]

    # Manual retry is a fresh attempt
    gateway.create_error = None
    gateway.statuses = ["complete"]
    retry_callbacks = RecordingCallbacks()
    await checkout.start(payment_request, retry_callbacks)

    assert retry_callbacks.kinds == ["success"]
    assert len(gateway.create_calls) == 2


@pytest.mark.asyncio
async def test_invalid_create_response_reports_error(
    make_checkout, payment_request, callbacks
) -> None:
    gateway = FakePaymentGateway(
        create_response=CreatePaymentResponseDTO(success=True, payment_url=None)
    )
    browser = FakeBrowserSession()
    checkout = make_checkout(gateway, browser)

    outcome = await checkout.start(payment_request, callbacks)

    assert isinstance(outcome, PaymentFailed)
    assert browser.opened == []


@pytest.mark.asyncio
async def test_browser_that_cannot_open_reports_error(
    make_checkout, payment_request, callbacks
) -> None:
    browser = FakeBrowserSession(open_error=OSError("no browser"))
    checkout = make_checkout(FakePaymentGateway(), browser)

    outcome = await checkout.start(payment_request, callbacks)

    assert outcome == PaymentFailed(
        message="Failed to open payment page. Please try again."
    )
    assert callbacks.kinds == ["error"]


@pytest.mark.asyncio
async def test_raising_callback_does_not_break_checkout(
    make_checkout, payment_request
) -> None:
    def explode(_result) -> None:
        raise RuntimeError("UI already torn down")

    checkout = make_checkout(
        FakePaymentGateway(statuses=["complete"]), FakeBrowserSession()
    )

    outcome = await checkout.start(
        payment_request, PaymentCallbacks(on_success=explode)
    )

    assert outcome.payment_id == "pay_123"
