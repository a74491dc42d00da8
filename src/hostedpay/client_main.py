from __future__ import annotations

import argparse
import asyncio
import logging
import sys
import threading
from decimal import Decimal
from typing import List, Optional

import uvicorn
from pydantic import ValidationError as PydanticValidationError

from hostedpay.api.return_app import create_app
from hostedpay.application.callbacks import PaymentCallbacks
from hostedpay.application.checkout import Checkout
from hostedpay.domain.entities import (
    PaymentCancelled,
    PaymentFailed,
    PaymentOutcome,
    PaymentRequest,
    PaymentSucceeded,
)
from hostedpay.envs.client_env import Settings, get_settings
from hostedpay.infrastructure.browser.system_browser import SystemBrowserSession
from hostedpay.infrastructure.linking import DeepLinkRouter
from hostedpay.infrastructure.payment.payment_client import AsyncPaymentClient

logger = logging.getLogger(__name__)

EXIT_SUCCESS = 0
EXIT_CANCELLED = 1
EXIT_ERROR = 2


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hostedpay-checkout",
        description="Pay for a marketplace listing through the hosted payment page.",
    )
    parser.add_argument("--amount", type=Decimal, required=True)
    parser.add_argument("--item-name", required=True)
    parser.add_argument("--item-description")
    parser.add_argument("--listing-id", required=True)
    parser.add_argument("--buyer-id", required=True)
    parser.add_argument("--seller-id", required=True)
    parser.add_argument("--email", required=True, help="Buyer email address")
    parser.add_argument("--first-name")
    parser.add_argument("--last-name")
    parser.add_argument("--cell-number")
    parser.add_argument(
        "--return-port",
        type=int,
        help="Serve the return pages on this local port (overrides HOSTEDPAY_RETURN_PORT)",
    )
    parser.add_argument(
        "--paste-return-url",
        action="store_true",
        help="Read return URLs pasted on stdin",
    )
    return parser


def request_from_args(
    args: argparse.Namespace, callback_base_url: Optional[str]
) -> PaymentRequest:
    return PaymentRequest(
        amount=args.amount,
        item_name=args.item_name,
        item_description=args.item_description,
        buyer_id=args.buyer_id,
        buyer_email=args.email,
        buyer_first_name=args.first_name,
        buyer_last_name=args.last_name,
        cell_number=args.cell_number,
        seller_id=args.seller_id,
        listing_id=args.listing_id,
        callback_base_url=callback_base_url,
    )


def print_callbacks() -> PaymentCallbacks:
    def on_success(result: PaymentSucceeded) -> None:
        print(
            f"Payment successful: R{result.amount:.2f} for {result.item_name} "
            f"(payment id {result.payment_id})"
        )

    def on_cancel() -> None:
        print("Payment was not completed.")

    def on_error(message: str) -> None:
        print(f"Payment error: {message}", file=sys.stderr)

    return PaymentCallbacks(on_success=on_success, on_cancel=on_cancel, on_error=on_error)


def describe_invalid_args(error: PydanticValidationError) -> str:
    problems = []
    for detail in error.errors():
        field = ".".join(str(part) for part in detail["loc"])
        problems.append(f"{field}: {detail['msg']}")
    return "; ".join(problems)


def exit_code_for(outcome: PaymentOutcome) -> int:
    if isinstance(outcome, PaymentSucceeded):
        return EXIT_SUCCESS
    if isinstance(outcome, PaymentCancelled):
        return EXIT_CANCELLED
    if isinstance(outcome, PaymentFailed):
        return EXIT_ERROR
    raise TypeError(f"Unknown outcome: {outcome!r}")


def start_paste_relay(
    links: DeepLinkRouter, loop: asyncio.AbstractEventLoop
) -> threading.Thread:
    """Publish every non-empty line from stdin on the event loop.

    Runs on a daemon thread so a blocked read never holds up shutdown.
    """

    def pump() -> None:
        for line in sys.stdin:
            url = line.strip()
            if not url:
                continue
            try:
                asyncio.run_coroutine_threadsafe(links.publish(url), loop)
            except RuntimeError:
                return  # loop closed

    thread = threading.Thread(target=pump, name="paste-relay", daemon=True)
    thread.start()
    return thread


async def run(args: argparse.Namespace, settings: Settings) -> int:
    links = DeepLinkRouter()
    background: List["asyncio.Task[None]"] = []
    server: Optional[uvicorn.Server] = None

    return_port = args.return_port or settings.return_port
    callback_base_url = None
    if return_port:
        callback_base_url = f"http://{settings.return_host}:{return_port}"

    try:
        request = request_from_args(args, callback_base_url)
    except PydanticValidationError as e:
        print(f"Invalid payment details: {describe_invalid_args(e)}", file=sys.stderr)
        return EXIT_ERROR

    if callback_base_url:
        server = uvicorn.Server(
            uvicorn.Config(
                create_app(links),
                host=settings.return_host,
                port=return_port,
                log_level="warning",
            )
        )
        background.append(asyncio.create_task(server.serve()))
        print(f"Return listener available at: {callback_base_url}")

    if args.paste_return_url:
        print("Paste the return URL here if the browser does not come back on its own.")
        start_paste_relay(links, asyncio.get_running_loop())

    browser = SystemBrowserSession(
        links,
        timeout=settings.browser_timeout_seconds,
        return_prefixes=(callback_base_url,) if callback_base_url else (),
    )
    try:
        async with AsyncPaymentClient(
            settings.backend_base_url, timeout=settings.http_timeout_seconds
        ) as gateway:
            checkout = Checkout(gateway, browser, settings, links=links)
            outcome = await checkout.start(request, print_callbacks())
    finally:
        if server is not None:
            server.should_exit = True
        await asyncio.gather(*background, return_exceptions=True)

    return exit_code_for(outcome)


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    settings = get_settings()
    configure_logging(settings.log_level)
    logger.info("Using backend URL: %s", settings.backend_base_url)
    return asyncio.run(run(args, settings))


if __name__ == "__main__":
    sys.exit(main())
