"""Return pages the hosted payment page redirects the buyer to."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import PlainTextResponse

from ...infrastructure.linking import DeepLinkRouter
from ..dependencies import get_link_router

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/payment", tags=["payment"])

RETURN_PAGES = {"return", "success", "cancel"}


@router.get("/{page}", response_class=PlainTextResponse)
async def payment_return(
    page: str,
    request: Request,
    link_router: DeepLinkRouter = Depends(get_link_router),
) -> str:
    """Forward the full return URL to the deep-link router."""
    if page not in RETURN_PAGES:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Unknown return page"
        )
    delivered = await link_router.publish(str(request.url))
    if not delivered:
        logger.warning("Return URL received with no active checkout: %s", request.url)
        return "No payment is waiting for this result. You can close this window."
    return "Payment result received. You can close this window and return to the app."
