"""FastAPI dependencies for the return listener."""

from __future__ import annotations

from fastapi import Request

from ..infrastructure.linking import DeepLinkRouter


def get_link_router(request: Request) -> DeepLinkRouter:
    """Get the deep-link router the app was created with."""
    return request.app.state.link_router
