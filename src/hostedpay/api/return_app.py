"""FastAPI application serving the local payment return pages."""

from __future__ import annotations

from fastapi import FastAPI

from ..infrastructure.linking import DeepLinkRouter
from .routers import payment_return


def create_app(link_router: DeepLinkRouter) -> FastAPI:
    """Create the return listener bound to ``link_router``."""
    app = FastAPI(
        title="hostedpay return listener",
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.link_router = link_router
    app.include_router(payment_return.router)

    @app.get("/health")
    async def health_check() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "healthy", "service": "hostedpay return listener"}

    return app
