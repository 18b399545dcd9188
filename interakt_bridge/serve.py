"""FastAPI application assembly and process entry point.

``app`` is the module-level ASGI app for external hosts (APP_ENV=production).
``main()`` binds a socket with uvicorn for local runs.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from interakt_bridge.clients.interakt import InteraktClient
from interakt_bridge.clients.razorpay import RazorpayClient
from interakt_bridge.config import Settings, get_settings
from interakt_bridge.webhooks.handlers import WebhookOrchestrator, register_webhook_routes

logger = logging.getLogger(__name__)


def build_orchestrator(settings: Settings, http: httpx.AsyncClient) -> WebhookOrchestrator:
    """Wire the Razorpay and Interakt clients into a WebhookOrchestrator."""
    razorpay = RazorpayClient(
        http,
        key_id=settings.razorpay_key_id,
        key_secret=settings.razorpay_key_secret,
        base_url=settings.razorpay_base_url,
    )
    interakt = InteraktClient(
        http,
        api_key=settings.interakt_api_key,
        workspace_id=settings.interakt_workspace_id,
        base_url=settings.interakt_base_url,
        country_code=settings.default_country_code,
    )
    return WebhookOrchestrator(
        webhook_secret=settings.webhook_secret,
        order_lookup=razorpay,
        messaging=interakt,
    )


def create_app(
    settings: Settings | None = None,
    orchestrator: WebhookOrchestrator | None = None,
) -> FastAPI:
    """Build the FastAPI app.

    When ``orchestrator`` is not given, one shared httpx.AsyncClient (bounded
    per-call timeout) is created here and closed on shutdown.
    """
    settings = settings or get_settings()
    http: httpx.AsyncClient | None = None
    if orchestrator is None:
        http = httpx.AsyncClient(timeout=settings.http_timeout_seconds)
        orchestrator = build_orchestrator(settings, http)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        if http is not None:
            await http.aclose()

    app = FastAPI(title="Razorpay to Interakt Webhook Server", lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/")
    async def root():
        return {"message": "Razorpay to Interakt Webhook Server is running"}

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    register_webhook_routes(app, orchestrator)
    return app


app = create_app()


def main() -> None:
    import uvicorn

    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    if not settings.binds_socket:
        logger.info("APP_ENV=production; serve interakt_bridge.serve:app from the ASGI host")
        return
    logger.info("Server running on port %d", settings.port)
    uvicorn.run(app, host="0.0.0.0", port=settings.port)


if __name__ == "__main__":
    main()
