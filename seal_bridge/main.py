"""
Superfiliate -> Seal bridge - FastAPI applications

Two deployable services share one Seal client:
- the webhook bridge (``bridge_app``) applies Superfiliate reward codes,
- the proxy API (``proxy_app``) exposes authenticated subscription reads/updates.
"""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse

from seal_bridge import __version__
from seal_bridge.api.dependencies import require_bridge_bearer
from seal_bridge.api.routes import health, subscriptions, webhooks
from seal_bridge.config import Settings, get_settings
from seal_bridge.core.exceptions import ConfigurationError, UnauthorizedError, ValidationError
from seal_bridge.core.logging import configure_logging
from seal_bridge.integrations.seal import MISSING_TOKEN_MESSAGE, SealClient

logger = logging.getLogger(__name__)


def _lifespan(service_name: str):
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Configure logging and check the Seal credential on startup."""
        settings: Settings = app.state.settings
        configure_logging(settings.log_level, service_name=service_name, json_output=settings.log_json)

        if settings.seal_token_configured:
            logger.info("SEAL_MERCHANT_TOKEN is configured")
        elif settings.seal_token_required:
            logger.critical(MISSING_TOKEN_MESSAGE)
            raise ConfigurationError(MISSING_TOKEN_MESSAGE)
        else:
            logger.warning(
                "SEAL_MERCHANT_TOKEN not found. The server will start, but Seal API calls will fail until it is set."
            )

        logger.info("Starting %s (%s) on %s environment", settings.app_name, service_name, settings.app_env)
        yield
        logger.info("Shutting down %s (%s)", settings.app_name, service_name)

    return lifespan


def _build_app(service_name: str, settings: Settings | None, seal_client: SealClient | None) -> FastAPI:
    settings = settings or get_settings()
    app = FastAPI(
        title=f"{settings.app_name} ({service_name})",
        version=__version__,
        lifespan=_lifespan(service_name),
    )
    app.state.settings = settings
    app.state.seal_client = seal_client or SealClient(settings)
    app.include_router(health.router, tags=["Health"])
    return app


def create_bridge_app(settings: Settings | None = None, seal_client: SealClient | None = None) -> FastAPI:
    app = _build_app("bridge", settings, seal_client)
    app.include_router(webhooks.router, prefix="/webhooks", tags=["Webhooks"])
    return app


def create_proxy_app(settings: Settings | None = None, seal_client: SealClient | None = None) -> FastAPI:
    app = _build_app("proxy", settings, seal_client)

    @app.exception_handler(UnauthorizedError)
    async def unauthorized_handler(request: Request, exc: UnauthorizedError) -> JSONResponse:
        logger.warning("Rejected proxy request to %s: %s", request.url.path, exc)
        return JSONResponse(status_code=401, content={"error": "Unauthorized"})

    @app.exception_handler(ValidationError)
    async def validation_handler(request: Request, exc: ValidationError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"error": str(exc)})

    app.include_router(
        subscriptions.router,
        prefix="/api",
        tags=["Subscriptions"],
        dependencies=[Depends(require_bridge_bearer)],
    )
    return app


bridge_app = create_bridge_app()
proxy_app = create_proxy_app()
