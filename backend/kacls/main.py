"""KACLS API: FastAPI application factory and process entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Settings built once at process entry and passed in; never read ad hoc from env
    - Missing KMS_KEY_RESOURCE stops the process before it listens (exit status 1)
    - The CORS gate wraps every route; global error handlers map KaclsError to JSON

Design Decisions:
    - create_app(settings, gateway) factory: tests inject a fake gateway, production
      lets the lifespan build the Cloud KMS client inside the running event loop
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
"""

import logging
import sys
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from kacls.api.cors import PreflightCORSMiddleware
from kacls.api.error_handlers import register_error_handlers
from kacls.api.routes import discovery, key_wrapping
from kacls.config import Settings, get_settings
from kacls.core.boundary_protocols import KeyManagementGateway
from kacls.core.domain_types import KeyResource
from kacls.core.errors import ConfigurationError
from kacls.core.key_access_protocol import PROTOCOL_VERSION
from kacls.infrastructure.kms_gateway import CloudKmsGateway
from kacls.infrastructure.observability import setup_logging
from kacls.services.key_wrapping import KeyWrappingService

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings: Settings = app.state.settings
    owns_gateway = app.state.gateway is None
    if owns_gateway:
        app.state.gateway = CloudKmsGateway(
            timeout_seconds=settings.kms_timeout_seconds,
        )
        app.state.key_wrapping = KeyWrappingService(
            app.state.gateway, KeyResource(settings.kms_key_resource),
        )
    logger.warning(
        "Caller authentication is not enforced: add JWT verification before production use",
    )
    logger.info(
        "KACLS API started",
        extra={"key_resource": settings.kms_key_resource},
    )
    yield
    logger.info("KACLS API shutting down")
    if owns_gateway:
        await app.state.gateway.aclose()


def create_app(
    settings: Settings, gateway: KeyManagementGateway | None = None,
) -> FastAPI:
    """Build the application for one immutable Settings value."""
    app = FastAPI(title="KACLS API", version=PROTOCOL_VERSION, lifespan=lifespan)
    app.state.settings = settings
    app.state.gateway = gateway
    app.state.key_wrapping = (
        KeyWrappingService(gateway, KeyResource(settings.kms_key_resource))
        if gateway is not None else None
    )

    app.add_middleware(
        PreflightCORSMiddleware, default_origin=settings.cors_default_origin,
    )

    # Routes: explicit registration
    app.include_router(discovery.router)
    app.include_router(key_wrapping.router)

    register_error_handlers(app)
    return app


def main() -> None:
    """Console entry point: validate configuration, then serve."""
    try:
        settings = get_settings()
    except ConfigurationError as e:
        setup_logging()
        logger.critical(f"FATAL: {e.message}", extra={"error_code": e.code})
        sys.exit(1)

    setup_logging(settings.log_level, settings.log_format)
    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_config=None,
    )


if __name__ == "__main__":
    main()
