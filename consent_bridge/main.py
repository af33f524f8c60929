"""
FastAPI application entrypoint for the Shopify consent bridge.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from consent_bridge.api.routes import CONSENT_BATCH_PATH
from consent_bridge.api.routes import router as api_router
from consent_bridge.core.config import get_settings
from consent_bridge.core.errors import ConsentBridgeError, InvalidInputShape
from consent_bridge.core.logging import configure_logging

logger = logging.getLogger(__name__)


async def consent_bridge_error_handler(
    request: Request, exc: ConsentBridgeError
) -> JSONResponse:
    """Render domain errors as ``{"message", "error"}`` with their status code."""
    logger.info(
        "%s %s failed with %s (%d)",
        request.method,
        request.url.path,
        exc.__class__.__name__,
        exc.status_code,
    )
    return JSONResponse(status_code=int(exc.status_code), content=exc.to_payload())


async def batch_body_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Answer an unparseable consent batch body with 400, like any other shape error."""
    if request.method == "POST" and request.url.path == CONSENT_BATCH_PATH:
        return await consent_bridge_error_handler(
            request, InvalidInputShape("Input must be an array of objects.")
        )
    return await request_validation_exception_handler(request, exc)


def create_app() -> FastAPI:
    """Factory for the FastAPI application."""
    settings = get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="Shopify Consent Bridge",
        version="0.1.0",
        description="Authorize against a Shopify store and manage customer marketing consent.",
    )
    app.add_exception_handler(ConsentBridgeError, consent_bridge_error_handler)
    app.add_exception_handler(RequestValidationError, batch_body_error_handler)
    app.include_router(api_router)
    return app


app = create_app()

__all__ = ["app", "create_app"]
