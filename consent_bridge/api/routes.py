"""
FastAPI routes for the Shopify consent bridge.
"""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Annotated, Any
from urllib.parse import unquote

from fastapi import APIRouter, Body, Depends, Query, Request
from fastapi.responses import RedirectResponse

from consent_bridge.core.errors import InvalidSignature, MissingParameter
from consent_bridge.dependencies import (
    get_customer_resolver,
    get_marketing_consent_service,
    get_shopify_admin_client,
    get_shopify_oauth_client,
    get_shopify_settings,
    get_token_store,
)
from consent_bridge.schemas import OAuthCallbackParams
from consent_bridge.services import NeedsAuthorization, check_access

router = APIRouter()
logger = logging.getLogger(__name__)

CONSENT_BATCH_PATH = "/marketing-consent"


def _original_url(request: Request) -> str:
    """Path plus query string of the incoming request."""
    query = request.url.query
    return f"{request.url.path}?{query}" if query else request.url.path


def _wants_html(request: Request) -> bool:
    return "text/html" in request.headers.get("accept", "").lower()


def _redirect_target(state: str | None) -> str:
    """Decode the OAuth ``state`` back into a local path, falling back to ``/``."""
    if not state:
        return "/"
    target = unquote(state)
    if not target.startswith("/") or target.startswith("//") or "\\" in target:
        logger.warning("Ignoring non-local redirect target in OAuth state: %s", target)
        return "/"
    return target


def _redirect_to_authorization(outcome: NeedsAuthorization) -> RedirectResponse:
    return RedirectResponse(
        url=outcome.redirect_url, status_code=HTTPStatus.TEMPORARY_REDIRECT
    )


@router.get("/health", status_code=HTTPStatus.OK)
async def healthcheck() -> dict:
    """Simple health endpoint for monitoring."""
    return {"status": "ok"}


@router.get("/auth")
async def start_shopify_oauth_flow(
    oauth_client: Annotated[Any, Depends(get_shopify_oauth_client)],
    next_path: str = Query(
        default="/",
        alias="next",
        description="Path to return to once the store has been authorized.",
    ),
) -> RedirectResponse:
    """Send the caller to the Shopify consent screen."""
    authorization_url = oauth_client.build_authorization_url(next_path or "/")
    return RedirectResponse(
        url=authorization_url, status_code=HTTPStatus.TEMPORARY_REDIRECT
    )


@router.get("/token")
async def handle_shopify_oauth_callback(
    request: Request,
    oauth_client: Annotated[Any, Depends(get_shopify_oauth_client)],
    token_store: Annotated[Any, Depends(get_token_store)],
    shopify_settings: Annotated[Any, Depends(get_shopify_settings)],
    code: str | None = Query(default=None),
    hmac: str | None = Query(default=None),
    state: str | None = Query(default=None),
) -> RedirectResponse:
    """Complete the OAuth exchange, keep the token and resume the original request."""
    params = OAuthCallbackParams(code=code, hmac=hmac, state=state)
    if not params.code or not params.hmac:
        raise MissingParameter("Missing code or hmac in query parameters.")

    if shopify_settings.verify_hmac and not oauth_client.verify_callback_hmac(
        dict(request.query_params)
    ):
        raise InvalidSignature("Invalid hmac signature on OAuth callback.")

    access_token = await oauth_client.exchange_authorization_code(params.code)
    token_store.set(access_token)

    return RedirectResponse(
        url=_redirect_target(params.state),
        status_code=HTTPStatus.TEMPORARY_REDIRECT,
    )


@router.get("/customers", response_model=None)
async def list_customers(
    request: Request,
    token_store: Annotated[Any, Depends(get_token_store)],
    admin_client: Annotated[Any, Depends(get_shopify_admin_client)],
) -> dict | RedirectResponse:
    """Return id, names and email of up to 50 customers as Shopify reports them."""
    outcome = check_access(token_store, _original_url(request))
    if isinstance(outcome, NeedsAuthorization):
        return _redirect_to_authorization(outcome)
    return await admin_client.list_customers(token=outcome)


@router.get("/customers/{email}", response_model=None)
async def search_customers_by_email(
    email: str,
    request: Request,
    token_store: Annotated[Any, Depends(get_token_store)],
    resolver: Annotated[Any, Depends(get_customer_resolver)],
) -> dict | RedirectResponse:
    """Return the raw Shopify search result for one email address."""
    token = token_store.get()
    if not token and _wants_html(request):
        return _redirect_to_authorization(NeedsAuthorization(_original_url(request)))
    # API clients without a token get MissingCredential (403) from the resolver.
    return await resolver.search(email, token=token)


@router.post(CONSENT_BATCH_PATH, status_code=HTTPStatus.OK)
async def update_marketing_consent(
    service: Annotated[Any, Depends(get_marketing_consent_service)],
    payload: Any = Body(default=None),
) -> dict:
    """
    Apply a batch of consent instructions, e.g.::

        [
            {"contact_email": "a@example.com", "propertyName": "accepts_marketing", "propertyValue": "true"},
            {"contact_email": "b@example.com", "propertyName": "accepts_marketing", "propertyValue": "false"}
        ]
    """
    result = await service.process_batch(payload)
    logger.info("Marketing consent batch applied to %d customers", result.processed)
    return {"message": result.message}


__all__ = ["CONSENT_BATCH_PATH", "router"]
