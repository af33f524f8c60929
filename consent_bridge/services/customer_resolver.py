"""Resolve customer emails to Shopify customer identifiers."""

from __future__ import annotations

import logging
from typing import Any, Dict

from consent_bridge.clients.shopify_admin import ShopifyAdminClient
from consent_bridge.core.errors import CustomerNotFound, MissingCredential

logger = logging.getLogger(__name__)

MISSING_TOKEN_MESSAGE = (
    "Access token is missing. Please authenticate using /auth and /token routes "
    "or provide a token in the request headers."
)


def require_token(token: str | None) -> str:
    """Fail with ``MissingCredential`` before any upstream call when no token is held."""
    if not token:
        raise MissingCredential(MISSING_TOKEN_MESSAGE)
    return token


class CustomerResolver:
    """Look customers up through the Admin REST search endpoint."""

    def __init__(self, admin_client: ShopifyAdminClient) -> None:
        self._admin = admin_client

    async def search(self, email: str, *, token: str | None) -> Dict[str, Any]:
        """Return the raw search response for ``email``."""
        token = require_token(token)
        return await self._admin.search_customers(email, token=token)

    async def resolve_by_email(self, email: str, *, token: str | None) -> int | str:
        """
        Return the id of the first customer matching ``email``.

        Shopify may return several customers for one address; the first result
        wins and no disambiguation is attempted.
        """
        token = require_token(token)
        logger.info("Fetching customer by email: %s", email)
        payload = await self._admin.search_customers(
            email, token=token, message="Failed to update marketing consent."
        )
        customers = payload.get("customers") or []
        if not customers:
            logger.warning("No customer found with email: %s", email)
            raise CustomerNotFound(email)
        if len(customers) > 1:
            logger.debug("%d customers match %s, using the first", len(customers), email)
        return customers[0]["id"]


__all__ = ["CustomerResolver", "MISSING_TOKEN_MESSAGE", "require_token"]
