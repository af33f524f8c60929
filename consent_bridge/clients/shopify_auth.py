"""
Shopify OAuth utilities.

These helpers build the install/authorize URL, verify the signed callback and
exchange the authorization code for an offline access token.
"""

from __future__ import annotations

import hashlib
import hmac
import logging
from typing import Mapping
from urllib.parse import urlencode

import httpx

from consent_bridge.core.config import ShopifySettings
from consent_bridge.core.errors import UpstreamAuthError
from consent_bridge.utils.http import decode_json_object, send_upstream

logger = logging.getLogger(__name__)


class ShopifyOAuthClient:
    """Build Shopify authorization URLs and exchange authorization codes."""

    AUTHORIZE_PATH = "/admin/oauth/authorize"
    TOKEN_PATH = "/admin/oauth/access_token"

    def __init__(
        self,
        settings: ShopifySettings,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._shopify = settings
        self._transport = transport

    @property
    def token_url(self) -> str:
        return f"https://{self._shopify.shop_domain}{self.TOKEN_PATH}"

    def build_authorization_url(self, next_path: str = "/") -> str:
        """
        Construct the Shopify consent URL.

        ``next_path`` travels through the flow as the ``state`` parameter so the
        callback can send the caller back to what they originally asked for.
        """
        params = {
            "client_id": self._shopify.api_key,
            "scope": self._shopify.scopes,
            "redirect_uri": self._shopify.redirect_uri,
            "state": next_path or "/",
        }
        query = urlencode(params)
        return f"https://{self._shopify.shop_domain}{self.AUTHORIZE_PATH}?{query}"

    def verify_callback_hmac(self, params: Mapping[str, str]) -> bool:
        """Check the ``hmac`` Shopify appends to the callback query string."""
        received = params.get("hmac")
        if not received:
            return False
        message = "&".join(
            f"{key}={value}"
            for key, value in sorted(params.items())
            if key not in ("hmac", "signature")
        )
        expected = hmac.new(
            self._shopify.api_secret.encode("utf-8"),
            message.encode("utf-8"),
            hashlib.sha256,
        ).hexdigest()
        return hmac.compare_digest(expected, received)

    async def exchange_authorization_code(self, code: str) -> str:
        """Exchange an authorization code for an access token."""
        payload = {
            "client_id": self._shopify.api_key,
            "client_secret": self._shopify.api_secret,
            "code": code,
        }

        async with httpx.AsyncClient(
            timeout=self._shopify.timeout_seconds, transport=self._transport
        ) as client:
            response = await send_upstream(
                client.post,
                self.token_url,
                json=payload,
                error_cls=UpstreamAuthError,
                message="Failed to retrieve access token.",
                secrets=(self._shopify.api_secret, code),
            )

        token_payload = decode_json_object(
            response,
            error_cls=UpstreamAuthError,
            message="Failed to retrieve access token.",
            secrets=(self._shopify.api_secret, code),
        )
        access_token = token_payload.get("access_token")
        if not access_token:
            raise UpstreamAuthError(
                "Failed to retrieve access token.",
                error="Incomplete token payload returned from Shopify.",
            )

        logger.info("Obtained Shopify access token for %s", self._shopify.shop_domain)
        return access_token


__all__ = ["ShopifyOAuthClient"]
