"""Thin async wrapper over the Shopify Admin REST and GraphQL endpoints."""

from __future__ import annotations

from typing import Any, Dict
from urllib.parse import quote

import httpx

from consent_bridge.core.config import ShopifySettings
from consent_bridge.core.errors import (
    UpstreamError,
    UpstreamLookupError,
    UpstreamUpdateError,
)
from consent_bridge.utils.http import decode_json_object, send_upstream

CUSTOMER_LIST_QUERY = """
{
    customers(first: 50) {
        edges {
            node {
                id
                firstName
                lastName
                email
            }
        }
    }
}
"""


class ShopifyAdminClient:
    """Issue authenticated calls against one store's Admin API."""

    def __init__(
        self,
        settings: ShopifySettings,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._shopify = settings
        self._transport = transport

    @property
    def api_base_url(self) -> str:
        return f"https://{self._shopify.shop_domain}/admin/api/{self._shopify.api_version}"

    @staticmethod
    def _headers(token: str) -> Dict[str, str]:
        return {
            "X-Shopify-Access-Token": token,
            "Content-Type": "application/json",
        }

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self._shopify.timeout_seconds, transport=self._transport
        )

    async def search_customers(
        self,
        email: str,
        *,
        token: str,
        message: str = "Failed to fetch customers.",
    ) -> Dict[str, Any]:
        """Run the REST customer search filtered by ``email``."""
        # Encoded by hand so "+" and "@" survive exactly as Shopify expects.
        url = f"{self.api_base_url}/customers/search.json?query={quote(email, safe='')}"
        async with self._client() as client:
            response = await send_upstream(
                client.get,
                url,
                headers=self._headers(token),
                error_cls=UpstreamLookupError,
                message=message,
                secrets=(token,),
            )
        return decode_json_object(
            response, error_cls=UpstreamLookupError, message=message, secrets=(token,)
        )

    async def update_customer(
        self,
        customer_id: int | str,
        payload: Dict[str, Any],
        *,
        token: str,
        error_cls: type[UpstreamError] = UpstreamUpdateError,
        message: str = "Failed to update marketing consent.",
    ) -> Dict[str, Any]:
        """PUT a partial customer document; Shopify leaves omitted fields alone."""
        url = f"{self.api_base_url}/customers/{customer_id}.json"
        async with self._client() as client:
            response = await send_upstream(
                client.put,
                url,
                json=payload,
                headers=self._headers(token),
                error_cls=error_cls,
                message=message,
                secrets=(token,),
            )
        return decode_json_object(
            response, error_cls=error_cls, message=message, secrets=(token,)
        )

    async def list_customers(self, *, token: str) -> Dict[str, Any]:
        """Fetch the first 50 customers' id, names and email through GraphQL."""
        async with self._client() as client:
            response = await send_upstream(
                client.post,
                f"{self.api_base_url}/graphql.json",
                json={"query": CUSTOMER_LIST_QUERY},
                headers=self._headers(token),
                error_cls=UpstreamLookupError,
                message="Failed to fetch customer data.",
                secrets=(token,),
            )
        return decode_json_object(
            response,
            error_cls=UpstreamLookupError,
            message="Failed to fetch customer data.",
            secrets=(token,),
        )


__all__ = ["CUSTOMER_LIST_QUERY", "ShopifyAdminClient"]
