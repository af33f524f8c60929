"""
Factory functions to provide shared clients and services as FastAPI dependencies.
"""

from functools import lru_cache

from consent_bridge.clients import ShopifyAdminClient, ShopifyOAuthClient
from consent_bridge.core.config import get_settings
from consent_bridge.services import (
    ConsentUpdater,
    CustomerResolver,
    MarketingConsentService,
    TokenStore,
)


@lru_cache()
def _settings():
    """Internal helper to cache settings for client factories."""
    return get_settings()


@lru_cache()
def get_token_store() -> TokenStore:
    """Provide the process-wide access token holder."""
    return TokenStore()


@lru_cache()
def get_shopify_oauth_client() -> ShopifyOAuthClient:
    """Create a singleton Shopify OAuth client."""
    return ShopifyOAuthClient(_settings().shopify)


@lru_cache()
def get_shopify_admin_client() -> ShopifyAdminClient:
    """Provide Shopify Admin API client instance."""
    return ShopifyAdminClient(_settings().shopify)


def get_customer_resolver() -> CustomerResolver:
    """Build a customer resolver over the Admin API client."""
    return CustomerResolver(get_shopify_admin_client())


def get_consent_updater() -> ConsentUpdater:
    """Build a consent updater over the Admin API client."""
    return ConsentUpdater(get_shopify_admin_client())


def get_marketing_consent_service() -> MarketingConsentService:
    """Build the batch orchestrator using configured collaborators."""
    return MarketingConsentService(
        resolver=get_customer_resolver(),
        updater=get_consent_updater(),
        token_store=get_token_store(),
        validate_before_apply=_settings().validate_before_apply,
    )


__all__ = [
    "get_consent_updater",
    "get_customer_resolver",
    "get_marketing_consent_service",
    "get_shopify_admin_client",
    "get_shopify_oauth_client",
    "get_token_store",
]
