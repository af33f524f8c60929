"""Expose dependency helpers for FastAPI routers."""

from .clients import (
    get_consent_updater,
    get_customer_resolver,
    get_marketing_consent_service,
    get_shopify_admin_client,
    get_shopify_oauth_client,
    get_token_store,
)
from .config import get_app_settings, get_shopify_settings

__all__ = [
    "get_app_settings",
    "get_consent_updater",
    "get_customer_resolver",
    "get_marketing_consent_service",
    "get_shopify_admin_client",
    "get_shopify_oauth_client",
    "get_shopify_settings",
    "get_token_store",
]
