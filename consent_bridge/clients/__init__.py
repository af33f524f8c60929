"""Expose constructed client wrappers."""

from .shopify_admin import ShopifyAdminClient
from .shopify_auth import ShopifyOAuthClient

__all__ = [
    "ShopifyAdminClient",
    "ShopifyOAuthClient",
]
