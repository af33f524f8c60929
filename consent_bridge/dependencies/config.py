"""
FastAPI dependency utilities for injecting configuration.
"""

from functools import lru_cache

from fastapi import Depends

from consent_bridge.core.config import AppSettings, ShopifySettings, get_settings


@lru_cache()
def _settings_singleton() -> AppSettings:
    return get_settings()


def get_app_settings() -> AppSettings:
    """FastAPI dependency returning application settings."""
    return _settings_singleton()


def get_shopify_settings(
    settings: AppSettings = Depends(get_app_settings),
) -> ShopifySettings:
    """FastAPI dependency returning only the Shopify section."""
    return settings.shopify


__all__ = ["get_app_settings", "get_shopify_settings"]
