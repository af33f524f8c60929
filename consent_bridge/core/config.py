"""
Application configuration models and helpers.

Centralizes settings management so the FastAPI app and the operator scripts
share a consistent configuration surface.
"""

from functools import lru_cache
from pathlib import Path

import os

from pydantic import AnyHttpUrl, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _load_env_file(path: str = ".env") -> None:
    """
    Copy key=value pairs from a .env file into ``os.environ``.

    ``SettingsConfigDict(env_file=...)`` only feeds the model it is declared on;
    going through the environment lets the nested ``ShopifySettings`` see values
    from an arbitrary file, which ``scripts/check_env.py`` relies on.
    """
    env_path = Path(path)
    if not env_path.exists():
        return
    for raw_line in env_path.read_text().splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        key, sep, value = line.partition("=")
        if not sep:
            continue
        key = key.strip()
        if not key or key in os.environ:
            continue
        cleaned = value.strip().strip('"').strip("'")
        os.environ[key] = cleaned


_load_env_file()


DEFAULT_SCOPES = (
    "customer_read_customers,customer_write_customers,read_customers,"
    "write_customers,customer_read_companies"
)


class ShopifySettings(BaseSettings):
    """Configuration required for talking to the Shopify Admin API."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    shop_name: str = Field(
        ...,
        validation_alias="SHOPIFY_NAME",
        description="Store subdomain, i.e. the part before .myshopify.com.",
    )
    api_key: str = Field(..., validation_alias="SHOPIFY_API_KEY")
    api_secret: str = Field(..., validation_alias="SHOPIFY_PASSWORD")
    base_url: AnyHttpUrl = Field(
        ...,
        validation_alias="BASE_URL",
        description="Public URL of this service; the OAuth callback is <BASE_URL>/token.",
    )
    api_version: str = Field("2025-01", validation_alias="SHOPIFY_API_VERSION")
    scopes: str = Field(DEFAULT_SCOPES, validation_alias="SHOPIFY_SCOPES")
    verify_hmac: bool = Field(
        False,
        validation_alias="SHOPIFY_VERIFY_HMAC",
        description="Verify the hmac query parameter Shopify signs the OAuth callback with.",
    )
    timeout_seconds: float = Field(10.0, validation_alias="SHOPIFY_TIMEOUT_SECONDS")

    @field_validator("scopes", mode="before")
    @classmethod
    def _normalize_scopes(cls, value: str | tuple[str, ...] | list[str]) -> str:
        """Support providing scopes as a list or a comma-separated string."""
        if isinstance(value, (tuple, list)):
            items = value
        else:
            items = value.split(",")
        return ",".join(scope.strip() for scope in items if scope.strip())

    @property
    def shop_domain(self) -> str:
        return f"{self.shop_name}.myshopify.com"

    @property
    def redirect_uri(self) -> str:
        return f"{str(self.base_url).rstrip('/')}/token"


class AppSettings(BaseSettings):
    """Root settings object for the FastAPI application."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    environment: str = Field("development", validation_alias="APP_ENV")
    log_level: str = Field("INFO", validation_alias="APP_LOG_LEVEL")
    port: int = Field(3000, validation_alias="PORT")
    validate_before_apply: bool = Field(
        False,
        validation_alias="CONSENT_VALIDATE_BEFORE_APPLY",
        description=(
            "Validate every instruction of a batch before the first upstream "
            "update is sent."
        ),
    )
    shopify: ShopifySettings = Field(default_factory=ShopifySettings)


@lru_cache()
def get_settings() -> AppSettings:
    """Return a cached settings object."""
    return AppSettings()  # type: ignore[call-arg]


__all__ = [
    "AppSettings",
    "DEFAULT_SCOPES",
    "ShopifySettings",
    "get_settings",
]
