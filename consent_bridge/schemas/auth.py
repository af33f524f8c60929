"""Schemas related to OAuth flows."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class OAuthCallbackParams(BaseModel):
    """Query parameters Shopify sends back to the ``/token`` callback."""

    code: Optional[str] = Field(None, description="Authorization code issued by Shopify.")
    hmac: Optional[str] = Field(None, description="Signature over the callback query.")
    state: Optional[str] = Field(
        None, description="Path the caller asked for before being sent to authorize."
    )


__all__ = ["OAuthCallbackParams"]
