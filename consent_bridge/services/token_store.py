"""Process-lifetime holder for the Shopify access token."""

from __future__ import annotations

import logging
from typing import Optional

logger = logging.getLogger(__name__)


class TokenStore:
    """
    Keep the current access token in memory.

    Nothing is persisted and no expiry is tracked; a stale token only shows up
    as an upstream rejection. Writers are not coordinated, the last ``set`` wins.
    """

    def __init__(self, token: Optional[str] = None) -> None:
        self._token = token or None

    def get(self) -> Optional[str]:
        return self._token

    def set(self, token: str) -> None:
        if not token:
            raise ValueError("Access token must be a non-empty string.")
        replaced = self._token is not None
        self._token = token
        logger.info("Access token %s", "replaced" if replaced else "stored")

    def clear(self) -> None:
        self._token = None


__all__ = ["TokenStore"]
