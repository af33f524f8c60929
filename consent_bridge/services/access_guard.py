"""Precondition check for routes that need an authorized store."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from urllib.parse import quote

from consent_bridge.services.token_store import TokenStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NeedsAuthorization:
    """Outcome telling the caller to run the OAuth flow and come back."""

    return_path: str

    @property
    def redirect_url(self) -> str:
        return f"/auth?next={quote(self.return_path, safe='')}"


def check_access(token_store: TokenStore, return_path: str) -> str | NeedsAuthorization:
    """Return the held token, or a ``NeedsAuthorization`` outcome when there is none."""
    token = token_store.get()
    if token:
        return token
    logger.info("Redirecting to authentication for %s", return_path)
    return NeedsAuthorization(return_path=return_path or "/")


__all__ = ["NeedsAuthorization", "check_access"]
