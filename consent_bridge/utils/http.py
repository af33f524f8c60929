"""HTTP utilities for single-shot upstream calls with error translation."""

from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, Dict, Iterable

import httpx

from consent_bridge.core.errors import UpstreamError

logger = logging.getLogger(__name__)

_REDACTED = "[redacted]"


def redact(text: str, secrets: Iterable[str | None]) -> str:
    """Blank out credentials that may be echoed back in an upstream error."""
    for secret in secrets:
        if secret:
            text = text.replace(secret, _REDACTED)
    return text


def describe_http_error(exc: httpx.HTTPError) -> str:
    """Summarize an httpx error, including the upstream body when there is one."""
    if isinstance(exc, httpx.HTTPStatusError):
        body = exc.response.text.strip()
        summary = (
            f"Request failed with status code {exc.response.status_code}"
        )
        return f"{summary}: {body}" if body else summary
    return str(exc) or exc.__class__.__name__


async def send_upstream(
    func: Callable[..., Awaitable[httpx.Response]],
    *args,
    error_cls: type[UpstreamError],
    message: str,
    secrets: Iterable[str | None] = (),
    **kwargs,
) -> httpx.Response:
    """
    Issue one request and raise ``error_cls`` for transport errors or non-2xx.

    The call is never retried.
    """
    try:
        response = await func(*args, **kwargs)
        response.raise_for_status()
    except httpx.HTTPError as exc:
        detail = redact(describe_http_error(exc), secrets)
        logger.error("%s %s", message, detail)
        raise error_cls(message, error=detail) from exc
    return response


def decode_json_object(
    response: httpx.Response,
    *,
    error_cls: type[UpstreamError],
    message: str,
    secrets: Iterable[str | None] = (),
) -> Dict[str, Any]:
    """Return the response body as a JSON object or raise ``error_cls``."""
    try:
        payload = response.json()
    except ValueError as exc:
        detail = redact(
            f"Expected a JSON object from upstream, got: {response.text.strip()[:200]}",
            secrets,
        )
        logger.error("%s %s", message, detail)
        raise error_cls(message, error=detail) from exc

    if not isinstance(payload, dict):
        detail = f"Expected a JSON object from upstream, got {type(payload).__name__}."
        logger.error("%s %s", message, detail)
        raise error_cls(message, error=detail)
    return payload


__all__ = ["decode_json_object", "describe_http_error", "redact", "send_upstream"]
