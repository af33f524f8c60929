"""
Error taxonomy for the consent bridge.

Every failure a request can end in is one of these exceptions. None of them
is retried; the API layer renders them as ``{"message": ..., "error": ...}``
with the status code carried by the class.
"""

from __future__ import annotations

from http import HTTPStatus


class ConsentBridgeError(Exception):
    """Base class for errors that terminate the current request."""

    status_code: int = HTTPStatus.INTERNAL_SERVER_ERROR

    def __init__(self, message: str, *, error: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.error = error

    def to_payload(self) -> dict:
        payload = {"message": self.message}
        if self.error is not None:
            payload["error"] = self.error
        return payload


class InvalidInputShape(ConsentBridgeError):
    """The batch body is not a list of objects."""

    status_code = HTTPStatus.BAD_REQUEST


class MissingField(ConsentBridgeError):
    status_code = HTTPStatus.BAD_REQUEST


class UnsupportedProperty(ConsentBridgeError):
    status_code = HTTPStatus.BAD_REQUEST


class InvalidValue(ConsentBridgeError):
    status_code = HTTPStatus.BAD_REQUEST


class MissingParameter(ConsentBridgeError):
    """The OAuth callback arrived without ``code`` or ``hmac``."""

    status_code = HTTPStatus.BAD_REQUEST


class InvalidSignature(ConsentBridgeError):
    status_code = HTTPStatus.BAD_REQUEST


class MissingCredential(ConsentBridgeError):
    """No access token is held; the store has not been authorized yet."""

    status_code = HTTPStatus.FORBIDDEN


class CustomerNotFound(ConsentBridgeError):
    status_code = HTTPStatus.NOT_FOUND

    def __init__(self, email: str) -> None:
        super().__init__(f"No customer found with email: {email}")
        self.email = email


class UpstreamError(ConsentBridgeError):
    """Shopify rejected a call or could not be reached."""

    status_code = HTTPStatus.INTERNAL_SERVER_ERROR


class UpstreamAuthError(UpstreamError):
    pass


class UpstreamLookupError(UpstreamError):
    pass


class UpstreamUpdateError(UpstreamError):
    pass


__all__ = [
    "ConsentBridgeError",
    "CustomerNotFound",
    "InvalidInputShape",
    "InvalidSignature",
    "InvalidValue",
    "MissingCredential",
    "MissingField",
    "MissingParameter",
    "UnsupportedProperty",
    "UpstreamAuthError",
    "UpstreamError",
    "UpstreamLookupError",
    "UpstreamUpdateError",
]
