"""Public schema exports."""

from .auth import OAuthCallbackParams
from .consent import (
    SUPPORTED_PROPERTY,
    BatchResult,
    ConsentInstruction,
    EmailMarketingConsent,
)

__all__ = [
    "OAuthCallbackParams",
    "BatchResult",
    "ConsentInstruction",
    "EmailMarketingConsent",
    "SUPPORTED_PROPERTY",
]
