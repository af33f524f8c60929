"""Service layer exports."""

from .access_guard import NeedsAuthorization, check_access
from .consent_updater import ConsentUpdater
from .customer_resolver import CustomerResolver
from .marketing_consent import MarketingConsentService
from .token_store import TokenStore

__all__ = [
    "ConsentUpdater",
    "CustomerResolver",
    "MarketingConsentService",
    "NeedsAuthorization",
    "TokenStore",
    "check_access",
]
