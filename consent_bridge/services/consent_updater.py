"""Apply email marketing consent transitions to Shopify customers."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Callable, Dict

from consent_bridge.clients.shopify_admin import ShopifyAdminClient
from consent_bridge.schemas import EmailMarketingConsent
from consent_bridge.services.customer_resolver import require_token

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ConsentUpdater:
    """Send targeted consent updates; other customer fields are never touched."""

    OPT_IN_LEVEL = "single_opt_in"

    def __init__(
        self,
        admin_client: ShopifyAdminClient,
        *,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._admin = admin_client
        self._clock = clock

    def build_payload(self, customer_id: int | str, subscribe: bool) -> Dict[str, Any]:
        """Construct the customer update document for one consent transition."""
        consent = EmailMarketingConsent(
            state="subscribed" if subscribe else "unsubscribed",
            consent_updated_at=(
                self._clock().isoformat().replace("+00:00", "Z") if subscribe else None
            ),
            opt_in_level=self.OPT_IN_LEVEL,
        )
        return {
            "customer": {
                "id": customer_id,
                "email_marketing_consent": consent.model_dump(),
            }
        }

    async def update_consent(
        self, customer_id: int | str, subscribe: bool, *, token: str | None
    ) -> Dict[str, Any]:
        """Set the customer's consent state and return the updated record."""
        token = require_token(token)
        payload = self.build_payload(customer_id, subscribe)
        logger.info(
            "Updating customer %s consent to %s",
            customer_id,
            payload["customer"]["email_marketing_consent"]["state"],
        )
        response = await self._admin.update_customer(customer_id, payload, token=token)
        return response.get("customer", response)


__all__ = ["ConsentUpdater"]
