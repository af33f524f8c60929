"""
Batch orchestration for marketing consent updates.

A batch is an ordered list of instructions. Each one moves through
``received -> validated -> resolved -> updated -> done``; the first failure
aborts the rest of the batch. Instructions applied before the failure stay
applied upstream, there is no rollback.
"""

from __future__ import annotations

import logging
from typing import Any, List

from consent_bridge.core.errors import (
    ConsentBridgeError,
    InvalidInputShape,
    InvalidValue,
    MissingField,
    UnsupportedProperty,
)
from consent_bridge.schemas import SUPPORTED_PROPERTY, BatchResult, ConsentInstruction
from consent_bridge.services.consent_updater import ConsentUpdater
from consent_bridge.services.customer_resolver import CustomerResolver
from consent_bridge.services.token_store import TokenStore

logger = logging.getLogger(__name__)

_ALLOWED_VALUES = ("true", "false")
_REQUIRED_FIELDS = ("contact_email", "propertyName", "propertyValue")


class MarketingConsentService:
    """Validate, resolve and update each instruction of a batch in order."""

    def __init__(
        self,
        *,
        resolver: CustomerResolver,
        updater: ConsentUpdater,
        token_store: TokenStore,
        validate_before_apply: bool = False,
    ) -> None:
        self._resolver = resolver
        self._updater = updater
        self._tokens = token_store
        self._validate_before_apply = validate_before_apply

    @staticmethod
    def validate_instruction(item: Any) -> ConsentInstruction:
        """Check one raw batch element and convert it to a ``ConsentInstruction``."""
        if not isinstance(item, dict):
            raise InvalidInputShape("Input must be an array of objects.")

        if any(not item.get(field) for field in _REQUIRED_FIELDS):
            raise MissingField(
                "Each object must contain contact_email, propertyName, and propertyValue."
            )

        if item["propertyName"] != SUPPORTED_PROPERTY:
            raise UnsupportedProperty(f'propertyName must be "{SUPPORTED_PROPERTY}".')

        # JSON booleans are rejected; only the literal strings are accepted.
        value = item["propertyValue"]
        if not isinstance(value, str) or value not in _ALLOWED_VALUES:
            raise InvalidValue('propertyValue must be "true" or "false".')

        return ConsentInstruction(
            contact_email=str(item["contact_email"]),
            propertyName=item["propertyName"],
            propertyValue=item["propertyValue"],
        )

    async def process_batch(self, instructions: Any) -> BatchResult:
        """
        Apply every instruction in order, one upstream call at a time.

        Raises the first ``ConsentBridgeError`` encountered. With
        ``validate_before_apply`` enabled the whole batch is validated before
        any customer is touched, so only lookup and update failures can leave
        a batch partially applied.
        """
        if not isinstance(instructions, list):
            raise InvalidInputShape("Input must be an array of objects.")

        if self._validate_before_apply:
            for item in instructions:
                self.validate_instruction(item)

        token = self._tokens.get()
        applied: List[str] = []
        for position, item in enumerate(instructions):
            try:
                instruction = self.validate_instruction(item)
                customer_id = await self._resolver.resolve_by_email(
                    instruction.email, token=token
                )
                await self._updater.update_consent(
                    customer_id, instruction.subscribe, token=token
                )
            except ConsentBridgeError as exc:
                logger.warning(
                    "Aborting consent batch at item %d of %d (%s); %d already applied",
                    position + 1,
                    len(instructions),
                    exc.__class__.__name__,
                    len(applied),
                )
                raise
            applied.append(instruction.email)
            logger.info("Customer %s updated", instruction.email)

        return BatchResult(processed=len(applied))


__all__ = ["MarketingConsentService"]
