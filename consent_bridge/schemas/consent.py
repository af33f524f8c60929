"""
Pydantic models for marketing consent instructions and their outcomes.
"""

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

SUPPORTED_PROPERTY = "accepts_marketing"


class ConsentInstruction(BaseModel):
    """One request to set a customer's email marketing consent."""

    model_config = ConfigDict(populate_by_name=True)

    email: str = Field(..., alias="contact_email", min_length=1)
    property_name: Literal["accepts_marketing"] = Field(
        SUPPORTED_PROPERTY, alias="propertyName"
    )
    property_value: Literal["true", "false"] = Field(..., alias="propertyValue")

    @property
    def subscribe(self) -> bool:
        return self.property_value == "true"


class EmailMarketingConsent(BaseModel):
    """Consent sub-document sent to Shopify on a customer update."""

    state: Literal["subscribed", "unsubscribed"]
    consent_updated_at: Optional[str] = Field(
        None, description="ISO-8601 timestamp; null when unsubscribing."
    )
    opt_in_level: str = Field("single_opt_in")


class BatchResult(BaseModel):
    """Outcome of a fully applied batch."""

    message: str = Field(
        "Marketing consent updated successfully for all provided customers."
    )
    processed: int = Field(0, description="Number of customers updated.")


__all__ = [
    "BatchResult",
    "ConsentInstruction",
    "EmailMarketingConsent",
    "SUPPORTED_PROPERTY",
]
