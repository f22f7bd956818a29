"""Offer copy request, result and batch models"""
from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class OfferType(str, Enum):
    """Closed set of offer types (determines which guidelines are applied)"""
    DISCOUNT = "discount"
    BUNDLE = "bundle"
    LIMITED_TIME = "limited-time"
    LOYALTY = "loyalty"
    FREE_TRIAL = "free-trial"
    REFERRAL = "referral"
    SEASONAL = "seasonal"
    CLEARANCE = "clearance"


OFFER_TYPE_LABELS = {
    OfferType.DISCOUNT: "Discount",
    OfferType.BUNDLE: "Bundle",
    OfferType.LIMITED_TIME: "Limited-Time",
    OfferType.LOYALTY: "Loyalty / Rewards",
    OfferType.FREE_TRIAL: "Free Trial",
    OfferType.REFERRAL: "Referral",
    OfferType.SEASONAL: "Seasonal",
    OfferType.CLEARANCE: "Clearance",
}


class OfferMode(str, Enum):
    """Whether the copy was generated from scratch or revised from existing copy"""
    GENERATED = "generated"
    MODIFIED = "modified"


MIN_OFFERS_PER_BATCH = 1
MAX_OFFERS_PER_BATCH = 50
MAX_DESCRIPTION_LENGTH = 2000
MAX_EXISTING_COPY_LENGTH = 5000


class OfferInput(BaseModel):
    """One offer to generate (or revise) copy for"""
    # Accepts the camelCase wire names only
    model_config = ConfigDict(frozen=True)

    offer_type: OfferType = Field(..., alias="offerType")
    offer_description: str = Field(
        ..., alias="offerDescription", min_length=1, max_length=MAX_DESCRIPTION_LENGTH
    )
    # When present the model revises this text; when absent it generates new copy
    existing_copy: Optional[str] = Field(
        None, alias="existingCopy", max_length=MAX_EXISTING_COPY_LENGTH
    )

    @field_validator("existing_copy", mode="before")
    @classmethod
    def reject_explicit_null(cls, value: Any) -> Any:
        # Only runs when the key is supplied; omitting it is how "no copy" is sent
        if value is None:
            raise ValueError("existingCopy may be omitted but must not be null")
        return value

    @field_validator("existing_copy")
    @classmethod
    def empty_copy_is_absent(cls, value: Optional[str]) -> Optional[str]:
        return value or None

    @property
    def mode(self) -> OfferMode:
        return OfferMode.MODIFIED if self.existing_copy is not None else OfferMode.GENERATED


class OfferBatchRequest(BaseModel):
    """Single offer or a batch of up to 50 offers"""
    offers: List[OfferInput] = Field(
        ..., min_length=MIN_OFFERS_PER_BATCH, max_length=MAX_OFFERS_PER_BATCH
    )


class OfferCopy(BaseModel):
    """
    Structured copy produced by the model.

    Validated strictly against the wire names: every key must be present
    (subheadline and legalDisclaimer may be null), values are never coerced
    and unknown keys are rejected.
    """
    model_config = ConfigDict(extra="forbid", strict=True, frozen=True)

    headline: str
    subheadline: Optional[str] = Field(...)
    body: str
    call_to_action: str = Field(..., alias="callToAction")
    legal_disclaimer: Optional[str] = Field(..., alias="legalDisclaimer")


class OfferResult(BaseModel):
    """Copy produced for one offer, echoing the input so results can be correlated"""
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    offer_type: OfferType = Field(..., alias="offerType")
    offer_description: str = Field(..., alias="offerDescription")
    mode: OfferMode
    offer_copy: OfferCopy = Field(..., alias="copy")
    processing_time_ms: int = Field(..., alias="processingTimeMs", ge=0)


class OfferBatchResponse(BaseModel):
    """Ordered results (same order as the request) plus total batch time"""
    model_config = ConfigDict(populate_by_name=True)

    results: List[OfferResult]
    total_processing_time_ms: int = Field(..., alias="totalProcessingTimeMs", ge=0)


class OfferTypeInfo(BaseModel):
    value: OfferType
    label: str
