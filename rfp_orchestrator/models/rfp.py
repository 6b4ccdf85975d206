"""RFP models - Generated structure, drafts and persisted records."""

from typing import Optional, List, Any
from datetime import datetime
from pydantic import BaseModel, Field, field_validator
from pydantic.alias_generators import to_camel

from rfp_orchestrator.models.enums import RfpStatus, GenerationState


class BackendModel(BaseModel):
    """Base for models exchanged with the backend (camelCase on the wire)."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        extra = "ignore"

    def to_wire(self, **kwargs: Any) -> dict:
        """Serialize with backend field names."""
        return self.model_dump(by_alias=True, mode="json", **kwargs)


class RfpItem(BackendModel):
    """A single line item requested in an RFP."""
    item: str = Field("", description="Item name (may be empty)")
    quantity: int = Field(0, ge=0, description="Requested quantity")
    specs: Optional[str] = Field(None, description="Specifications")
    id: Optional[str] = Field(None, alias="_id", description="Store-assigned item ID")

    @field_validator("item", mode="before")
    @classmethod
    def _none_to_empty(cls, value):
        return "" if value is None else value

    @field_validator("quantity", mode="before")
    @classmethod
    def _none_to_zero(cls, value):
        return 0 if value is None else value


class RfpRequirements(BackendModel):
    """Structured requirements extracted from the raw description."""
    budget: Optional[float] = Field(None, description="Budget amount")
    currency: str = Field("USD", description="ISO currency code")
    currency_symbol: str = Field("$", description="Currency symbol for display")
    delivery_timeline: Optional[str] = Field(None, description="Delivery timeline")
    payment_terms: Optional[str] = Field(None, description="Payment terms")
    warranty: Optional[str] = Field(None, description="Warranty requirements")
    items: List[RfpItem] = Field(default_factory=list, description="Requested items")

    @field_validator("items", mode="before")
    @classmethod
    def _drop_null_items(cls, value):
        if value is None:
            return []
        return [entry for entry in value if entry is not None]

    @field_validator("currency", "currency_symbol", mode="before")
    @classmethod
    def _default_blank(cls, value, info):
        if value:
            return value
        return "$" if info.field_name == "currency_symbol" else "USD"

    def display_items(self) -> List[RfpItem]:
        """Items with a non-empty name, in original order."""
        return [entry for entry in self.items if entry.item and entry.item.strip()]


class StructuredRfp(BackendModel):
    """RFP structure as returned by the generation engine."""
    title: str = Field("", description="RFP title")
    description_raw: str = Field("", description="Echo of the source description")
    description_structured: RfpRequirements = Field(
        default_factory=RfpRequirements,
        description="Structured requirements"
    )

    def to_create_payload(self) -> dict:
        """Body for the create-rfp call."""
        return self.to_wire(
            include={"title", "description_raw", "description_structured"},
            exclude_none=True
        )


class PersistedRfp(StructuredRfp):
    """Authoritative RFP record held by the store."""
    id: str = Field(..., alias="_id", description="Store-assigned RFP ID")
    status: RfpStatus = Field(RfpStatus.DRAFT, description="Draft or sent")
    vendors_invited: List[str] = Field(
        default_factory=list,
        description="Invited vendor IDs (unique)"
    )
    created_at: Optional[datetime] = Field(None, description="Record creation time")

    @field_validator("status", mode="before")
    @classmethod
    def _default_status(cls, value):
        return value or RfpStatus.DRAFT

    @field_validator("vendors_invited", mode="before")
    @classmethod
    def _unique_vendors(cls, value):
        if not value:
            return []
        return list(dict.fromkeys(str(v) for v in value))


class RfpDraft(BaseModel):
    """In-memory draft owned by a single session. Never persisted as-is."""
    raw_description: str = Field(
        ...,
        frozen=True,
        description="User input, fixed once generation starts"
    )
    structured: Optional[StructuredRfp] = Field(
        None,
        description="Present only after successful generation"
    )
    generation_state: GenerationState = Field(GenerationState.IDLE)
    failure_reason: Optional[str] = Field(None, description="Why generation failed")
