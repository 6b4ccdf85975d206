"""Vendor and proposal models - read-only views of the vendor side."""

from typing import Optional, List, Dict, Any, Union
from datetime import datetime
from pydantic import AliasChoices, Field, field_validator

from rfp_orchestrator.models.rfp import BackendModel


class Vendor(BackendModel):
    """Vendor directory entry. Owned by the external vendor directory."""
    id: str = Field(..., alias="_id", description="Vendor ID")
    name: str = Field("", description="Vendor name")
    email: str = Field("", description="Contact email")
    phone: Optional[str] = Field(None, description="Contact phone")
    address: Optional[str] = Field(None, description="Postal address")
    created_at: Optional[datetime] = Field(None, description="Record creation time")


class ProposalItem(BackendModel):
    """Priced line item in a vendor proposal."""
    item: str = Field("", description="Item name")
    quantity: int = Field(0, ge=0)
    unit_price: Optional[float] = Field(None)
    total_price: Optional[float] = Field(None)


class ParsedProposal(BackendModel):
    """Vendor reply after parsing by the proposal engine."""
    total_price: Optional[float] = Field(None, description="Quoted total")
    currency: Optional[str] = Field(None)
    payment_terms: Optional[str] = Field(None)
    delivery_timeline: Optional[str] = Field(None)
    warranty: Optional[str] = Field(None)
    items: List[ProposalItem] = Field(default_factory=list)
    additional_notes: Optional[str] = Field(None)


class Proposal(BackendModel):
    """A vendor's structured response to a sent RFP."""
    id: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("id", "_id"),
        description="Proposal ID"
    )
    vendor: Union[Vendor, str, None] = Field(
        None,
        alias="vendorId",
        description="Populated vendor record or bare vendor ID"
    )
    parsed: ParsedProposal = Field(default_factory=ParsedProposal)
    scoring: Dict[str, Any] = Field(default_factory=dict)
    created_at: Optional[datetime] = Field(None)

    @property
    def vendor_id(self) -> Optional[str]:
        if isinstance(self.vendor, Vendor):
            return self.vendor.id
        return self.vendor

    @field_validator("scoring", mode="before")
    @classmethod
    def _none_to_dict(cls, value):
        return value or {}


class ProposalBundle(BackendModel):
    """All proposals received for one RFP."""
    rfp_id: Optional[str] = Field(None)
    rfp_title: Optional[str] = Field(None)
    total_proposals: int = Field(0, ge=0)
    proposals: List[Proposal] = Field(default_factory=list)
