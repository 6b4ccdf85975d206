"""Comparison models - Ranked view across all proposals for one RFP."""

from typing import Optional, List
from pydantic import Field, field_validator

from rfp_orchestrator.models.rfp import BackendModel


class BestPrice(BackendModel):
    vendor_id: Optional[str] = Field(None)
    vendor_name: Optional[str] = Field(None)
    price: Optional[float] = Field(None)
    currency: Optional[str] = Field(None)


class BestDelivery(BackendModel):
    vendor_id: Optional[str] = Field(None)
    vendor_name: Optional[str] = Field(None)
    timeline: Optional[str] = Field(None)


class BestOverall(BackendModel):
    vendor_id: Optional[str] = Field(None)
    vendor_name: Optional[str] = Field(None)
    score: Optional[float] = Field(None)
    reason: Optional[str] = Field(None)


class ComparisonSummary(BackendModel):
    """Headline winners per dimension."""
    total_proposals: int = Field(0, ge=0)
    note: Optional[str] = Field(None, description="Engine note, e.g. partial data")
    best_price: Optional[BestPrice] = Field(None)
    best_delivery: Optional[BestDelivery] = Field(None)
    best_overall: Optional[BestOverall] = Field(None)


class VendorMetrics(BackendModel):
    """One row of the comparison table."""
    vendor_id: str = Field(..., description="Vendor ID")
    vendor_name: str = Field("", description="Vendor name")
    total_price: Optional[float] = Field(None)
    currency: Optional[str] = Field(None)
    delivery_timeline: Optional[str] = Field(None)
    payment_terms: Optional[str] = Field(None)
    warranty: Optional[str] = Field(None)
    overall_score: Optional[float] = Field(None, description="Score out of 10")
    price_score: Optional[float] = Field(None)
    delivery_score: Optional[float] = Field(None)
    warranty_score: Optional[float] = Field(None)
    completeness_score: Optional[float] = Field(None)
    ai_recommendation: Optional[str] = Field(None)
    strengths: List[str] = Field(default_factory=list)
    weaknesses: List[str] = Field(default_factory=list)

    @field_validator("strengths", "weaknesses", mode="before")
    @classmethod
    def _none_to_list(cls, value):
        return value or []


class Recommendation(BackendModel):
    """The engine's pick and why."""
    recommended_vendor_id: Optional[str] = Field(None)
    recommended_vendor_name: Optional[str] = Field(None)
    reasoning: str = Field("")
    key_factors: List[str] = Field(default_factory=list)


class ComparisonResult(BackendModel):
    """Derived comparison for an RFP. No identity of its own."""
    summary: ComparisonSummary = Field(default_factory=ComparisonSummary)
    comparison_table: List[VendorMetrics] = Field(default_factory=list)
    recommendation: Optional[Recommendation] = Field(None)

    @field_validator("comparison_table", mode="before")
    @classmethod
    def _none_to_table(cls, value):
        return value or []

    @property
    def total_proposals(self) -> int:
        return max(self.summary.total_proposals, len(self.comparison_table))

    def ranked(self) -> List[VendorMetrics]:
        """Table rows ordered by overall score, unscored rows last."""
        return sorted(
            self.comparison_table,
            key=lambda row: (row.overall_score is None, -(row.overall_score or 0))
        )
