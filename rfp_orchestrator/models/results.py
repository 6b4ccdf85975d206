"""Result models returned by orchestration operations."""

from typing import Optional, List
from pydantic import BaseModel, Field

from rfp_orchestrator.models.enums import ErrorKind, RfpStatus, ComparisonOutcome
from rfp_orchestrator.models.rfp import StructuredRfp, PersistedRfp
from rfp_orchestrator.models.vendor import Vendor, ProposalBundle
from rfp_orchestrator.models.comparison import ComparisonResult


class OperationResult(BaseModel):
    """Tagged outcome of an operation: Ok(value) or Err(kind, detail)."""
    success: bool = Field(True, description="Whether the operation completed successfully")
    error_kind: Optional[ErrorKind] = Field(None, description="Failure category")
    error: Optional[str] = Field(None, description="Failure detail")
    status_code: Optional[int] = Field(None, description="Backend HTTP status, if any")

    @classmethod
    def failure(
        cls,
        kind: ErrorKind,
        detail: str,
        status_code: Optional[int] = None,
        **values
    ):
        """Build a failed result of this type."""
        return cls(
            success=False,
            error_kind=kind,
            error=detail,
            status_code=status_code,
            **values
        )

    @classmethod
    def from_error(cls, exc, **values):
        """Build a failed result from an OrchestratorError."""
        return cls.failure(exc.kind, exc.message, exc.status_code, **values)

    @property
    def retryable(self) -> bool:
        """Transport and application failures may be retried by the caller."""
        return not self.success and self.error_kind in (
            ErrorKind.TRANSPORT,
            ErrorKind.APPLICATION,
        )


class GenerateResult(OperationResult):
    """Outcome of generating a structured RFP."""
    structured: Optional[StructuredRfp] = Field(None, description="Generated structure")


class PersistResult(OperationResult):
    """Outcome of saving a reviewed RFP."""
    rfp_id: Optional[str] = Field(None, description="Store-assigned RFP ID")


class DispatchResult(OperationResult):
    """Outcome of assigning vendors to, or sending, an RFP."""
    rfp_id: str = Field(..., description="Target RFP ID")
    vendor_ids: List[str] = Field(default_factory=list, description="Vendor IDs submitted")
    status: Optional[RfpStatus] = Field(None, description="RFP status after the call")


class ComparisonFetchResult(OperationResult):
    """Outcome of fetching the comparison view. Empty is not a failure."""
    rfp_id: str = Field(..., description="Target RFP ID")
    outcome: ComparisonOutcome = Field(ComparisonOutcome.EMPTY)
    total_proposals: int = Field(0, ge=0)
    comparison: Optional[ComparisonResult] = Field(None)


class RfpListResult(OperationResult):
    rfps: List[PersistedRfp] = Field(default_factory=list)


class RfpLookupResult(OperationResult):
    """Single RFP lookup. `rfp` is None when the store has no such ID."""
    rfp: Optional[PersistedRfp] = Field(None)


class VendorListResult(OperationResult):
    vendors: List[Vendor] = Field(default_factory=list)


class ProposalListResult(OperationResult):
    bundle: Optional[ProposalBundle] = Field(None)
