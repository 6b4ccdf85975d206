"""Models package - All Pydantic models organized by domain."""

from rfp_orchestrator.models.enums import (
    RfpStatus,
    GenerationState,
    SessionState,
    ErrorKind,
    ComparisonOutcome,
)
from rfp_orchestrator.models.rfp import (
    BackendModel,
    RfpItem,
    RfpRequirements,
    StructuredRfp,
    PersistedRfp,
    RfpDraft,
)
from rfp_orchestrator.models.vendor import (
    Vendor,
    ProposalItem,
    ParsedProposal,
    Proposal,
    ProposalBundle,
)
from rfp_orchestrator.models.comparison import (
    BestPrice,
    BestDelivery,
    BestOverall,
    ComparisonSummary,
    VendorMetrics,
    Recommendation,
    ComparisonResult,
)
from rfp_orchestrator.models.results import (
    OperationResult,
    GenerateResult,
    PersistResult,
    DispatchResult,
    ComparisonFetchResult,
    RfpListResult,
    RfpLookupResult,
    VendorListResult,
    ProposalListResult,
)

__all__ = [
    # Enums
    "RfpStatus",
    "GenerationState",
    "SessionState",
    "ErrorKind",
    "ComparisonOutcome",
    # RFP models
    "BackendModel",
    "RfpItem",
    "RfpRequirements",
    "StructuredRfp",
    "PersistedRfp",
    "RfpDraft",
    # Vendor models
    "Vendor",
    "ProposalItem",
    "ParsedProposal",
    "Proposal",
    "ProposalBundle",
    # Comparison models
    "BestPrice",
    "BestDelivery",
    "BestOverall",
    "ComparisonSummary",
    "VendorMetrics",
    "Recommendation",
    "ComparisonResult",
    # Result models
    "OperationResult",
    "GenerateResult",
    "PersistResult",
    "DispatchResult",
    "ComparisonFetchResult",
    "RfpListResult",
    "RfpLookupResult",
    "VendorListResult",
    "ProposalListResult",
]
