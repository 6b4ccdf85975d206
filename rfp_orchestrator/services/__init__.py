"""Services module - RFP lifecycle orchestration."""

from rfp_orchestrator.services.rfp_directory import RfpDirectory
from rfp_orchestrator.services.draft_session import RfpDraftSession
from rfp_orchestrator.services.vendor_assignment import VendorAssignmentCoordinator
from rfp_orchestrator.services.comparison import ComparisonAggregator
from rfp_orchestrator.services.workflow import RfpWorkflow, get_workflow

__all__ = [
    "RfpDirectory",
    "RfpDraftSession",
    "VendorAssignmentCoordinator",
    "ComparisonAggregator",
    "RfpWorkflow",
    "get_workflow",
]
