"""API Routes - HTTP entry points for the RFP lifecycle."""

import logging
from typing import Dict, Any, List, Optional
from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from rfp_orchestrator.core.config import get_settings
from rfp_orchestrator.models import (
    ErrorKind,
    OperationResult,
    StructuredRfp,
)
from rfp_orchestrator.services.draft_session import RfpDraftSession
from rfp_orchestrator.services.workflow import RfpWorkflow, get_workflow

logger = logging.getLogger(__name__)

router = APIRouter(tags=["rfp"])


class GenerateRequest(BaseModel):
    """Body for RFP generation."""
    description: str = Field(..., description="Natural-language procurement need")


class PersistRequest(BaseModel):
    """Body for saving a reviewed RFP. Omit `structured` to save as generated."""
    structured: Optional[StructuredRfp] = None


class VendorIdsRequest(BaseModel):
    """Body for vendor assignment and dispatch."""
    vendor_ids: List[str] = Field(default_factory=list, alias="vendorIds")

    class Config:
        populate_by_name = True


# ===========================================
# Helpers
# ===========================================

def _raise_for_failure(result: OperationResult) -> None:
    """Map a failed result onto an HTTP error."""
    if result.success:
        return

    if result.error_kind == ErrorKind.VALIDATION:
        status_code = 400
    elif result.error_kind == ErrorKind.TRANSPORT:
        status_code = 504
    elif result.status_code in (401, 404):
        status_code = result.status_code
    else:
        status_code = 502

    raise HTTPException(
        status_code=status_code,
        detail={
            "error_kind": result.error_kind.value if result.error_kind else None,
            "message": result.error,
            "retryable": result.retryable,
        }
    )


def _require_session(workflow: RfpWorkflow, session_id: str) -> RfpDraftSession:
    session = workflow.get_session(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail=f"Session not found: {session_id}")
    return session


# ===========================================
# Draft Sessions
# ===========================================

@router.post("/sessions", status_code=201, summary="Open Draft Session")
async def open_session(workflow: RfpWorkflow = Depends(get_workflow)) -> Dict[str, Any]:
    session = workflow.open_session()
    return session.snapshot()


@router.get("/sessions/{session_id}", summary="Get Draft Session")
async def get_session(
    session_id: str,
    workflow: RfpWorkflow = Depends(get_workflow)
) -> Dict[str, Any]:
    return _require_session(workflow, session_id).snapshot()


@router.delete("/sessions/{session_id}", summary="Discard Draft Session")
async def discard_session(
    session_id: str,
    workflow: RfpWorkflow = Depends(get_workflow)
) -> Dict[str, Any]:
    if not workflow.close_session(session_id):
        raise HTTPException(status_code=404, detail=f"Session not found: {session_id}")
    return {"session_id": session_id, "state": "discarded"}


@router.post("/sessions/{session_id}/generate", summary="Generate Structured RFP")
async def generate_rfp(
    session_id: str,
    body: GenerateRequest,
    workflow: RfpWorkflow = Depends(get_workflow)
) -> Dict[str, Any]:
    """
    Turn a procurement description into a structured RFP held in the session.

    The structure is not persisted until `/persist` is called.
    """
    session = _require_session(workflow, session_id)
    result = await session.generate(body.description)
    _raise_for_failure(result)
    return session.snapshot()


@router.post("/sessions/{session_id}/retry", summary="Retry Failed Generation")
async def retry_generation(
    session_id: str,
    workflow: RfpWorkflow = Depends(get_workflow)
) -> Dict[str, Any]:
    session = _require_session(workflow, session_id)
    result = await session.retry()
    _raise_for_failure(result)
    return session.snapshot()


@router.post("/sessions/{session_id}/persist", status_code=201, summary="Save Reviewed RFP")
async def persist_rfp(
    session_id: str,
    body: Optional[PersistRequest] = None,
    workflow: RfpWorkflow = Depends(get_workflow)
) -> Dict[str, Any]:
    session = _require_session(workflow, session_id)
    result = await session.persist(body.structured if body else None)
    _raise_for_failure(result)
    return {"rfp_id": result.rfp_id, "session": session.snapshot()}


# ===========================================
# Persisted RFPs
# ===========================================

@router.get("/rfps", summary="List RFPs")
async def list_rfps(
    refresh: bool = False,
    workflow: RfpWorkflow = Depends(get_workflow)
) -> Dict[str, Any]:
    result = await workflow.directory.list_rfps(refresh=refresh)
    _raise_for_failure(result)
    return {"data": [rfp.to_wire() for rfp in result.rfps]}


@router.get("/rfps/{rfp_id}", summary="Get RFP")
async def get_rfp(
    rfp_id: str,
    refresh: bool = False,
    workflow: RfpWorkflow = Depends(get_workflow)
) -> Dict[str, Any]:
    result = await workflow.directory.get_rfp(rfp_id, refresh=refresh)
    _raise_for_failure(result)
    if result.rfp is None:
        raise HTTPException(status_code=404, detail=f"RFP not found: {rfp_id}")

    data = result.rfp.to_wire()
    data["displayItems"] = [
        item.to_wire() for item in result.rfp.description_structured.display_items()
    ]
    return {"data": data}


@router.put("/rfps/{rfp_id}/vendors", summary="Assign Vendors")
async def assign_vendors(
    rfp_id: str,
    body: VendorIdsRequest,
    workflow: RfpWorkflow = Depends(get_workflow)
) -> Dict[str, Any]:
    result = await workflow.vendors.assign(rfp_id, body.vendor_ids)
    _raise_for_failure(result)
    return result.model_dump(mode="json", exclude={"error_kind", "error", "status_code"})


@router.post("/rfps/{rfp_id}/send", summary="Send RFP")
async def send_rfp(
    rfp_id: str,
    body: VendorIdsRequest,
    workflow: RfpWorkflow = Depends(get_workflow)
) -> Dict[str, Any]:
    result = await workflow.vendors.send(rfp_id, body.vendor_ids)
    _raise_for_failure(result)
    return result.model_dump(mode="json", exclude={"error_kind", "error", "status_code"})


@router.get("/rfps/{rfp_id}/proposals", summary="List Proposals")
async def list_proposals(
    rfp_id: str,
    refresh: bool = False,
    workflow: RfpWorkflow = Depends(get_workflow)
) -> Dict[str, Any]:
    result = await workflow.directory.list_proposals(rfp_id, refresh=refresh)
    _raise_for_failure(result)
    return {"data": result.bundle.to_wire() if result.bundle else None}


@router.get("/rfps/{rfp_id}/comparison", summary="Get Proposal Comparison")
async def get_comparison(
    rfp_id: str,
    refresh: bool = False,
    workflow: RfpWorkflow = Depends(get_workflow)
) -> Dict[str, Any]:
    """
    Comparison view for a sent RFP.

    `outcome` is "ready" or "empty"; an empty comparison is not an error.
    """
    result = await workflow.comparisons.fetch(rfp_id, refresh=refresh)
    _raise_for_failure(result)
    return {
        "rfp_id": rfp_id,
        "outcome": result.outcome.value,
        "total_proposals": result.total_proposals,
        "comparison": result.comparison.to_wire() if result.comparison else None,
    }


# ===========================================
# Vendors
# ===========================================

@router.get("/vendors", summary="List Vendors")
async def list_vendors(
    refresh: bool = False,
    workflow: RfpWorkflow = Depends(get_workflow)
) -> Dict[str, Any]:
    result = await workflow.directory.list_vendors(refresh=refresh)
    _raise_for_failure(result)
    return {"data": [vendor.to_wire() for vendor in result.vendors]}


@router.get("/health", summary="Health Check")
async def health_check() -> Dict[str, str]:
    return {"status": "healthy", "service": get_settings().SERVICE_NAME}
