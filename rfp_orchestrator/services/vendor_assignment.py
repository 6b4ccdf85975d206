"""Vendor Assignment Coordinator - assign vendors to and send persisted RFPs."""

import logging
from typing import Dict, Iterable, List, Optional

from rfp_orchestrator.core.cache import RequestCache
from rfp_orchestrator.core.errors import OrchestratorError
from rfp_orchestrator.integrations.backend import BackendClient
from rfp_orchestrator.models import ErrorKind, RfpStatus, DispatchResult
from rfp_orchestrator.services.rfp_directory import (
    RfpDirectory,
    proposals_key,
    comparison_key,
)

logger = logging.getLogger(__name__)


def normalize_vendor_ids(vendor_ids: Optional[Iterable[str]]) -> List[str]:
    """
    Normalize a vendor id collection into a unique, ordered list.

    Args:
        vendor_ids: Raw vendor ids from the caller (any iterable, may be None)

    Returns:
        Stripped, non-empty ids with duplicates removed, first occurrence wins (sets are sorted)
    """
    if not vendor_ids:
        return []
    if isinstance(vendor_ids, (set, frozenset)):
        vendor_ids = sorted(vendor_ids, key=str)

    result: List[str] = []
    seen = set()
    for raw in vendor_ids:
        if raw is None:
            continue
        vendor_id = str(raw).strip()
        if vendor_id and vendor_id not in seen:
            seen.add(vendor_id)
            result.append(vendor_id)
    return result


class VendorAssignmentCoordinator:
    """
    Manages the invited vendor set of persisted RFPs and their dispatch.

    Both operations are idempotent on the store: `assign` replaces the
    invited set and `send` may be repeated. Status only moves draft -> sent.
    One mutation per RFP may be outstanding; different RFPs are independent.
    Nothing is retried automatically.
    """

    def __init__(
        self,
        client: BackendClient,
        cache: RequestCache,
        directory: RfpDirectory
    ):
        self.client = client
        self.cache = cache
        self.directory = directory
        self._pending: Dict[str, str] = {}

    def status(self, rfp_id: str) -> RfpStatus:
        """Status as known locally, without a network call."""
        return self.directory.known_status(rfp_id)

    async def resolve_status(self, rfp_id: str) -> Optional[RfpStatus]:
        """
        Status after a mutation: sent if known locally, otherwise the
        store's record read through the directory. None if the read fails.
        """
        if self.directory.known_status(rfp_id) == RfpStatus.SENT:
            return RfpStatus.SENT
        lookup = await self.directory.get_rfp(rfp_id)
        if not lookup.success or lookup.rfp is None:
            return None
        return lookup.rfp.status

    def pending_operation(self, rfp_id: str) -> Optional[str]:
        return self._pending.get(rfp_id)

    def _precheck(
        self,
        operation: str,
        rfp_id: str,
        vendor_ids: Optional[Iterable[str]]
    ):
        """Validate arguments before any network call. Returns (ids, failure)."""
        ids = normalize_vendor_ids(vendor_ids)

        if not rfp_id:
            return ids, DispatchResult.failure(
                ErrorKind.VALIDATION, "RFP ID is required", rfp_id=rfp_id or ""
            )
        if not ids:
            message = (
                "Please select at least one vendor"
                if operation == "assign"
                else "Please assign vendors first"
            )
            return ids, DispatchResult.failure(ErrorKind.VALIDATION, message, rfp_id=rfp_id)
        if rfp_id in self._pending:
            return ids, DispatchResult.failure(
                ErrorKind.VALIDATION,
                f"RFP {rfp_id} already has a pending {self._pending[rfp_id]} operation",
                rfp_id=rfp_id,
                vendor_ids=ids
            )
        return ids, None

    async def assign(self, rfp_id: str, vendor_ids: Iterable[str]) -> DispatchResult:
        """
        Replace the invited vendor set of an RFP.

        Args:
            rfp_id: Persisted RFP ID
            vendor_ids: Non-empty collection of vendor IDs

        Returns:
            DispatchResult; cached RFP records are invalidated, not patched
        """
        ids, rejected = self._precheck("assign", rfp_id, vendor_ids)
        if rejected:
            logger.warning(f"Assign rejected for {rfp_id}: {rejected.error}")
            return rejected

        self._pending[rfp_id] = "assign"
        try:
            await self.client.assign_vendors(rfp_id, ids)
        except OrchestratorError as e:
            logger.error(f"Failed to assign vendors to {rfp_id}: {e.message}")
            return DispatchResult.from_error(e, rfp_id=rfp_id, vendor_ids=ids)
        finally:
            del self._pending[rfp_id]

        self.directory.invalidate_rfp(rfp_id)
        status = await self.resolve_status(rfp_id)
        return DispatchResult(rfp_id=rfp_id, vendor_ids=ids, status=status)

    async def send(self, rfp_id: str, vendor_ids: Iterable[str]) -> DispatchResult:
        """
        Send an RFP to the given vendors.

        The vendor set is passed independently of the current assignment.

        Args:
            rfp_id: Persisted RFP ID
            vendor_ids: Non-empty collection of vendor IDs

        Returns:
            DispatchResult with status SENT on success
        """
        ids, rejected = self._precheck("send", rfp_id, vendor_ids)
        if rejected:
            logger.warning(f"Send rejected for {rfp_id}: {rejected.error}")
            return rejected

        self._pending[rfp_id] = "send"
        try:
            await self.client.send_rfp(rfp_id, ids)
        except OrchestratorError as e:
            logger.error(f"Failed to send RFP {rfp_id}: {e.message}")
            return DispatchResult.from_error(
                e, rfp_id=rfp_id, vendor_ids=ids, status=await self.resolve_status(rfp_id)
            )
        finally:
            del self._pending[rfp_id]

        self.directory.mark_sent(rfp_id)
        self.directory.invalidate_rfp(rfp_id)
        self.cache.invalidate(proposals_key(rfp_id))
        self.cache.invalidate(comparison_key(rfp_id))
        return DispatchResult(rfp_id=rfp_id, vendor_ids=ids, status=RfpStatus.SENT)
