"""RFP Directory - cached reads of RFPs, vendors and proposals."""

import logging
from typing import List, Set

from rfp_orchestrator.core.cache import RequestCache, make_key
from rfp_orchestrator.core.errors import OrchestratorError
from rfp_orchestrator.integrations.backend import BackendClient
from rfp_orchestrator.models import (
    PersistedRfp,
    RfpStatus,
    RfpListResult,
    RfpLookupResult,
    VendorListResult,
    ProposalListResult,
)

logger = logging.getLogger(__name__)

RFPS_KEY = make_key("rfps")
VENDORS_KEY = make_key("vendors")


def rfp_key(rfp_id: str):
    return make_key("rfp", rfp_id)


def proposals_key(rfp_id: str):
    return make_key("proposals", rfp_id)


def comparison_key(rfp_id: str):
    return make_key("comparison", rfp_id)


class RfpDirectory:
    """
    Read side of the orchestrator.

    All reads go through the shared `RequestCache`, so repeated views of
    the same list or record cost one request until a mutation invalidates
    them. The directory also remembers which RFPs this process has sent,
    so a stale read can never show a sent RFP as draft again.
    """

    def __init__(self, client: BackendClient, cache: RequestCache):
        self.client = client
        self.cache = cache
        self._sent_ids: Set[str] = set()

    def mark_sent(self, rfp_id: str) -> None:
        self._sent_ids.add(rfp_id)

    def known_status(self, rfp_id: str) -> RfpStatus:
        return RfpStatus.SENT if rfp_id in self._sent_ids else RfpStatus.DRAFT

    def _apply_known_status(self, rfps: List[PersistedRfp]) -> List[PersistedRfp]:
        result = []
        for rfp in rfps:
            if rfp.status == RfpStatus.SENT:
                self._sent_ids.add(rfp.id)
            elif rfp.id in self._sent_ids:
                logger.debug(f"Store reported draft for sent RFP {rfp.id}, keeping sent")
                rfp = rfp.model_copy(update={"status": RfpStatus.SENT})
            result.append(rfp)
        return result

    def invalidate_rfp(self, rfp_id: str) -> None:
        """Drop the RFP list and this RFP's detail entry."""
        self.cache.invalidate(RFPS_KEY)
        self.cache.invalidate(rfp_key(rfp_id))

    async def list_rfps(self, refresh: bool = False) -> RfpListResult:
        """All persisted RFPs, in store order."""
        if refresh:
            self.cache.invalidate(RFPS_KEY)
        try:
            rfps = await self.cache.get_or_fetch(RFPS_KEY, self.client.fetch_all_rfps)
        except OrchestratorError as e:
            logger.error(f"Failed to fetch RFPs: {e.message}")
            return RfpListResult.from_error(e)
        return RfpListResult(rfps=self._apply_known_status(rfps))

    async def get_rfp(self, rfp_id: str, refresh: bool = False) -> RfpLookupResult:
        """
        Look up one RFP by ID.

        The backend only exposes the full list, so the detail entry is
        derived from it and cached under its own key.
        """
        if refresh:
            self.invalidate_rfp(rfp_id)

        async def _lookup():
            listing = await self.cache.get_or_fetch(RFPS_KEY, self.client.fetch_all_rfps)
            return next((rfp for rfp in listing if rfp.id == rfp_id), None)

        try:
            rfp = await self.cache.get_or_fetch(rfp_key(rfp_id), _lookup)
        except OrchestratorError as e:
            logger.error(f"Failed to fetch RFP {rfp_id}: {e.message}")
            return RfpLookupResult.from_error(e)

        if rfp is None:
            logger.warning(f"RFP not found: {rfp_id}")
            return RfpLookupResult(rfp=None)
        return RfpLookupResult(rfp=self._apply_known_status([rfp])[0])

    async def list_vendors(self, refresh: bool = False) -> VendorListResult:
        if refresh:
            self.cache.invalidate(VENDORS_KEY)
        try:
            vendors = await self.cache.get_or_fetch(VENDORS_KEY, self.client.fetch_vendors)
        except OrchestratorError as e:
            logger.error(f"Failed to fetch vendors: {e.message}")
            return VendorListResult.from_error(e)
        return VendorListResult(vendors=vendors)

    async def list_proposals(self, rfp_id: str, refresh: bool = False) -> ProposalListResult:
        if refresh:
            self.cache.invalidate(proposals_key(rfp_id))
        try:
            bundle = await self.cache.get_or_fetch(
                proposals_key(rfp_id),
                lambda: self.client.fetch_proposals(rfp_id)
            )
        except OrchestratorError as e:
            logger.error(f"Failed to fetch proposals for {rfp_id}: {e.message}")
            return ProposalListResult.from_error(e)
        return ProposalListResult(bundle=bundle)
