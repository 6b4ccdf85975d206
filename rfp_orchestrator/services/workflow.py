"""RFP Workflow - wires the orchestrator components around one shared cache."""

import logging
from functools import lru_cache
from typing import Dict, Optional

from rfp_orchestrator.core.cache import RequestCache
from rfp_orchestrator.integrations.backend import BackendClient
from rfp_orchestrator.services.comparison import ComparisonAggregator
from rfp_orchestrator.services.draft_session import RfpDraftSession
from rfp_orchestrator.services.rfp_directory import RfpDirectory
from rfp_orchestrator.services.vendor_assignment import VendorAssignmentCoordinator

logger = logging.getLogger(__name__)


class RfpWorkflow:
    """
    Process-scoped container for the RFP lifecycle.

    Holds the single `RequestCache` and `BackendClient` shared by the
    directory, the vendor coordinator, the comparison aggregator and
    every open draft session. Tests build a fresh instance per test.
    """

    def __init__(
        self,
        client: Optional[BackendClient] = None,
        cache: Optional[RequestCache] = None
    ):
        self.client = client or BackendClient()
        self.cache = cache or RequestCache()
        self.directory = RfpDirectory(self.client, self.cache)
        self.vendors = VendorAssignmentCoordinator(self.client, self.cache, self.directory)
        self.comparisons = ComparisonAggregator(self.client, self.cache)
        self._sessions: Dict[str, RfpDraftSession] = {}
        logger.info(f"RFP workflow initialized against {self.client.base_url}")

    def open_session(self) -> RfpDraftSession:
        """Start a new draft session."""
        session = RfpDraftSession(self.client, self.cache, self.directory)
        self._sessions[session.session_id] = session
        logger.info(f"Opened draft session {session.session_id}")
        return session

    def get_session(self, session_id: str) -> Optional[RfpDraftSession]:
        return self._sessions.get(session_id)

    def close_session(self, session_id: str) -> bool:
        """Discard and forget a session. Returns False if unknown."""
        session = self._sessions.pop(session_id, None)
        if session is None:
            return False
        session.discard()
        return True


@lru_cache()
def get_workflow() -> RfpWorkflow:
    """Get the process-wide workflow instance."""
    return RfpWorkflow()
