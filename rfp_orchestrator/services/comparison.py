"""Comparison Aggregator - fetch and cache the proposal comparison for an RFP."""

import logging

from rfp_orchestrator.core.cache import RequestCache
from rfp_orchestrator.core.errors import OrchestratorError
from rfp_orchestrator.integrations.backend import BackendClient
from rfp_orchestrator.models import ComparisonOutcome, ComparisonFetchResult
from rfp_orchestrator.services.rfp_directory import comparison_key

logger = logging.getLogger(__name__)


class ComparisonAggregator:
    """
    Single-shot comparison fetches with three outcomes: ready, empty, failed.

    There is no background polling; callers re-invoke for freshness.
    Concurrent fetches for one RFP share a request. A ready comparison is
    served from cache until `send` invalidates it or `refresh=True` is
    passed. An empty answer is never retained.
    """

    def __init__(self, client: BackendClient, cache: RequestCache):
        self.client = client
        self.cache = cache

    async def fetch(self, rfp_id: str, refresh: bool = False) -> ComparisonFetchResult:
        key = comparison_key(rfp_id)
        if refresh:
            self.cache.invalidate(key)

        try:
            comparison = await self.cache.get_or_fetch(
                key,
                lambda: self.client.fetch_comparison(rfp_id)
            )
        except OrchestratorError as e:
            logger.error(f"Comparison fetch failed for {rfp_id}: {e.message}")
            return ComparisonFetchResult.from_error(
                e, rfp_id=rfp_id, outcome=ComparisonOutcome.FAILED
            )

        if comparison is None or not comparison.comparison_table:
            self.cache.invalidate(key)
            logger.info(f"No comparison available yet for {rfp_id}")
            return ComparisonFetchResult(
                rfp_id=rfp_id,
                outcome=ComparisonOutcome.EMPTY,
                total_proposals=comparison.total_proposals if comparison else 0,
                comparison=comparison
            )

        return ComparisonFetchResult(
            rfp_id=rfp_id,
            outcome=ComparisonOutcome.READY,
            total_proposals=comparison.total_proposals,
            comparison=comparison
        )
