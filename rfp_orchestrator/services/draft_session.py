"""RFP Draft Session - lifecycle of one in-progress RFP."""

import asyncio
import logging
import uuid
from typing import Optional

from rfp_orchestrator.core.cache import RequestCache, make_key
from rfp_orchestrator.core.errors import OrchestratorError
from rfp_orchestrator.integrations.backend import BackendClient
from rfp_orchestrator.models import (
    RfpDraft,
    StructuredRfp,
    GenerationState,
    SessionState,
    ErrorKind,
    GenerateResult,
    PersistResult,
)
from rfp_orchestrator.services.rfp_directory import RfpDirectory

logger = logging.getLogger(__name__)


class RfpDraftSession:
    """
    Owns a single draft from raw text to a persisted RFP ID.

    State machine:
        IDLE -> GENERATING -> {READY, FAILED}
        READY -> PERSISTING -> {PERSISTED, READY}

    At most one generate or persist is outstanding. A repeated call of the
    same kind while one is outstanding issues no request and returns the
    outstanding call's outcome; any other call is rejected. `discard()`
    is valid from any state and makes the session ignore late responses.
    """

    def __init__(
        self,
        client: BackendClient,
        cache: RequestCache,
        directory: RfpDirectory,
        session_id: Optional[str] = None
    ):
        self.session_id = session_id or uuid.uuid4().hex
        self.client = client
        self.cache = cache
        self.directory = directory

        self.state = SessionState.IDLE
        self.draft: Optional[RfpDraft] = None
        self.rfp_id: Optional[str] = None
        self.last_error: Optional[str] = None
        self.input_text: str = ""

        self._inflight: Optional[asyncio.Future] = None
        self._epoch = 0

    @property
    def busy(self) -> bool:
        return self._inflight is not None and not self._inflight.done()

    # ===========================================
    # Generation
    # ===========================================

    async def generate(self, raw_description: Optional[str] = None) -> GenerateResult:
        """
        Convert a natural-language description into a structured RFP.

        Args:
            raw_description: Text to submit (defaults to `input_text`)

        Returns:
            GenerateResult with the structure on success
        """
        if self.busy:
            if self.state == SessionState.GENERATING:
                logger.info(f"Session {self.session_id}: generation already in flight, joining")
                return await asyncio.shield(self._inflight)
            return GenerateResult.failure(
                ErrorKind.VALIDATION,
                f"Cannot generate while session is {self.state.value}"
            )

        text = (raw_description if raw_description is not None else self.input_text).strip()
        if not text:
            return GenerateResult.failure(ErrorKind.VALIDATION, "Description must not be empty")

        self.input_text = raw_description if raw_description is not None else self.input_text
        self.draft = RfpDraft(raw_description=text, generation_state=GenerationState.GENERATING)
        self.rfp_id = None
        self.last_error = None
        self.state = SessionState.GENERATING

        logger.info(f"Session {self.session_id}: generating RFP ({len(text)} chars)")
        self._inflight = asyncio.ensure_future(self._run_generate(self.draft, self._epoch))
        return await asyncio.shield(self._inflight)

    async def retry(self) -> GenerateResult:
        """Re-submit the last failed input verbatim."""
        if self.state != SessionState.FAILED or self.draft is None:
            return GenerateResult.failure(
                ErrorKind.VALIDATION,
                "Nothing to retry: last generation did not fail"
            )
        return await self.generate(self.draft.raw_description)

    async def _run_generate(self, draft: RfpDraft, epoch: int) -> GenerateResult:
        try:
            structured = await self.cache.get_or_fetch(
                make_key("generate-rfp", draft.raw_description),
                lambda: self.client.generate_rfp(draft.raw_description),
                retain=False
            )
            result = GenerateResult(structured=structured)
        except OrchestratorError as e:
            logger.error(f"Session {self.session_id}: generation failed - {e.message}")
            result = GenerateResult.from_error(e)

        if epoch != self._epoch or draft is not self.draft:
            logger.info(f"Session {self.session_id}: ignoring late generation response")
            return result

        if result.success:
            draft.structured = result.structured
            draft.generation_state = GenerationState.READY
            self.state = SessionState.READY
            self.input_text = ""
            logger.info(f"Session {self.session_id}: RFP ready - {result.structured.title!r}")
        else:
            draft.generation_state = GenerationState.FAILED
            draft.failure_reason = result.error
            self.last_error = result.error
            self.state = SessionState.FAILED
        return result

    # ===========================================
    # Persistence
    # ===========================================

    async def persist(self, structured: Optional[StructuredRfp] = None) -> PersistResult:
        """
        Save the reviewed RFP.

        Args:
            structured: Possibly edited structure; defaults to the generated one

        Returns:
            PersistResult with the store-assigned RFP ID on success
        """
        if self.busy:
            if self.state == SessionState.PERSISTING:
                logger.info(f"Session {self.session_id}: persist already in flight, joining")
                return await asyncio.shield(self._inflight)
            return PersistResult.failure(
                ErrorKind.VALIDATION,
                f"Cannot persist while session is {self.state.value}"
            )

        if self.state != SessionState.READY:
            return PersistResult.failure(
                ErrorKind.VALIDATION,
                f"Cannot persist from state {self.state.value}; generate an RFP first"
            )

        payload = structured or self.draft.structured
        self.state = SessionState.PERSISTING
        self.last_error = None

        logger.info(f"Session {self.session_id}: persisting RFP {payload.title!r}")
        self._inflight = asyncio.ensure_future(self._run_persist(payload, self._epoch))
        return await asyncio.shield(self._inflight)

    async def _run_persist(self, structured: StructuredRfp, epoch: int) -> PersistResult:
        try:
            rfp_id = await self.client.create_rfp(structured)
            result = PersistResult(rfp_id=rfp_id)
        except OrchestratorError as e:
            logger.error(f"Session {self.session_id}: persist failed - {e.message}")
            result = PersistResult.from_error(e)

        if result.success:
            # Store holds the record even if this session was discarded.
            self.directory.invalidate_rfp(result.rfp_id)

        if epoch != self._epoch:
            logger.info(f"Session {self.session_id}: ignoring late persist response")
            return result

        if result.success:
            self.rfp_id = result.rfp_id
            self.draft.structured = structured
            self.state = SessionState.PERSISTED
            logger.info(f"Session {self.session_id}: persisted as {result.rfp_id}")
        else:
            self.last_error = result.error
            self.state = SessionState.READY
        return result

    # ===========================================
    # Discard
    # ===========================================

    def discard(self) -> None:
        """Return to IDLE and drop the draft. No network call."""
        self._epoch += 1
        self._inflight = None
        self.draft = None
        self.rfp_id = None
        self.last_error = None
        self.input_text = ""
        self.state = SessionState.IDLE
        logger.info(f"Session {self.session_id}: discarded")

    def snapshot(self) -> dict:
        """Serializable view of the session for callers."""
        return {
            "session_id": self.session_id,
            "state": self.state.value,
            "rfp_id": self.rfp_id,
            "last_error": self.last_error,
            "input_text": self.input_text,
            "draft": self.draft.model_dump(mode="json", by_alias=False) if self.draft else None,
        }
