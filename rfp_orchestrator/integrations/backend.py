"""RFP backend integration - the single network boundary of the orchestrator."""

import logging
from typing import Optional, Dict, Any, List
import httpx
import pydantic

from rfp_orchestrator.core.config import get_settings
from rfp_orchestrator.core.credentials import CredentialStore
from rfp_orchestrator.core.errors import (
    ApplicationError,
    TransportError,
    UnauthorizedError,
)
from rfp_orchestrator.models import (
    StructuredRfp,
    PersistedRfp,
    Vendor,
    ProposalBundle,
    ComparisonResult,
)

logger = logging.getLogger(__name__)

_STATUS_LOG_MESSAGES = {
    401: "Unauthorized access",
    403: "Forbidden access",
    404: "Resource not found",
    500: "Server error",
}


class BackendClient:
    """
    Async client for the RFP/vendor backend.

    Every call goes through `_request`, which attaches the held bearer
    credential, applies the configured timeout, and turns failures into
    `TransportError` (no response) or `ApplicationError` (failure status
    or payload). A 401 clears the held credential.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        credentials: Optional[CredentialStore] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        """
        Initialize the client.

        Args:
            base_url: Backend base URL (defaults to settings)
            timeout: Per-call timeout in seconds (defaults to settings)
            credentials: Credential holder (defaults to one seeded from settings)
            transport: Optional httpx transport, used to stub the backend in tests
        """
        settings = get_settings()
        self.base_url = (base_url or settings.BACKEND_API_URL).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.BACKEND_TIMEOUT_SECONDS
        self.credentials = credentials or CredentialStore(settings.BACKEND_AUTH_TOKEN)
        self._transport = transport

    async def _request(
        self,
        method: str,
        path: str,
        payload: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        """
        Issue one backend call and return the decoded JSON body.

        Raises:
            TransportError: No response (connection failure or timeout)
            UnauthorizedError: Backend answered 401
            ApplicationError: Any other failure status or `success: false` body
        """
        headers = {"Content-Type": "application/json"}
        headers.update(self.credentials.auth_headers())

        logger.debug(f"Request: {method} {path}")

        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self._transport
            ) as client:
                response = await client.request(method, path, json=payload, headers=headers)

        except httpx.TimeoutException:
            logger.error(f"Backend timeout: {method} {path}")
            raise TransportError(f"Request timed out after {self.timeout}s")
        except httpx.TransportError as e:
            logger.error(f"No response received for {method} {path}: {e}")
            raise TransportError()

        logger.debug(f"Response: {response.status_code} {path}")

        body = self._decode(response)

        if response.status_code >= 400:
            message = self._error_message(body, response)
            logger.error(
                f"{_STATUS_LOG_MESSAGES.get(response.status_code, 'Request failed')}: "
                f"{response.status_code} {method} {path} - {message}"
            )
            if response.status_code == 401:
                self.credentials.clear()
                raise UnauthorizedError(message, payload=body)
            raise ApplicationError(message, status_code=response.status_code, payload=body)

        if isinstance(body, dict) and body.get("success") is False:
            message = self._error_message(body, response)
            logger.error(f"Backend reported failure: {method} {path} - {message}")
            raise ApplicationError(message, status_code=response.status_code, payload=body)

        return body if isinstance(body, dict) else {"data": body}

    @staticmethod
    def _decode(response: httpx.Response) -> Any:
        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError:
            return {"message": response.text}

    @staticmethod
    def _error_message(body: Any, response: httpx.Response) -> str:
        if isinstance(body, dict) and body.get("message"):
            return str(body["message"])
        return response.reason_phrase or f"HTTP {response.status_code}"

    @staticmethod
    def _parse(model, data: Any, body: Dict[str, Any]):
        """Validate a backend record; a malformed shape is an application failure."""
        try:
            return model.model_validate(data)
        except pydantic.ValidationError as e:
            first = e.errors()[0]
            location = ".".join(str(part) for part in first["loc"]) or model.__name__
            logger.error(f"Malformed {model.__name__} payload at {location}: {first['msg']}")
            raise ApplicationError(
                f"Malformed backend payload: {location} - {first['msg']}",
                status_code=body.get("code"),
                payload=body
            ) from e

    @staticmethod
    def _payload_of(body: Dict[str, Any], key: str) -> Any:
        """Read `key` at the top level or under `data`."""
        if key in body:
            return body[key]
        data = body.get("data")
        if isinstance(data, dict):
            return data.get(key)
        return None

    # ===========================================
    # RFP Operations
    # ===========================================

    async def generate_rfp(self, description: str) -> StructuredRfp:
        """Ask the generation engine for a structured RFP."""
        body = await self._request("POST", "/rfp/generate-rfp", {"description": description})

        structured = self._payload_of(body, "structuredRfp")
        if not isinstance(structured, dict):
            raise ApplicationError(
                body.get("message") or "Generation returned no structured RFP",
                status_code=body.get("code"),
                payload=body
            )
        return self._parse(StructuredRfp, structured, body)

    async def create_rfp(self, structured: StructuredRfp) -> str:
        """Persist a reviewed RFP and return its store-assigned ID."""
        body = await self._request("POST", "/rfp/create", structured.to_create_payload())

        data = body.get("data")
        rfp_id = (data.get("_id") or data.get("id")) if isinstance(data, dict) else None
        if not rfp_id:
            raise ApplicationError(
                body.get("message") or "Create returned no RFP ID",
                status_code=body.get("code"),
                payload=body
            )
        logger.info(f"RFP created: {rfp_id}")
        return rfp_id

    async def fetch_all_rfps(self) -> List[PersistedRfp]:
        body = await self._request("GET", "/rfp/fetch-all-rfp")
        return [self._parse(PersistedRfp, record, body) for record in body.get("data") or []]

    async def assign_vendors(self, rfp_id: str, vendor_ids: List[str]) -> None:
        """Replace the invited vendor set of an RFP."""
        await self._request("POST", f"/rfp/{rfp_id}/vendors", {"vendorIds": vendor_ids})
        logger.info(f"Assigned {len(vendor_ids)} vendors to RFP {rfp_id}")

    async def send_rfp(self, rfp_id: str, vendor_ids: List[str]) -> None:
        """Dispatch an RFP to the given vendors."""
        await self._request("POST", f"/rfp/{rfp_id}/send", {"vendorIds": vendor_ids})
        logger.info(f"Sent RFP {rfp_id} to {len(vendor_ids)} vendors")

    async def fetch_proposals(self, rfp_id: str) -> ProposalBundle:
        body = await self._request("GET", f"/rfp/{rfp_id}/proposals")
        return self._parse(ProposalBundle, body.get("data") or {}, body)

    async def fetch_comparison(self, rfp_id: str) -> Optional[ComparisonResult]:
        """
        Fetch the comparison view for an RFP.

        Returns:
            ComparisonResult, or None when no proposals have been compared yet
        """
        body = await self._request("GET", f"/rfp/{rfp_id}/compare")

        comparison = self._payload_of(body, "comparison")
        if not comparison:
            return None

        result = self._parse(ComparisonResult, comparison, body)
        data = body.get("data")
        if isinstance(data, dict) and data.get("totalProposals") is not None:
            result.summary.total_proposals = max(
                result.summary.total_proposals,
                int(data["totalProposals"])
            )
        return result

    # ===========================================
    # Vendor Operations
    # ===========================================

    async def fetch_vendors(self) -> List[Vendor]:
        body = await self._request("GET", "/vendor/fetch-vendors")
        return [self._parse(Vendor, record, body) for record in body.get("data") or []]
