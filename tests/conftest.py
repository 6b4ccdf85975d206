"""Pytest fixtures and configuration for RFP Orchestrator tests."""

import asyncio
import json
import os
import re
from datetime import datetime, timezone
from typing import Any, Dict, Generator, List, Optional, Tuple

import httpx
import pytest
from fastapi.testclient import TestClient

# Set test environment variables before importing the app
os.environ.setdefault("BACKEND_API_URL", "http://backend.test")
os.environ.setdefault("BACKEND_AUTH_TOKEN", "")
os.environ.setdefault("BACKEND_TIMEOUT_SECONDS", "5")
os.environ.setdefault("DEBUG", "true")

from rfp_orchestrator.core.cache import RequestCache  # noqa: E402
from rfp_orchestrator.core.credentials import CredentialStore  # noqa: E402
from rfp_orchestrator.integrations.backend import BackendClient  # noqa: E402
from rfp_orchestrator.services.workflow import RfpWorkflow, get_workflow  # noqa: E402


SCENARIO_DESCRIPTION = "Need 25 desktops, 10 projectors, budget $40,000, 45 days delivery"


# ===========================================
# Fake Backend
# ===========================================

class FakeBackend:
    """
    In-memory stand-in for the RFP/vendor backend.

    Served through `httpx.MockTransport`. Records every call, supports
    one-shot failure injection per (method, path) and gates that hold a
    response until the test releases them.
    """

    def __init__(self):
        self.rfps: Dict[str, Dict[str, Any]] = {}
        self.vendors: List[Dict[str, Any]] = [
            {
                "_id": vendor_id,
                "name": name,
                "email": f"sales@{name.lower().replace(' ', '')}.com",
                "phone": "+1 415 555 0100",
                "address": "1 Market St, San Francisco",
                "createdAt": "2026-01-05T10:00:00.000Z",
            }
            for vendor_id, name in (("v1", "Acme Supply"), ("v2", "Globex"), ("v3", "Initech"))
        ]
        self.comparisons: Dict[str, Optional[Dict[str, Any]]] = {}
        self.proposals: Dict[str, List[Dict[str, Any]]] = {}
        self.calls: List[Tuple[str, str]] = []
        self.auth_headers: List[Optional[str]] = []
        self.failures: Dict[Tuple[str, str], Any] = {}
        self.responses: Dict[Tuple[str, str], Dict[str, Any]] = {}
        self.gates: Dict[str, asyncio.Event] = {}
        self.stale_status = False
        self._counter = 0

    # ---- test helpers ----

    def fail_next(self, method: str, path: str, failure: Any) -> None:
        """Fail the next call: an int status, "transport" or "timeout"."""
        self.failures[(method, path)] = failure

    def respond_next(self, method: str, path: str, body: Dict[str, Any]) -> None:
        """Answer the next call with `body` and status 200."""
        self.responses[(method, path)] = body

    def call_count(self, method: str, path: str) -> int:
        return self.calls.count((method, path))

    def seed_rfp(self, status: str = "draft", vendors: Optional[List[str]] = None) -> str:
        self._counter += 1
        rfp_id = f"rfp-{self._counter}"
        self.rfps[rfp_id] = {
            "_id": rfp_id,
            "title": "Office Equipment",
            "descriptionRaw": SCENARIO_DESCRIPTION,
            "descriptionStructured": _structure(SCENARIO_DESCRIPTION)["descriptionStructured"],
            "status": status,
            "vendorsInvited": list(vendors or []),
            "createdAt": datetime.now(timezone.utc).isoformat(),
            "__v": 0,
        }
        return rfp_id

    # ---- transport ----

    async def handler(self, request: httpx.Request) -> httpx.Response:
        method, path = request.method, request.url.path
        self.calls.append((method, path))
        self.auth_headers.append(request.headers.get("Authorization"))

        gate = self.gates.get(path)
        if gate is not None:
            await gate.wait()

        failure = self.failures.pop((method, path), None)
        if failure == "transport":
            raise httpx.ConnectError("connection refused", request=request)
        if failure == "timeout":
            raise httpx.ReadTimeout("timed out", request=request)
        if isinstance(failure, int):
            return httpx.Response(failure, json={"code": failure, "message": f"Injected {failure}"})

        canned = self.responses.pop((method, path), None)
        if canned is not None:
            return httpx.Response(200, json=canned)

        body = _json(request)

        if method == "POST" and path == "/rfp/generate-rfp":
            return httpx.Response(200, json={
                "code": 200,
                "message": "RFP generated",
                "structuredRfp": _structure(body.get("description", "")),
            })

        if method == "POST" and path == "/rfp/create":
            self._counter += 1
            rfp_id = f"rfp-{self._counter}"
            structured = dict(body.get("descriptionStructured") or {})
            structured["items"] = [
                dict(item, _id=f"{rfp_id}-item-{index}")
                for index, item in enumerate(structured.get("items") or [])
            ]
            self.rfps[rfp_id] = {
                "_id": rfp_id,
                "title": body.get("title"),
                "descriptionRaw": body.get("descriptionRaw"),
                "descriptionStructured": structured,
                "status": "draft",
                "vendorsInvited": [],
                "createdAt": datetime.now(timezone.utc).isoformat(),
                "__v": 0,
            }
            return httpx.Response(201, json={
                "code": 201, "success": True, "message": "RFP created", "data": {"_id": rfp_id}
            })

        if method == "GET" and path == "/rfp/fetch-all-rfp":
            records = list(self.rfps.values())
            if self.stale_status:
                records = [dict(record, status="draft") for record in records]
            return httpx.Response(200, json={"code": 200, "message": "ok", "data": records})

        if method == "GET" and path == "/vendor/fetch-vendors":
            return httpx.Response(200, json={"code": 200, "message": "ok", "data": self.vendors})

        match = re.fullmatch(r"/rfp/([^/]+)/(vendors|send|compare|proposals)", path)
        if match:
            rfp_id, action = match.groups()
            record = self.rfps.get(rfp_id)
            if record is None:
                return httpx.Response(404, json={"code": 404, "message": "RFP not found"})

            if action == "vendors":
                record["vendorsInvited"] = list(dict.fromkeys(body.get("vendorIds") or []))
                return httpx.Response(200, json={"code": 200, "message": "Vendors assigned"})

            if action == "send":
                invited = record["vendorsInvited"] + list(body.get("vendorIds") or [])
                record["vendorsInvited"] = list(dict.fromkeys(invited))
                record["status"] = "sent"
                return httpx.Response(200, json={"code": 200, "message": "RFP sent"})

            if action == "compare":
                comparison = self.comparisons.get(rfp_id)
                total = len(comparison["comparisonTable"]) if comparison else 0
                return httpx.Response(200, json={
                    "code": 200,
                    "message": "ok",
                    "data": {
                        "rfpId": rfp_id,
                        "rfpTitle": record["title"],
                        "totalProposals": total,
                        "comparison": comparison,
                    },
                })

            proposals = self.proposals.get(rfp_id, [])
            return httpx.Response(200, json={
                "code": 200,
                "message": "ok",
                "data": {
                    "rfpId": rfp_id,
                    "rfpTitle": record["title"],
                    "totalProposals": len(proposals),
                    "proposals": proposals,
                },
            })

        return httpx.Response(404, json={"code": 404, "message": f"No route for {method} {path}"})


def _json(request: httpx.Request) -> Dict[str, Any]:
    if not request.content:
        return {}
    return json.loads(request.content)


def _structure(description: str) -> Dict[str, Any]:
    """Deterministic stand-in for the generation engine."""
    items = [
        {"item": name, "quantity": int(qty), "specs": None}
        for qty, name in re.findall(r"(\d+)\s+([A-Za-z]+)", description)
        if not name.lower().startswith("day")
    ]
    # The engine occasionally emits a blank trailing row.
    items.append({"item": "", "quantity": 0, "specs": None})

    budget = re.search(r"\$([\d,]+)", description)
    days = re.search(r"(\d+)\s+days", description)
    return {
        "title": "Office Equipment Procurement",
        "descriptionRaw": description,
        "descriptionStructured": {
            "budget": float(budget.group(1).replace(",", "")) if budget else None,
            "currency": "USD",
            "currencySymbol": "$",
            "deliveryTimeline": f"{days.group(1)} days" if days else None,
            "paymentTerms": None,
            "warranty": None,
            "items": items,
        },
    }


def sample_comparison(vendor_ids=("v1", "v2")) -> Dict[str, Any]:
    """Comparison payload in the backend's wire shape."""
    rows = [
        {
            "vendorId": vendor_id,
            "vendorName": f"Vendor {vendor_id}",
            "totalPrice": 38000 + index * 1500,
            "currency": "$",
            "deliveryTimeline": f"{30 + index * 10} days",
            "paymentTerms": "Net 30",
            "warranty": "1 year",
            "overallScore": 8.5 - index,
            "priceScore": 9 - index,
            "strengths": ["Competitive price"],
            "weaknesses": [],
        }
        for index, vendor_id in enumerate(vendor_ids)
    ]
    return {
        "summary": {
            "totalProposals": len(rows),
            "bestPrice": {"vendorId": vendor_ids[0], "vendorName": f"Vendor {vendor_ids[0]}", "price": 38000, "currency": "$"},
            "bestDelivery": {"vendorId": vendor_ids[0], "vendorName": f"Vendor {vendor_ids[0]}", "timeline": "30 days"},
            "bestOverall": {"vendorId": vendor_ids[0], "vendorName": f"Vendor {vendor_ids[0]}", "score": 8.5, "reason": "Lowest price"},
        },
        "comparisonTable": rows,
        "recommendation": {
            "recommendedVendorId": vendor_ids[0],
            "recommendedVendorName": f"Vendor {vendor_ids[0]}",
            "reasoning": "Lowest total price with the fastest delivery.",
            "keyFactors": ["Price", "Delivery"],
        },
    }


# ===========================================
# Component Fixtures
# ===========================================

@pytest.fixture
def fake_backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def credentials() -> CredentialStore:
    return CredentialStore("test-token")


@pytest.fixture
def backend_client(fake_backend, credentials) -> BackendClient:
    """Backend client wired to the fake backend."""
    return BackendClient(
        base_url="http://backend.test",
        timeout=5.0,
        credentials=credentials,
        transport=httpx.MockTransport(fake_backend.handler)
    )


@pytest.fixture
def cache() -> RequestCache:
    """Fresh cache per test."""
    return RequestCache()


@pytest.fixture
def workflow(backend_client, cache) -> RfpWorkflow:
    return RfpWorkflow(client=backend_client, cache=cache)


# ===========================================
# Client Fixtures
# ===========================================

@pytest.fixture
def client(workflow) -> Generator[TestClient, None, None]:
    """Test client with the workflow bound to the fake backend."""
    from rfp_orchestrator.main import app

    app.dependency_overrides[get_workflow] = lambda: workflow
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


# ===========================================
# Pytest Configuration
# ===========================================

def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
