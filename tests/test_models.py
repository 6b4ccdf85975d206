"""Tests for RFP, vendor and comparison models."""

import pydantic
import pytest

from rfp_orchestrator.services.vendor_assignment import normalize_vendor_ids
from rfp_orchestrator.models import (
    ComparisonResult,
    ErrorKind,
    GenerateResult,
    PersistedRfp,
    RfpDraft,
    RfpRequirements,
    RfpStatus,
    StructuredRfp,
)


class TestRfpRequirements:
    """Tests for structured requirement parsing."""

    def test_display_items_filters_blank_names(self):
        requirements = RfpRequirements.model_validate({
            "items": [
                {"item": "laptops", "quantity": 5, "specs": "16GB RAM"},
                {"item": "", "quantity": 0},
                {"item": "   ", "quantity": 1},
                {"item": "monitors", "quantity": 5},
            ]
        })

        assert len(requirements.items) == 4
        assert [i.item for i in requirements.display_items()] == ["laptops", "monitors"]

    def test_null_entries_dropped(self):
        requirements = RfpRequirements.model_validate({
            "items": [None, {"item": "chairs", "quantity": None, "specs": None}]
        })

        assert len(requirements.items) == 1
        assert requirements.items[0].quantity == 0

    def test_negative_quantity_rejected(self):
        with pytest.raises(pydantic.ValidationError):
            RfpRequirements.model_validate({"items": [{"item": "desks", "quantity": -1}]})

    def test_blank_currency_symbol_defaults(self):
        requirements = RfpRequirements.model_validate({"currencySymbol": None, "currency": ""})

        assert requirements.currency_symbol == "$"
        assert requirements.currency == "USD"

    def test_accepts_snake_and_camel_case(self):
        camel = RfpRequirements.model_validate({"deliveryTimeline": "30 days"})
        snake = RfpRequirements(delivery_timeline="30 days")

        assert camel.delivery_timeline == snake.delivery_timeline == "30 days"


class TestPersistedRfp:
    """Tests for persisted RFP records."""

    def test_wire_record(self):
        rfp = PersistedRfp.model_validate({
            "_id": "rfp-1",
            "title": "Laptops",
            "descriptionRaw": "Need laptops",
            "descriptionStructured": {"items": [{"item": "laptop", "quantity": 2, "_id": "i1"}]},
            "status": "sent",
            "vendorsInvited": ["v1", "v2", "v1"],
            "createdAt": "2026-03-01T12:00:00.000Z",
            "__v": 0,
        })

        assert rfp.id == "rfp-1"
        assert rfp.status == RfpStatus.SENT
        assert rfp.vendors_invited == ["v1", "v2"]
        assert rfp.description_structured.items[0].id == "i1"
        assert rfp.to_wire()["_id"] == "rfp-1"

    def test_missing_status_defaults_to_draft(self):
        rfp = PersistedRfp.model_validate({"_id": "rfp-2", "status": None, "vendorsInvited": None})

        assert rfp.status == RfpStatus.DRAFT
        assert rfp.vendors_invited == []

    def test_create_payload_excludes_record_fields(self):
        rfp = PersistedRfp.model_validate({"_id": "rfp-3", "title": "Desks", "status": "sent"})

        assert set(rfp.to_create_payload()) == {"title", "descriptionRaw", "descriptionStructured"}


class TestRfpDraft:
    """Tests for the in-memory draft."""

    def test_raw_description_is_fixed(self):
        draft = RfpDraft(raw_description="Need 5 chairs")

        with pytest.raises(pydantic.ValidationError):
            draft.raw_description = "Need 6 chairs"

    def test_structure_can_be_attached(self):
        draft = RfpDraft(raw_description="Need 5 chairs")
        draft.structured = StructuredRfp(title="Chairs")

        assert draft.structured.title == "Chairs"


class TestComparisonResult:
    """Tests for comparison parsing."""

    def test_ranked_puts_unscored_last(self):
        comparison = ComparisonResult.model_validate({
            "comparisonTable": [
                {"vendorId": "a", "overallScore": None},
                {"vendorId": "b", "overallScore": 6},
                {"vendorId": "c", "overallScore": 9},
            ]
        })

        assert [row.vendor_id for row in comparison.ranked()] == ["c", "b", "a"]

    def test_missing_lists_default_empty(self):
        comparison = ComparisonResult.model_validate({
            "comparisonTable": None,
            "recommendation": {"reasoning": "n/a", "keyFactors": []},
        })

        assert comparison.comparison_table == []
        assert comparison.total_proposals == 0


class TestResults:
    """Tests for tagged operation results."""

    def test_failure_is_retryable_for_transport(self):
        result = GenerateResult.failure(ErrorKind.TRANSPORT, "Network error")

        assert not result.success
        assert result.retryable

    def test_validation_failure_not_retryable(self):
        result = GenerateResult.failure(ErrorKind.VALIDATION, "Description must not be empty")

        assert not result.retryable


class TestVendorIdNormalization:
    """Tests for vendor id normalization."""

    def test_dedupes_and_strips(self):
        assert normalize_vendor_ids([" v1", "v2", "v1", "", None, "v3 "]) == ["v1", "v2", "v3"]

    def test_accepts_sets_and_none(self):
        assert normalize_vendor_ids(set()) == []
        assert normalize_vendor_ids(None) == []
        assert normalize_vendor_ids({"v9"}) == ["v9"]
