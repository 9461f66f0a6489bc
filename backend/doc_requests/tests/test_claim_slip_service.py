"""
Tests for claim-number formatting and one-time claim-slip issuance.
"""

from __future__ import annotations

import datetime

import pytest
from django.utils import timezone

from core.domain.exceptions import NotFound
from doc_requests.models import ClaimSlip, DocumentRequest
from doc_requests.services import ClaimSlipService, build_claim_number


class TestBuildClaimNumber:

    @pytest.mark.parametrize(
        "request_id,year,expected",
        [
            (42, 2025, "REQ-2025-042"),
            (7, 2024, "REQ-2024-007"),
            (1234, 2026, "REQ-2026-1234"),
        ],
    )
    def test_format(self, request_id, year, expected):
        assert build_claim_number(request_id, year) == expected


class BlindClaimSlipService(ClaimSlipService):
    """Never sees an existing slip before creating, as in a lost race."""

    @staticmethod
    def find_by_request_id(request_id):
        return None


@pytest.mark.django_db
class TestIssue:

    @pytest.fixture()
    def doc_request(self, create_student, create_document):
        return DocumentRequest.objects.create(user=create_student(), document=create_document())

    def test_issue_uses_request_date_ready(self, doc_request, create_registrar):
        registrar = create_registrar()
        doc_request.date_ready = timezone.make_aware(datetime.datetime(2025, 6, 10, 12, 0))
        doc_request.save(update_fields=["date_ready"])

        slip, created = ClaimSlipService().issue(
            doc_request=doc_request, issued_by=registrar, today=datetime.date(2025, 6, 1),
        )

        assert created is True
        assert slip.claim_number == build_claim_number(doc_request.pk, 2025)
        assert slip.date_ready == datetime.date(2025, 6, 10)
        assert slip.issued_by_id == registrar.pk

    def test_issue_defaults_to_today(self, doc_request, create_registrar):
        slip, _ = ClaimSlipService().issue(
            doc_request=doc_request, issued_by=create_registrar(), today=datetime.date(2025, 6, 1),
        )
        assert slip.date_ready == datetime.date(2025, 6, 1)

    def test_second_issue_returns_existing(self, doc_request, create_registrar):
        service = ClaimSlipService()
        first, _ = service.issue(doc_request=doc_request, issued_by=create_registrar(), today=datetime.date(2025, 6, 1))
        again, created = service.issue(doc_request=doc_request, issued_by=create_registrar(), today=datetime.date(2026, 1, 5))

        assert created is False
        assert again.pk == first.pk
        assert again.claim_number == first.claim_number
        assert ClaimSlip.objects.count() == 1

    def test_unique_violation_returns_existing(self, doc_request, create_registrar):
        first, _ = ClaimSlipService().issue(doc_request=doc_request, issued_by=create_registrar(), today=datetime.date(2025, 6, 1))

        again, created = BlindClaimSlipService().issue(
            doc_request=doc_request, issued_by=create_registrar(), today=datetime.date(2025, 6, 2),
        )

        assert created is False
        assert again.pk == first.pk
        assert ClaimSlip.objects.count() == 1

    def test_get_for_request_before_issue(self, doc_request):
        with pytest.raises(NotFound):
            ClaimSlipService().get_for_request(doc_request.pk)
