"""
Tests for ``PaymentLedger``.
"""

from __future__ import annotations

import pytest

from core.domain.exceptions import InvalidArgument
from doc_requests.models import DocumentRequest
from payments.models import Payment
from payments.services import PaymentLedger


@pytest.mark.django_db
class TestPaymentLedger:

    @pytest.fixture()
    def requests_pair(self, create_student, create_document):
        student = create_student()
        document = create_document()
        return (
            DocumentRequest.objects.create(user=student, document=document),
            DocumentRequest.objects.create(user=student, document=document),
        )

    def test_find_by_request_id_without_payments(self, requests_pair):
        assert PaymentLedger().find_by_request_id(requests_pair[0].pk) is None

    def test_record_and_find_latest(self, requests_pair):
        first, second = requests_pair
        ledger = PaymentLedger()
        ledger.record(doc_request=first, proof_of_payment="a.png")
        latest = ledger.record(doc_request=first, proof_of_payment="  b.png ", remarks="GCash")

        assert latest.proof_of_payment == "b.png"
        assert ledger.find_by_request_id(first.pk) == latest
        assert ledger.find_by_request_id(second.pk) is None

    def test_latest_by_request_ids(self, requests_pair):
        first, second = requests_pair
        ledger = PaymentLedger()
        ledger.record(doc_request=first, proof_of_payment="old.png")
        newest = ledger.record(doc_request=first, proof_of_payment="new.png")

        latest = ledger.latest_by_request_ids([first.pk, second.pk])

        assert latest == {first.pk: newest}
        assert ledger.latest_by_request_ids([]) == {}

    @pytest.mark.parametrize("proof", ["", "   ", None])
    def test_blank_proof_rejected(self, requests_pair, proof):
        with pytest.raises(InvalidArgument):
            PaymentLedger().record(doc_request=requests_pair[0], proof_of_payment=proof)
        assert Payment.objects.count() == 0
