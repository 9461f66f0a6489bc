"""
Payments app Service Layer.

``PaymentLedger`` answers "which proof of payment belongs to this
request?" for request enrichment, and records new proofs for the
request's owner.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable

from django.db.models import QuerySet

from core.domain.exceptions import InvalidArgument

from .models import Payment

logger = logging.getLogger(__name__)


class PaymentLedger:

    def list_for_request(self, request_id: Any) -> QuerySet:
        return Payment.objects.filter(request_id=request_id).order_by("-created_at", "-id")

    def find_by_request_id(self, request_id: Any) -> Payment | None:
        """Most recent payment recorded for ``request_id``, or ``None``."""
        return self.list_for_request(request_id).first()

    def latest_by_request_ids(self, request_ids: Iterable[Any]) -> dict[Any, Payment]:
        """
        Bulk variant of ``find_by_request_id`` — one query for a whole
        page of requests.  Requests without payments are absent.
        """
        ids = set(request_ids)
        if not ids:
            return {}
        latest: dict[Any, Payment] = {}
        for payment in Payment.objects.filter(request_id__in=ids).order_by("-created_at", "-id"):
            latest.setdefault(payment.request_id, payment)
        return latest

    def record(self, *, doc_request: Any, proof_of_payment: str, remarks: str = "") -> Payment:
        proof_of_payment = (proof_of_payment or "").strip()
        if not proof_of_payment:
            raise InvalidArgument("proof_of_payment must not be blank.", value=proof_of_payment)
        payment = Payment.objects.create(
            request=doc_request,
            proof_of_payment=proof_of_payment,
            remarks=remarks or "",
        )
        logger.info("Recorded payment pk=%d for request pk=%d", payment.pk, doc_request.pk)
        return payment
