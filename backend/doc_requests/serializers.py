"""
Document-requests app serializers.

Read serializers expose the enrichment attributes that
``RequestEnrichmentService`` attaches to each instance; write serializers
only validate the shape of the input, business rules live in
``doc_requests.services``.
"""

from __future__ import annotations

from rest_framework import serializers

from .models import ClaimSlip, DocumentRequest, RequestStatus, RequestStatusLog


class DocumentRequestSerializer(serializers.ModelSerializer):
    """
    Enriched request representation.

    ``user_name``, ``student_id``, ``document_name`` and
    ``proof_of_payment`` are ``None`` when the underlying record is missing.
    """

    reference_code = serializers.CharField(read_only=True)
    user_name = serializers.CharField(read_only=True, allow_null=True, default=None)
    student_id = serializers.CharField(read_only=True, allow_null=True, default=None)
    document_name = serializers.CharField(read_only=True, allow_null=True, default=None)
    proof_of_payment = serializers.CharField(read_only=True, allow_null=True, default=None)

    class Meta:
        model = DocumentRequest
        fields = [
            "id",
            "reference_code",
            "user",
            "user_name",
            "student_id",
            "document",
            "document_name",
            "status",
            "copies",
            "purpose",
            "date_needed",
            "date_ready",
            "proof_of_payment",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class RequestFilterSerializer(serializers.Serializer):
    """
    Query parameters for ``GET /api/requests/``.

    ``status`` is matched case-insensitively by the query service.
    ``user`` is honoured for registrars only.
    """

    status = serializers.CharField(required=False, allow_blank=True)
    user = serializers.IntegerField(required=False, min_value=1)


class DocumentRequestCreateSerializer(serializers.Serializer):
    """
    Request body for ``POST /api/requests/``.

    The owner is always the caller and the status is always PENDING, so
    neither is accepted here.
    """

    document = serializers.IntegerField(help_text="PK of the catalog document.")
    copies = serializers.IntegerField(min_value=1, default=1)
    date_needed = serializers.DateField(required=False, allow_null=True, default=None)
    purpose = serializers.CharField(required=False, allow_blank=True, default="")


class DocumentRequestUpdateSerializer(serializers.Serializer):
    """
    Request body for ``PATCH /api/requests/{id}/``.

    Only keys present in the body are forwarded.  Unknown keys are passed
    through untouched so the service can reject them by name.
    """

    document = serializers.IntegerField(required=False)
    copies = serializers.IntegerField(required=False, min_value=1)
    date_needed = serializers.DateField(required=False, allow_null=True)
    purpose = serializers.CharField(required=False, allow_blank=True)

    def to_internal_value(self, data):
        validated = super().to_internal_value(data)
        for key in data:
            if key not in self.fields:
                validated[key] = data[key]
        return validated


class StatusChangeSerializer(serializers.Serializer):
    """
    Request body for ``POST /api/requests/{id}/status/``.

    ``new_status`` is matched case-insensitively by the workflow service,
    which also reports unknown values.
    """

    new_status = serializers.CharField(
        help_text=f"One of: {', '.join(RequestStatus.values)} (case-insensitive).",
    )
    remarks = serializers.CharField(required=False, allow_blank=True, default="", max_length=2000)
    date_ready = serializers.CharField(
        required=False,
        allow_blank=True,
        allow_null=True,
        default=None,
        help_text="Preferred ready date (YYYY-MM-DD or ISO date-time); first approval only.",
    )


class RequestStatusLogSerializer(serializers.ModelSerializer):
    """Audit entry; ``changed_by_name`` is set only for registrar actors."""

    changed_by_name = serializers.CharField(read_only=True, allow_null=True, default=None)

    class Meta:
        model = RequestStatusLog
        fields = [
            "id",
            "request",
            "old_status",
            "new_status",
            "changed_by",
            "changed_by_name",
            "remarks",
            "changed_at",
        ]
        read_only_fields = fields


class StatusLogRemarksSerializer(serializers.Serializer):
    remarks = serializers.CharField(allow_blank=True, max_length=2000)


class ClaimSlipSerializer(serializers.ModelSerializer):

    class Meta:
        model = ClaimSlip
        fields = ["id", "request", "claim_number", "date_ready", "issued_by", "created_at"]
        read_only_fields = fields
