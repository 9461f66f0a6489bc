"""
Document-requests app models.

Covers the request lifecycle — a student asks for a document, registrars
move the request through its statuses, every move is audited, and the
first approval issues a claim slip the student presents at pickup.
"""

from __future__ import annotations

from django.conf import settings
from django.db import models

from core.models import TimeStampedModel


# ────────────────────────────────────────────────────────────────────
# Choice enumerations
# ────────────────────────────────────────────────────────────────────

class RequestStatus(models.TextChoices):
    """
    Lifecycle statuses.  Any status may follow any other; only moving a
    request into the status it already has is rejected.
    """

    PENDING = "PENDING", "Pending"
    PROCESSING = "PROCESSING", "Processing"
    APPROVED = "APPROVED", "Approved"
    REJECTED = "REJECTED", "Rejected"
    COMPLETED = "COMPLETED", "Completed"

    @classmethod
    def parse(cls, raw: str | None) -> "RequestStatus | None":
        """
        Case-insensitive lookup by name; ``None`` for anything that is not
        one of the five statuses.
        """
        if not isinstance(raw, str):
            return None
        try:
            return cls[raw.upper()]
        except KeyError:
            return None


# ────────────────────────────────────────────────────────────────────
# Models
# ────────────────────────────────────────────────────────────────────

class DocumentRequest(TimeStampedModel):
    """
    A student's petition for copies of one catalog document.

    * ``status`` only changes through ``RequestWorkflowService.change_status``.
    * ``date_ready`` is written once, on the first move into APPROVED, and
      never overwritten afterwards.
    """

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="document_requests",
        verbose_name="Requested By",
    )
    document = models.ForeignKey(
        "catalog.Document",
        on_delete=models.PROTECT,
        related_name="requests",
        verbose_name="Document",
    )
    status = models.CharField(
        max_length=16,
        choices=RequestStatus.choices,
        default=RequestStatus.PENDING,
        verbose_name="Status",
        db_index=True,
    )
    copies = models.PositiveIntegerField(
        default=1,
        verbose_name="Copies",
    )
    purpose = models.TextField(
        blank=True,
        default="",
        verbose_name="Purpose",
    )
    date_needed = models.DateField(
        null=True,
        blank=True,
        verbose_name="Date Needed",
    )
    date_ready = models.DateTimeField(
        null=True,
        blank=True,
        verbose_name="Date Ready",
        help_text="Set on the first approval; never changed afterwards.",
    )

    class Meta:
        verbose_name = "Document Request"
        verbose_name_plural = "Document Requests"
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["user", "status"], name="doc_request_user_status_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(copies__gte=1),
                name="doc_request_copies_positive",
            ),
        ]

    def __str__(self):
        return f"{self.reference_code} — {self.status}"

    @property
    def reference_code(self) -> str:
        return f"REQ-{self.pk}"


class RequestStatusLog(models.Model):
    """
    Append-only audit trail of every status transition of a request.

    ``changed_by`` is the registrar who performed the transition, never
    the request's owner.  Only ``remarks`` may be corrected afterwards.
    """

    request = models.ForeignKey(
        DocumentRequest,
        on_delete=models.CASCADE,
        related_name="status_logs",
        verbose_name="Request",
    )
    old_status = models.CharField(
        max_length=16,
        null=True,
        blank=True,
        verbose_name="Previous Status",
    )
    new_status = models.CharField(
        max_length=16,
        verbose_name="New Status",
    )
    changed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        related_name="request_status_changes",
        verbose_name="Changed By",
    )
    remarks = models.TextField(
        blank=True,
        default="",
        verbose_name="Remarks",
    )
    changed_at = models.DateTimeField(
        verbose_name="Changed At",
        db_index=True,
    )

    class Meta:
        verbose_name = "Request Status Log"
        verbose_name_plural = "Request Status Logs"
        ordering = ["-changed_at", "-id"]

    def __str__(self):
        return (
            f"Request #{self.request_id}: "
            f"{self.old_status} → {self.new_status}"
        )


class ClaimSlip(models.Model):
    """
    Pickup receipt issued once, on a request's first approval.

    The one-to-one link enforces "at most one slip per request" at the
    database level.  ``claim_number`` (``REQ-<year>-<id:03d>``) is only as
    unique as the request id it embeds.
    """

    request = models.OneToOneField(
        DocumentRequest,
        on_delete=models.CASCADE,
        related_name="claim_slip",
        verbose_name="Request",
    )
    claim_number = models.CharField(
        max_length=32,
        verbose_name="Claim Number",
        db_index=True,
    )
    date_ready = models.DateField(verbose_name="Date Ready")
    issued_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        related_name="issued_claim_slips",
        verbose_name="Issued By",
    )
    created_at = models.DateTimeField(
        auto_now_add=True,
        verbose_name="Created At",
    )

    class Meta:
        verbose_name = "Claim Slip"
        verbose_name_plural = "Claim Slips"

    def __str__(self):
        return self.claim_number
