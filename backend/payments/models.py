"""
Payments app models.

A ``Payment`` records the proof-of-payment a student attached to one of
their document requests.  The proof itself (an uploaded image) is stored
elsewhere; only its reference is kept here.
"""

from django.db import models

from core.models import TimeStampedModel


class Payment(TimeStampedModel):

    request = models.ForeignKey(
        "doc_requests.DocumentRequest",
        on_delete=models.CASCADE,
        related_name="payments",
        verbose_name="Request",
    )
    proof_of_payment = models.CharField(
        max_length=255,
        verbose_name="Proof of Payment",
        help_text="Reference (stored filename or URL) of the uploaded proof.",
    )
    remarks = models.TextField(
        blank=True,
        default="",
        verbose_name="Remarks",
    )

    class Meta:
        verbose_name = "Payment"
        verbose_name_plural = "Payments"
        ordering = ["-created_at", "-id"]

    def __str__(self):
        return f"Payment #{self.pk} for request #{self.request_id}"
