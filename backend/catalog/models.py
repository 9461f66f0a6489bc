"""
Catalog app models.

The catalog lists the document types a student may request
(transcripts, certificates, clearances, ...).
"""

from django.db import models

from core.models import TimeStampedModel


class Document(TimeStampedModel):
    """
    A requestable document type.

    Inactive documents stay resolvable by id (existing requests keep
    pointing at them) but are hidden from the catalog listing.
    """

    name = models.CharField(
        max_length=255,
        unique=True,
        verbose_name="Document Name",
    )
    description = models.TextField(
        blank=True,
        default="",
        verbose_name="Description",
    )
    is_active = models.BooleanField(
        default=True,
        verbose_name="Active",
        help_text="Only active documents are offered in the catalog.",
    )

    class Meta:
        verbose_name = "Document"
        verbose_name_plural = "Documents"
        ordering = ["name"]

    def __str__(self):
        return self.name
