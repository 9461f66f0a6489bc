"""
Management command: seed_documents
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~

Seeds the catalog with the institution's default requestable documents.

The command is **idempotent** — safe to run multiple times.  Documents
are matched by name; existing ones keep their id and get their
description refreshed, missing ones are created.

Usage::

    python manage.py seed_documents
"""

from django.core.management.base import BaseCommand
from django.db import transaction

from catalog.models import Document

# ────────────────────────────────────────────────────────────────────
# Default catalog:  name → description
# ────────────────────────────────────────────────────────────────────

DEFAULT_DOCUMENTS: dict[str, str] = {
    "Transcript of Records": "Official transcript containing all academic records and grades",
    "Certificate of Enrollment": "Certificate confirming current enrollment status",
    "Good Moral Certificate": "Certificate attesting to good moral character",
    "Diploma Copy": "Copy of the official diploma",
    "True Copy of Grades (TCG)": "True copy of academic grades",
    "Transfer Credential": "Credential for transferring to another institution",
    "Student Clearance": "Clearance document for students",
    "Study Load": "Document showing current study load",
    "Authentication/CAV/Apostille": "Authentication, CAV, or Apostille services",
}


class Command(BaseCommand):
    help = "Create the default document catalog (idempotent)."

    @transaction.atomic
    def handle(self, *args, **options):
        created_count = 0
        for name, description in DEFAULT_DOCUMENTS.items():
            _, created = Document.objects.update_or_create(
                name=name,
                defaults={"description": description},
            )
            if created:
                created_count += 1
                self.stdout.write(f"  + {name}")

        self.stdout.write(self.style.SUCCESS(
            f"Document catalog ready: {created_count} created, "
            f"{Document.objects.count()} total."
        ))
