import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("catalog", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="DocumentRequest",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="Created At")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="Updated At")),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("PENDING", "Pending"),
                            ("PROCESSING", "Processing"),
                            ("APPROVED", "Approved"),
                            ("REJECTED", "Rejected"),
                            ("COMPLETED", "Completed"),
                        ],
                        db_index=True,
                        default="PENDING",
                        max_length=16,
                        verbose_name="Status",
                    ),
                ),
                ("copies", models.PositiveIntegerField(default=1, verbose_name="Copies")),
                ("purpose", models.TextField(blank=True, default="", verbose_name="Purpose")),
                ("date_needed", models.DateField(blank=True, null=True, verbose_name="Date Needed")),
                (
                    "date_ready",
                    models.DateTimeField(
                        blank=True,
                        help_text="Set on the first approval; never changed afterwards.",
                        null=True,
                        verbose_name="Date Ready",
                    ),
                ),
                (
                    "document",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="requests",
                        to="catalog.document",
                        verbose_name="Document",
                    ),
                ),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="document_requests",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="Requested By",
                    ),
                ),
            ],
            options={
                "verbose_name": "Document Request",
                "verbose_name_plural": "Document Requests",
                "ordering": ["-created_at", "-id"],
                "indexes": [
                    models.Index(fields=["user", "status"], name="doc_request_user_status_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(copies__gte=1),
                        name="doc_request_copies_positive",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="RequestStatusLog",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("old_status", models.CharField(blank=True, max_length=16, null=True, verbose_name="Previous Status")),
                ("new_status", models.CharField(max_length=16, verbose_name="New Status")),
                ("remarks", models.TextField(blank=True, default="", verbose_name="Remarks")),
                ("changed_at", models.DateTimeField(db_index=True, verbose_name="Changed At")),
                (
                    "changed_by",
                    models.ForeignKey(
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="request_status_changes",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="Changed By",
                    ),
                ),
                (
                    "request",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="status_logs",
                        to="doc_requests.documentrequest",
                        verbose_name="Request",
                    ),
                ),
            ],
            options={
                "verbose_name": "Request Status Log",
                "verbose_name_plural": "Request Status Logs",
                "ordering": ["-changed_at", "-id"],
            },
        ),
        migrations.CreateModel(
            name="ClaimSlip",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("claim_number", models.CharField(db_index=True, max_length=32, verbose_name="Claim Number")),
                ("date_ready", models.DateField(verbose_name="Date Ready")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="Created At")),
                (
                    "issued_by",
                    models.ForeignKey(
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="issued_claim_slips",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="Issued By",
                    ),
                ),
                (
                    "request",
                    models.OneToOneField(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="claim_slip",
                        to="doc_requests.documentrequest",
                        verbose_name="Request",
                    ),
                ),
            ],
            options={
                "verbose_name": "Claim Slip",
                "verbose_name_plural": "Claim Slips",
            },
        ),
    ]
