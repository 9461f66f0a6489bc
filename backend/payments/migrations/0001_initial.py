import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("doc_requests", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Payment",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="Created At")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="Updated At")),
                (
                    "proof_of_payment",
                    models.CharField(
                        help_text="Reference (stored filename or URL) of the uploaded proof.",
                        max_length=255,
                        verbose_name="Proof of Payment",
                    ),
                ),
                ("remarks", models.TextField(blank=True, default="", verbose_name="Remarks")),
                (
                    "request",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="payments",
                        to="doc_requests.documentrequest",
                        verbose_name="Request",
                    ),
                ),
            ],
            options={
                "verbose_name": "Payment",
                "verbose_name_plural": "Payments",
                "ordering": ["-created_at", "-id"],
            },
        ),
    ]
