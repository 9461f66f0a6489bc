from django.contrib import admin

from .models import Payment


@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    list_display = ("id", "request", "proof_of_payment", "created_at")
    search_fields = ("proof_of_payment", "remarks")
