from django.contrib import admin

from .models import ClaimSlip, DocumentRequest, RequestStatusLog


class RequestStatusLogInline(admin.TabularInline):
    model = RequestStatusLog
    extra = 0
    readonly_fields = ("old_status", "new_status", "changed_by", "changed_at")
    can_delete = False


@admin.register(DocumentRequest)
class DocumentRequestAdmin(admin.ModelAdmin):
    list_display = ("id", "user", "document", "status", "copies", "date_needed", "date_ready", "created_at")
    list_filter = ("status", "document")
    search_fields = ("user__username", "user__student_id", "document__name", "purpose")
    readonly_fields = ("status", "date_ready", "created_at", "updated_at")
    inlines = [RequestStatusLogInline]


@admin.register(RequestStatusLog)
class RequestStatusLogAdmin(admin.ModelAdmin):
    list_display = ("id", "request", "old_status", "new_status", "changed_by", "changed_at")
    list_filter = ("new_status",)
    readonly_fields = ("request", "old_status", "new_status", "changed_by", "changed_at")


@admin.register(ClaimSlip)
class ClaimSlipAdmin(admin.ModelAdmin):
    list_display = ("claim_number", "request", "date_ready", "issued_by", "created_at")
    search_fields = ("claim_number",)
