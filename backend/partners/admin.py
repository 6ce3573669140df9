from django.contrib import admin

from .models import PartnerApplication


@admin.register(PartnerApplication)
class PartnerApplicationAdmin(admin.ModelAdmin):
    list_display = ("business_name", "user", "status", "submitted_at", "decided_at")
    list_filter = ("status",)
    search_fields = ("business_name", "user__email")
    readonly_fields = ("decided_at", "decided_by")
