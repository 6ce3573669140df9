from django.contrib import admin

from .models import Dispute


@admin.register(Dispute)
class DisputeAdmin(admin.ModelAdmin):
    list_display = ("title", "booking", "reporter", "dispute_type", "status", "created_at")
    list_filter = ("status", "dispute_type")
    search_fields = ("title", "reporter__email")
    readonly_fields = ("resolved_by", "resolved_at")
