from django.contrib import admin

from .models import Payment


@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    list_display = ("id", "booking", "amount", "currency", "status", "method", "paid_at")
    list_filter = ("status", "provider")
    search_fields = ("provider_txn_id", "provider_payment_intent", "booking__renter__email")
    readonly_fields = ("provider_txn_id", "provider_payment_intent", "redirect_url")
