from django.contrib import admin

from .models import Booking


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    list_display = ("id", "game", "renter", "owner", "start_date", "end_date", "status", "total_amount")
    list_filter = ("status",)
    search_fields = ("game__name", "renter__email", "owner__email")
    readonly_fields = ("rental_days", "daily_price", "total_rent", "deposit", "total_amount")
