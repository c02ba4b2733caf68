"""Admin registration for reservation models."""

from django.contrib import admin

from apps.web.reservations.models import Reservation


@admin.register(Reservation)
class ReservationAdmin(admin.ModelAdmin):
    """Admin for reservations."""

    list_display = [
        "confirmation_code",
        "name",
        "date",
        "time",
        "guests",
        "status",
        "payment_status",
    ]
    list_filter = ["status", "payment_status", "date"]
    search_fields = ["confirmation_code", "name", "email", "phone"]
    readonly_fields = ["confirmation_code", "created_at", "updated_at"]
    date_hierarchy = "date"
