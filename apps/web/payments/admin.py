"""Admin registration for payment models."""

from django.contrib import admin

from apps.web.payments.models import PaymentTransition, ReservationPayment


class PaymentTransitionInline(admin.TabularInline):
    """Read-only status history within a payment."""

    model = PaymentTransition
    extra = 0
    can_delete = False
    fields = ["created_at", "from_status", "to_status", "source", "note"]
    readonly_fields = ["created_at", "from_status", "to_status", "source", "note"]

    def has_add_permission(self, request, obj=None):  # type: ignore[no-untyped-def]
        return False


@admin.register(ReservationPayment)
class ReservationPaymentAdmin(admin.ModelAdmin):
    """Admin for reservation deposits."""

    list_display = [
        "confirmation_code",
        "amount",
        "currency",
        "status",
        "payment_method",
        "masked_card",
        "paid_at",
        "created_at",
    ]
    list_filter = ["status", "payment_method", "created_at"]
    search_fields = [
        "confirmation_code",
        "reservation__name",
        "reservation__email",
        "charge_authorization_id",
        "transaction_id",
    ]
    readonly_fields = [
        "reservation",
        "amount",
        "currency",
        "payer_reference",
        "charge_authorization_id",
        "transaction_id",
        "paid_at",
        "refund_id",
        "refunded_at",
        "created_at",
        "updated_at",
    ]
    inlines = [PaymentTransitionInline]

    fieldsets = [
        (None, {"fields": ["reservation", "confirmation_code", "user_id"]}),
        (
            "Deposit",
            {"fields": ["amount", "currency", "payment_method", "status"]},
        ),
        (
            "Processor",
            {
                "fields": [
                    "payer_reference",
                    "charge_authorization_id",
                    "transaction_id",
                    "paid_at",
                    "last4_digits",
                    "card_brand",
                    "failure_reason",
                ]
            },
        ),
        ("Refund", {"fields": ["refund_id", "refund_reason", "refunded_at"]}),
        ("Timestamps", {"fields": ["created_at", "updated_at"]}),
    ]
