"""
URL routing for reservation deposit endpoints.
"""

from django.urls import path

from apps.web.payments import views, webhooks

app_name = "payments"

urlpatterns = [
    # Customer
    path(
        "reservation/create-intent",
        views.create_intent,
        name="reservation-create-intent",
    ),
    path("reservation/confirm", views.confirm_payment, name="reservation-confirm"),
    path(
        "reservation/status/<int:reservation_id>",
        views.payment_status,
        name="reservation-status",
    ),
    path(
        "reservation/refund/<int:reservation_id>",
        views.refund_payment,
        name="reservation-refund",
    ),
    path("verify-payment", views.verify_payment, name="verify-payment"),
    # Staff
    path("admin/reservations", views.admin_list_payments, name="admin-list"),
    path(
        "admin/reservation/<int:payment_id>",
        views.admin_update_payment,
        name="admin-update",
    ),
    # Processor callbacks
    path("webhooks/stripe", webhooks.stripe_webhook, name="stripe-webhook"),
]
