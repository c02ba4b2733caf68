import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        ("reservations", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="ReservationPayment",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "reservation",
                    models.OneToOneField(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="payment",
                        to="reservations.reservation",
                    ),
                ),
                ("confirmation_code", models.CharField(blank=True, max_length=20)),
                ("user_id", models.CharField(blank=True, max_length=64)),
                (
                    "amount",
                    models.PositiveIntegerField(
                        help_text="Deposit in smallest currency unit, e.g. cents"
                    ),
                ),
                ("currency", models.CharField(default="usd", max_length=3)),
                (
                    "payment_method",
                    models.CharField(
                        choices=[
                            ("credit_card", "Credit card"),
                            ("debit_card", "Debit card"),
                            ("cash_at_restaurant", "Cash at restaurant"),
                        ],
                        default="credit_card",
                        max_length=32,
                    ),
                ),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("pending", "Pending"),
                            ("completed", "Completed"),
                            ("failed", "Failed"),
                            ("refunded", "Refunded"),
                        ],
                        default="pending",
                        max_length=20,
                    ),
                ),
                (
                    "payer_reference",
                    models.CharField(
                        blank=True, help_text="Stripe Customer ID", max_length=255
                    ),
                ),
                (
                    "charge_authorization_id",
                    models.CharField(
                        blank=True, help_text="Stripe PaymentIntent ID", max_length=255
                    ),
                ),
                ("transaction_id", models.CharField(blank=True, max_length=255)),
                ("paid_at", models.DateTimeField(blank=True, null=True)),
                ("failure_reason", models.TextField(blank=True)),
                ("last4_digits", models.CharField(blank=True, max_length=4)),
                ("card_brand", models.CharField(blank=True, max_length=32)),
                ("refund_id", models.CharField(blank=True, max_length=255)),
                ("refund_reason", models.CharField(blank=True, max_length=255)),
                ("refunded_at", models.DateTimeField(blank=True, null=True)),
            ],
            options={
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["status"], name="payment_status_idx"),
                    models.Index(
                        fields=["charge_authorization_id"],
                        name="payment_authorization_idx",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="PaymentTransition",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                ("from_status", models.CharField(blank=True, max_length=20)),
                (
                    "to_status",
                    models.CharField(
                        choices=[
                            ("pending", "Pending"),
                            ("completed", "Completed"),
                            ("failed", "Failed"),
                            ("refunded", "Refunded"),
                        ],
                        max_length=20,
                    ),
                ),
                (
                    "source",
                    models.CharField(
                        choices=[
                            ("intent", "Intent created"),
                            ("confirm", "Customer confirmation"),
                            ("webhook", "Processor webhook"),
                            ("refund", "Refund"),
                            ("admin", "Admin override"),
                        ],
                        max_length=20,
                    ),
                ),
                ("note", models.TextField(blank=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "payment",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="transitions",
                        to="payments.reservationpayment",
                    ),
                ),
            ],
            options={
                "ordering": ["created_at", "pk"],
            },
        ),
    ]
