import apps.web.reservations.models
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Reservation",
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
                ("name", models.CharField(max_length=200)),
                ("email", models.EmailField(max_length=254)),
                ("phone", models.CharField(blank=True, max_length=20)),
                (
                    "user_id",
                    models.CharField(
                        blank=True,
                        help_text="Account ID of the booking user (blank = guest checkout)",
                        max_length=64,
                    ),
                ),
                ("date", models.DateField()),
                ("time", models.TimeField()),
                (
                    "guests",
                    models.PositiveIntegerField(default=2, help_text="Party size"),
                ),
                ("notes", models.TextField(blank=True)),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("pending", "Pending"),
                            ("completed", "Completed"),
                            ("cancelled", "Cancelled"),
                        ],
                        default="pending",
                        max_length=20,
                    ),
                ),
                (
                    "confirmation_code",
                    models.CharField(
                        default=apps.web.reservations.models.generate_confirmation_code,
                        help_text="Customer-facing confirmation code",
                        max_length=20,
                        unique=True,
                    ),
                ),
                (
                    "payment_status",
                    models.CharField(
                        blank=True,
                        choices=[
                            ("", "Unset"),
                            ("pending", "Pending"),
                            ("completed", "Completed"),
                            ("failed", "Failed"),
                            ("refunded", "Refunded"),
                        ],
                        default="",
                        max_length=20,
                    ),
                ),
            ],
            options={
                "ordering": ["-date", "-time"],
                "indexes": [
                    models.Index(
                        fields=["date", "time"], name="reservation_slot_idx"
                    ),
                    models.Index(fields=["email"], name="reservation_email_idx"),
                    models.Index(
                        fields=["payment_status"], name="reservation_deposit_idx"
                    ),
                ],
            },
        ),
    ]
