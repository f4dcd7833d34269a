import uuid

from django.core.serializers.json import DjangoJSONEncoder
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Order",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("number", models.PositiveIntegerField(unique=True)),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("open", "open"),
                            ("in_progress", "in_progress"),
                            ("waiting_parts", "waiting_parts"),
                            ("waiting_approval", "waiting_approval"),
                            ("completed", "completed"),
                            ("canceled", "canceled"),
                        ],
                        default="open",
                        max_length=32,
                    ),
                ),
                ("services", models.JSONField(blank=True, default=list, encoder=DjangoJSONEncoder)),
                ("parts", models.JSONField(blank=True, default=list, encoder=DjangoJSONEncoder)),
                ("labor_cost", models.DecimalField(decimal_places=2, default=0, max_digits=12)),
                ("discount", models.DecimalField(decimal_places=2, default=0, max_digits=5)),
                ("tax", models.DecimalField(decimal_places=2, default=0, max_digits=5)),
                ("subtotal", models.DecimalField(decimal_places=2, default=0, max_digits=12)),
                ("discount_amount", models.DecimalField(decimal_places=2, default=0, max_digits=12)),
                ("tax_amount", models.DecimalField(decimal_places=2, default=0, max_digits=12)),
                ("total", models.DecimalField(decimal_places=2, default=0, max_digits=12)),
                ("technician", models.CharField(blank=True, max_length=255, null=True)),
                ("status_history", models.JSONField(blank=True, default=list, encoder=DjangoJSONEncoder)),
                ("completed_at", models.DateTimeField(blank=True, null=True)),
                ("created_at", models.DateTimeField()),
                ("updated_at", models.DateTimeField()),
                ("version", models.PositiveIntegerField(default=1)),
            ],
            options={
                "ordering": ["-number"],
                "indexes": [models.Index(fields=["status"], name="workshop_order_status_idx")],
            },
        ),
        migrations.CreateModel(
            name="Appointment",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("resource_id", models.CharField(max_length=255)),
                ("start_time", models.DateTimeField()),
                ("end_time", models.DateTimeField()),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("scheduled", "scheduled"),
                            ("confirmed", "confirmed"),
                            ("in-progress", "in-progress"),
                            ("completed", "completed"),
                            ("cancelled", "cancelled"),
                        ],
                        default="scheduled",
                        max_length=32,
                    ),
                ),
                ("client_id", models.CharField(blank=True, max_length=255, null=True)),
                ("vehicle_id", models.CharField(blank=True, max_length=255, null=True)),
                ("service_type", models.CharField(blank=True, max_length=255, null=True)),
                ("notes", models.TextField(blank=True, null=True)),
                ("created_at", models.DateTimeField()),
                ("updated_at", models.DateTimeField()),
                ("version", models.PositiveIntegerField(default=1)),
            ],
            options={
                "ordering": ["start_time"],
                "indexes": [
                    models.Index(fields=["resource_id", "start_time"], name="workshop_appt_res_start_idx")
                ],
            },
        ),
    ]
