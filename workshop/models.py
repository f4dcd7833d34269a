"""Django ORM models (persistence layer).

These models handle database concerns. Domain logic lives in domain/.
"""

import uuid

from django.core.serializers.json import DjangoJSONEncoder
from django.db import models

from workshop.domain import AppointmentStatus, OrderStatus


class Order(models.Model):
    """Persistence model for service orders."""

    STATUS_CHOICES = [(status.value, status.value) for status in OrderStatus]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    number = models.PositiveIntegerField(unique=True)
    status = models.CharField(max_length=32, choices=STATUS_CHOICES, default=OrderStatus.OPEN.value)
    services = models.JSONField(default=list, blank=True, encoder=DjangoJSONEncoder)
    parts = models.JSONField(default=list, blank=True, encoder=DjangoJSONEncoder)
    labor_cost = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    discount = models.DecimalField(max_digits=5, decimal_places=2, default=0)
    tax = models.DecimalField(max_digits=5, decimal_places=2, default=0)
    subtotal = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    discount_amount = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    tax_amount = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    total = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    technician = models.CharField(max_length=255, blank=True, null=True)
    status_history = models.JSONField(default=list, blank=True, encoder=DjangoJSONEncoder)
    completed_at = models.DateTimeField(blank=True, null=True)
    created_at = models.DateTimeField()
    updated_at = models.DateTimeField()
    version = models.PositiveIntegerField(default=1)

    class Meta:
        ordering = ["-number"]
        indexes = [
            models.Index(fields=["status"], name="workshop_order_status_idx"),
        ]

    def __str__(self) -> str:
        return f"#{self.number} ({self.status})"


class Appointment(models.Model):
    """Persistence model for appointments."""

    STATUS_CHOICES = [(status.value, status.value) for status in AppointmentStatus]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    resource_id = models.CharField(max_length=255)
    start_time = models.DateTimeField()
    end_time = models.DateTimeField()
    status = models.CharField(
        max_length=32, choices=STATUS_CHOICES, default=AppointmentStatus.SCHEDULED.value
    )
    client_id = models.CharField(max_length=255, blank=True, null=True)
    vehicle_id = models.CharField(max_length=255, blank=True, null=True)
    service_type = models.CharField(max_length=255, blank=True, null=True)
    notes = models.TextField(blank=True, null=True)
    created_at = models.DateTimeField()
    updated_at = models.DateTimeField()
    version = models.PositiveIntegerField(default=1)

    class Meta:
        ordering = ["start_time"]
        indexes = [
            models.Index(fields=["resource_id", "start_time"], name="workshop_appt_res_start_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.resource_id} - {self.start_time}"
