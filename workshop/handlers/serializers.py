"""Serializers for request validation and domain model responses."""

from rest_framework import serializers

from workshop.domain import AppointmentStatus, Money, OrderPart, OrderService, OrderStatus
from workshop.domain.records import appointment_to_record, history_to_record, order_to_record
from workshop.domain.scheduling import AppointmentFilter
from workshop.services.order_service import new_line_item_id

ORDER_STATUSES = [status.value for status in OrderStatus]
APPOINTMENT_STATUSES = [status.value for status in AppointmentStatus]


class OrderSerializer(serializers.BaseSerializer):
    """Serializer for Order domain model."""

    def to_representation(self, instance):
        return order_to_record(instance)


class StatusHistoryEntrySerializer(serializers.BaseSerializer):
    """Serializer for StatusHistoryEntry domain model."""

    def to_representation(self, instance):
        return history_to_record(instance)


class AppointmentSerializer(serializers.BaseSerializer):
    """Serializer for Appointment domain model."""

    def to_representation(self, instance):
        return appointment_to_record(instance)


class ServiceInputSerializer(serializers.Serializer):
    id = serializers.CharField(required=False)
    name = serializers.CharField(max_length=255)
    price = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0)
    quantity = serializers.IntegerField(min_value=1, default=1)
    completed = serializers.BooleanField(default=False)

    def to_domain(self, data) -> OrderService:
        return OrderService(
            id=data.get("id") or new_line_item_id(),
            name=data["name"],
            unit_price=Money.of(data["price"]),
            quantity=data["quantity"],
            completed=data["completed"],
        )


class PartInputSerializer(serializers.Serializer):
    id = serializers.CharField(required=False)
    name = serializers.CharField(max_length=255)
    code = serializers.CharField(max_length=64, required=False, allow_null=True, allow_blank=True)
    price = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0)
    quantity = serializers.IntegerField(min_value=1, default=1)

    def to_domain(self, data) -> OrderPart:
        return OrderPart(
            id=data.get("id") or new_line_item_id(),
            name=data["name"],
            unit_price=Money.of(data["price"]),
            quantity=data["quantity"],
            code=data.get("code") or None,
        )


def _percent_field(**kwargs):
    return serializers.DecimalField(max_digits=5, decimal_places=2, min_value=0, max_value=100, **kwargs)


class PricingInputSerializer(serializers.Serializer):
    """Pricing inputs shared by order creation and pricing updates."""

    services = ServiceInputSerializer(many=True, required=False)
    parts = PartInputSerializer(many=True, required=False)
    laborCost = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0, required=False)
    discount = _percent_field(required=False)
    tax = _percent_field(required=False)

    def pricing_kwargs(self) -> dict:
        data = self.validated_data
        kwargs = {}
        if "services" in data:
            kwargs["services"] = [ServiceInputSerializer().to_domain(item) for item in data["services"]]
        if "parts" in data:
            kwargs["parts"] = [PartInputSerializer().to_domain(item) for item in data["parts"]]
        if "laborCost" in data:
            kwargs["labor_cost"] = data["laborCost"]
        for name in ("discount", "tax"):
            if name in data:
                kwargs[name] = data[name]
        return kwargs


class OrderCreateSerializer(PricingInputSerializer):
    technician = serializers.CharField(max_length=255, required=False, allow_null=True)


class OrderPricingSerializer(PricingInputSerializer):
    version = serializers.IntegerField(min_value=1)


class TransitionSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=ORDER_STATUSES)
    user = serializers.CharField(max_length=255, required=False, allow_null=True)
    notes = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    version = serializers.IntegerField(min_value=1)


class AppointmentCreateSerializer(serializers.Serializer):
    resourceId = serializers.CharField(max_length=255)
    start_time = serializers.DateTimeField()
    end_time = serializers.DateTimeField()
    client_id = serializers.CharField(max_length=255, required=False, allow_null=True)
    vehicle_id = serializers.CharField(max_length=255, required=False, allow_null=True)
    service_type = serializers.CharField(max_length=255, required=False, allow_null=True)
    notes = serializers.CharField(required=False, allow_null=True, allow_blank=True)


class AppointmentUpdateSerializer(serializers.Serializer):
    resourceId = serializers.CharField(max_length=255, required=False)
    start_time = serializers.DateTimeField(required=False)
    end_time = serializers.DateTimeField(required=False)
    client_id = serializers.CharField(max_length=255, required=False, allow_null=True)
    vehicle_id = serializers.CharField(max_length=255, required=False, allow_null=True)
    service_type = serializers.CharField(max_length=255, required=False, allow_null=True)
    notes = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    version = serializers.IntegerField(min_value=1)


class AppointmentStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=APPOINTMENT_STATUSES)
    version = serializers.IntegerField(min_value=1)


class AppointmentFilterSerializer(serializers.Serializer):
    """Query parameters for the appointment list."""

    start_date = serializers.DateField(required=False)
    end_date = serializers.DateField(required=False)
    client = serializers.CharField(required=False)
    vehicle = serializers.CharField(required=False)
    service = serializers.CharField(required=False)
    mechanic = serializers.CharField(required=False)
    status = serializers.ChoiceField(choices=APPOINTMENT_STATUSES, required=False)
    search = serializers.CharField(required=False)

    def to_filter(self) -> AppointmentFilter:
        data = self.validated_data
        return AppointmentFilter(
            start_date=data.get("start_date"),
            end_date=data.get("end_date"),
            client=data.get("client"),
            vehicle=data.get("vehicle"),
            service=data.get("service"),
            resource=data.get("mechanic"),
            status=AppointmentStatus(data["status"]) if "status" in data else None,
            search_text=data.get("search"),
        )


class DayRangeSerializer(serializers.Serializer):
    start = serializers.DateField()
    end = serializers.DateField()
