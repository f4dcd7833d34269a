"""Conversion between domain models and the persisted record layout.

Record field names are shared with historical data and other components and
must stay stable. Unknown status values are rejected here, where external
data enters the domain.
"""

from datetime import datetime
from typing import Any

from workshop.domain.errors import ValidationError
from workshop.domain.models import (
    Appointment,
    AppointmentStatus,
    Order,
    OrderPart,
    OrderService,
    StatusHistoryEntry,
)
from workshop.domain.transitions import parse_order_status
from workshop.domain.value_objects import Money, Percentage


def format_timestamp(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def parse_timestamp(value: str | datetime | None, field: str) -> datetime | None:
    if value is None or isinstance(value, datetime):
        return value
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except (AttributeError, ValueError):
        raise ValidationError(f"{field} must be an ISO-8601 timestamp", field=field) from None


def parse_appointment_status(value: str | AppointmentStatus) -> AppointmentStatus:
    if isinstance(value, AppointmentStatus):
        return value
    try:
        return AppointmentStatus(value)
    except ValueError:
        raise ValidationError(f"Unknown appointment status '{value}'", field="status") from None


def service_to_record(service: OrderService) -> dict[str, Any]:
    return {
        "id": service.id,
        "name": service.name,
        "price": service.unit_price.amount,
        "quantity": service.quantity,
        "completed": service.completed,
    }


def service_from_record(record: dict[str, Any]) -> OrderService:
    return OrderService(
        id=str(record["id"]),
        name=record["name"],
        unit_price=Money.of(record["price"]),
        quantity=record.get("quantity", 1),
        completed=bool(record.get("completed", False)),
    )


def part_to_record(part: OrderPart) -> dict[str, Any]:
    return {
        "id": part.id,
        "name": part.name,
        "code": part.code,
        "price": part.unit_price.amount,
        "quantity": part.quantity,
    }


def part_from_record(record: dict[str, Any]) -> OrderPart:
    return OrderPart(
        id=str(record["id"]),
        name=record["name"],
        unit_price=Money.of(record["price"]),
        quantity=record.get("quantity", 1),
        code=record.get("code"),
    )


def history_to_record(entry: StatusHistoryEntry) -> dict[str, Any]:
    return {
        "status": entry.status.value,
        "timestamp": format_timestamp(entry.timestamp),
        "user": entry.user,
        "notes": entry.notes,
    }


def history_from_record(record: dict[str, Any]) -> StatusHistoryEntry:
    return StatusHistoryEntry(
        status=parse_order_status(record["status"]),
        timestamp=parse_timestamp(record["timestamp"], "timestamp"),
        user=record.get("user"),
        notes=record.get("notes"),
    )


def order_to_record(order: Order) -> dict[str, Any]:
    return {
        "id": order.id,
        "number": order.number,
        "status": order.status.value,
        "services": [service_to_record(s) for s in order.services],
        "parts": [part_to_record(p) for p in order.parts],
        "laborCost": order.labor_cost.amount,
        "discount": order.discount.value,
        "tax": order.tax.value,
        "subtotal": order.subtotal.amount,
        "discountAmount": order.discount_amount.amount,
        "taxAmount": order.tax_amount.amount,
        "total": order.total.amount,
        "technician": order.technician,
        "statusHistory": [history_to_record(e) for e in order.status_history],
        "completedAt": format_timestamp(order.completed_at),
        "created_at": format_timestamp(order.created_at),
        "updated_at": format_timestamp(order.updated_at),
        "version": order.version,
    }


def order_from_record(record: dict[str, Any]) -> Order:
    return Order(
        id=str(record["id"]),
        number=int(record["number"]),
        status=parse_order_status(record["status"]),
        services=tuple(service_from_record(s) for s in record.get("services") or ()),
        parts=tuple(part_from_record(p) for p in record.get("parts") or ()),
        labor_cost=Money.of(record.get("laborCost")),
        discount=Percentage.of(record.get("discount"), field="discount"),
        tax=Percentage.of(record.get("tax"), field="tax"),
        subtotal=Money.of(record.get("subtotal")),
        discount_amount=Money.of(record.get("discountAmount")),
        tax_amount=Money.of(record.get("taxAmount")),
        total=Money.of(record.get("total")),
        technician=record.get("technician"),
        status_history=tuple(history_from_record(e) for e in record.get("statusHistory") or ()),
        completed_at=parse_timestamp(record.get("completedAt"), "completedAt"),
        created_at=parse_timestamp(record["created_at"], "created_at"),
        updated_at=parse_timestamp(record["updated_at"], "updated_at"),
        version=int(record.get("version", 1)),
    )


def appointment_to_record(appointment: Appointment) -> dict[str, Any]:
    return {
        "id": appointment.id,
        "resourceId": appointment.resource_id,
        "start_time": format_timestamp(appointment.start_time),
        "end_time": format_timestamp(appointment.end_time),
        "status": appointment.status.value,
        "client_id": appointment.client_id,
        "vehicle_id": appointment.vehicle_id,
        "service_type": appointment.service_type,
        "notes": appointment.notes,
        "created_at": format_timestamp(appointment.created_at),
        "updated_at": format_timestamp(appointment.updated_at),
        "version": appointment.version,
    }


def appointment_from_record(record: dict[str, Any]) -> Appointment:
    return Appointment(
        id=str(record["id"]),
        resource_id=record["resourceId"],
        start_time=parse_timestamp(record["start_time"], "start_time"),
        end_time=parse_timestamp(record["end_time"], "end_time"),
        status=parse_appointment_status(record["status"]),
        client_id=record.get("client_id"),
        vehicle_id=record.get("vehicle_id"),
        service_type=record.get("service_type"),
        notes=record.get("notes"),
        created_at=parse_timestamp(record["created_at"], "created_at"),
        updated_at=parse_timestamp(record["updated_at"], "updated_at"),
        version=int(record.get("version", 1)),
    )
