"""Django ORM implementation of the DataStore."""

import logging
from dataclasses import replace
from typing import Any, Callable
from uuid import UUID

from django.db.models import F
from django.utils import timezone

from workshop import models as orm
from workshop.cache import invalidate_appointment_views
from workshop.domain import (
    Appointment,
    ConflictError,
    ErrorCode,
    Money,
    NotFoundError,
    Order,
    Percentage,
)
from workshop.domain.records import (
    history_from_record,
    history_to_record,
    parse_appointment_status,
    part_from_record,
    part_to_record,
    service_from_record,
    service_to_record,
)
from workshop.domain.transitions import parse_order_status
from workshop.stores.interfaces import DataStore, Entity, EntityKind

logger = logging.getLogger(__name__)


def _local(value):
    return timezone.localtime(value) if value is not None else None


def _order_from_row(row: orm.Order) -> Order:
    return Order(
        id=str(row.id),
        number=row.number,
        status=parse_order_status(row.status),
        services=tuple(service_from_record(s) for s in row.services),
        parts=tuple(part_from_record(p) for p in row.parts),
        labor_cost=Money.of(row.labor_cost),
        discount=Percentage.of(row.discount, field="discount"),
        tax=Percentage.of(row.tax, field="tax"),
        subtotal=Money.of(row.subtotal),
        discount_amount=Money.of(row.discount_amount),
        tax_amount=Money.of(row.tax_amount),
        total=Money.of(row.total),
        technician=row.technician,
        status_history=tuple(history_from_record(e) for e in row.status_history),
        completed_at=_local(row.completed_at),
        created_at=_local(row.created_at),
        updated_at=_local(row.updated_at),
        version=row.version,
    )


def _order_columns(order: Order) -> dict[str, Any]:
    return {
        "number": order.number,
        "status": order.status.value,
        "services": [service_to_record(s) for s in order.services],
        "parts": [part_to_record(p) for p in order.parts],
        "labor_cost": order.labor_cost.amount,
        "discount": order.discount.value,
        "tax": order.tax.value,
        "subtotal": order.subtotal.amount,
        "discount_amount": order.discount_amount.amount,
        "tax_amount": order.tax_amount.amount,
        "total": order.total.amount,
        "technician": order.technician,
        "status_history": [history_to_record(e) for e in order.status_history],
        "completed_at": order.completed_at,
        "created_at": order.created_at,
        "updated_at": order.updated_at,
    }


def _appointment_from_row(row: orm.Appointment) -> Appointment:
    return Appointment(
        id=str(row.id),
        resource_id=row.resource_id,
        start_time=_local(row.start_time),
        end_time=_local(row.end_time),
        status=parse_appointment_status(row.status),
        client_id=row.client_id,
        vehicle_id=row.vehicle_id,
        service_type=row.service_type,
        notes=row.notes,
        created_at=_local(row.created_at),
        updated_at=_local(row.updated_at),
        version=row.version,
    )


def _appointment_columns(appointment: Appointment) -> dict[str, Any]:
    return {
        "resource_id": appointment.resource_id,
        "start_time": appointment.start_time,
        "end_time": appointment.end_time,
        "status": appointment.status.value,
        "client_id": appointment.client_id,
        "vehicle_id": appointment.vehicle_id,
        "service_type": appointment.service_type,
        "notes": appointment.notes,
        "created_at": appointment.created_at,
        "updated_at": appointment.updated_at,
    }


# kind -> (model, row decoder, column encoder, not-found code)
_MAPPINGS = {
    EntityKind.ORDER: (orm.Order, _order_from_row, _order_columns, ErrorCode.ORDER_NOT_FOUND),
    EntityKind.APPOINTMENT: (
        orm.Appointment,
        _appointment_from_row,
        _appointment_columns,
        ErrorCode.APPOINTMENT_NOT_FOUND,
    ),
}


def _valid_uuid(value: str) -> bool:
    try:
        UUID(str(value))
    except ValueError:
        return False
    return True


class DjangoDataStore(DataStore):
    """Database-backed store using Django ORM.

    Updates are conditional on the stored version, so concurrent writers
    fail with ConflictError instead of overwriting each other.
    """

    def get_all(self, kind: EntityKind) -> list[Entity]:
        model, decode, _, _ = _MAPPINGS[kind]
        return [decode(row) for row in model.objects.all()]

    def get_by_id(self, kind: EntityKind, entity_id: str) -> Entity | None:
        model, decode, _, _ = _MAPPINGS[kind]
        if not _valid_uuid(entity_id):
            return None
        row = model.objects.filter(pk=entity_id).first()
        return decode(row) if row is not None else None

    def insert(self, kind: EntityKind, entity: Entity) -> Entity:
        model, decode, encode, _ = _MAPPINGS[kind]
        row = model.objects.create(id=UUID(entity.id), version=1, **encode(entity))
        return decode(row)

    def update(
        self,
        kind: EntityKind,
        entity_id: str,
        changes: dict[str, Any],
        expected_version: int,
    ) -> Entity:
        model, decode, encode, not_found = _MAPPINGS[kind]
        current = self.get_by_id(kind, entity_id)
        if current is None:
            raise NotFoundError(not_found, str(entity_id))

        # Domain field names match column names.
        columns = encode(replace(current, **changes))
        values = {field: columns[field] for field in changes}

        updated = model.objects.filter(pk=entity_id, version=expected_version).update(
            version=F("version") + 1, **values
        )
        if updated == 0:
            logger.warning("Stale write on %s %s (expected version %s)", kind.value, entity_id, expected_version)
            raise ConflictError.version(str(entity_id), expected_version)
        if kind is EntityKind.APPOINTMENT:
            # Queryset updates bypass post_save signals.
            invalidate_appointment_views()
        return decode(model.objects.get(pk=entity_id))

    def delete(self, kind: EntityKind, entity_id: str) -> None:
        model, _, _, not_found = _MAPPINGS[kind]
        if not _valid_uuid(entity_id):
            raise NotFoundError(not_found, str(entity_id))
        # Row deletes fire post_delete, which invalidates appointment day views.
        deleted, _ = model.objects.filter(pk=entity_id).delete()
        if deleted == 0:
            raise NotFoundError(not_found, str(entity_id))

    def query(self, kind: EntityKind, predicate: Callable[[Entity], bool]) -> list[Entity]:
        return [entity for entity in self.get_all(kind) if predicate(entity)]
