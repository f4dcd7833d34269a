"""In-process implementation of the DataStore.

Records are kept in their persisted layout so that every read goes through
the same codec as the database-backed store.
"""

from dataclasses import replace
from typing import Any, Callable

from workshop.domain import ConflictError, ErrorCode, NotFoundError
from workshop.domain.records import (
    appointment_from_record,
    appointment_to_record,
    order_from_record,
    order_to_record,
)
from workshop.stores.interfaces import DataStore, Entity, EntityKind

_CODECS = {
    EntityKind.ORDER: (order_to_record, order_from_record),
    EntityKind.APPOINTMENT: (appointment_to_record, appointment_from_record),
}

_NOT_FOUND = {
    EntityKind.ORDER: ErrorCode.ORDER_NOT_FOUND,
    EntityKind.APPOINTMENT: ErrorCode.APPOINTMENT_NOT_FOUND,
}


class InMemoryDataStore(DataStore):
    """Dictionary-backed store for tests and embedded use."""

    def __init__(self) -> None:
        self._records: dict[EntityKind, dict[str, dict[str, Any]]] = {kind: {} for kind in EntityKind}

    def _decode(self, kind: EntityKind, record: dict[str, Any]) -> Entity:
        return _CODECS[kind][1](record)

    def _encode(self, kind: EntityKind, entity: Entity) -> dict[str, Any]:
        return _CODECS[kind][0](entity)

    def get_all(self, kind: EntityKind) -> list[Entity]:
        return [self._decode(kind, record) for record in self._records[kind].values()]

    def get_by_id(self, kind: EntityKind, entity_id: str) -> Entity | None:
        record = self._records[kind].get(str(entity_id))
        return self._decode(kind, record) if record is not None else None

    def insert(self, kind: EntityKind, entity: Entity) -> Entity:
        if entity.id in self._records[kind]:
            raise ValueError(f"Duplicate {kind.value} id {entity.id}")
        stored = replace(entity, version=1)
        self._records[kind][stored.id] = self._encode(kind, stored)
        return stored

    def update(
        self,
        kind: EntityKind,
        entity_id: str,
        changes: dict[str, Any],
        expected_version: int,
    ) -> Entity:
        record = self._records[kind].get(str(entity_id))
        if record is None:
            raise NotFoundError(_NOT_FOUND[kind], str(entity_id))
        current = self._decode(kind, record)
        if current.version != expected_version:
            raise ConflictError.version(current.id, expected_version)
        updated = replace(current, **changes, version=current.version + 1)
        self._records[kind][updated.id] = self._encode(kind, updated)
        return updated

    def delete(self, kind: EntityKind, entity_id: str) -> None:
        if self._records[kind].pop(str(entity_id), None) is None:
            raise NotFoundError(_NOT_FOUND[kind], str(entity_id))

    def query(self, kind: EntityKind, predicate: Callable[[Entity], bool]) -> list[Entity]:
        return [entity for entity in self.get_all(kind) if predicate(entity)]
