"""Store interfaces (repository pattern).

Stores must be swappable and return domain models.
"""

from abc import ABC, abstractmethod
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable

from workshop.domain import Appointment, Order

Entity = Order | Appointment


class EntityKind(Enum):
    ORDER = "orders"
    APPOINTMENT = "appointments"


class DataStore(ABC):
    """Interface for order and appointment persistence.

    Every record carries an integer ``version``. ``update`` compares it with
    ``expected_version`` and bumps it on success.
    """

    @abstractmethod
    def get_all(self, kind: EntityKind) -> list[Entity]:
        """Return every record of ``kind``."""
        ...

    @abstractmethod
    def get_by_id(self, kind: EntityKind, entity_id: str) -> Entity | None:
        """Return a record by ID, or None if not found."""
        ...

    @abstractmethod
    def insert(self, kind: EntityKind, entity: Entity) -> Entity:
        """Persist a new record and return it as stored."""
        ...

    @abstractmethod
    def update(
        self,
        kind: EntityKind,
        entity_id: str,
        changes: dict[str, Any],
        expected_version: int,
    ) -> Entity:
        """Apply ``changes`` (domain field names) and return the stored record.

        Raises:
            NotFoundError: If the record does not exist.
            ConflictError: If the stored version differs from ``expected_version``.
        """
        ...

    @abstractmethod
    def delete(self, kind: EntityKind, entity_id: str) -> None:
        """Remove a record.

        Raises:
            NotFoundError: If the record does not exist.
        """
        ...

    @abstractmethod
    def query(self, kind: EntityKind, predicate: Callable[[Entity], bool]) -> list[Entity]:
        """Return the records of ``kind`` for which ``predicate`` holds."""
        ...


class Clock(ABC):
    """Source of the current time."""

    @abstractmethod
    def now(self) -> datetime:
        ...


class SystemClock(Clock):
    def now(self) -> datetime:
        return datetime.now(timezone.utc)
