"""Domain models representing persisted state.

These are pure domain objects with no API input rules.
Django ORM models are in workshop/models.py (persistence layer).
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from workshop.domain.errors import ValidationError
from workshop.domain.value_objects import Money, Percentage, TimeInterval


class OrderStatus(str, Enum):
    OPEN = "open"
    IN_PROGRESS = "in_progress"
    WAITING_PARTS = "waiting_parts"
    WAITING_APPROVAL = "waiting_approval"
    COMPLETED = "completed"
    CANCELED = "canceled"


class AppointmentStatus(str, Enum):
    SCHEDULED = "scheduled"
    CONFIRMED = "confirmed"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


def _check_quantity(quantity: int) -> None:
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
        raise ValidationError("Quantity must be a positive integer", field="quantity")


@dataclass(frozen=True)
class OrderService:
    """Service line item on an order."""

    id: str
    name: str
    unit_price: Money
    quantity: int = 1
    completed: bool = False

    def __post_init__(self) -> None:
        _check_quantity(self.quantity)


@dataclass(frozen=True)
class OrderPart:
    """Part line item on an order."""

    id: str
    name: str
    unit_price: Money
    quantity: int = 1
    code: str | None = None

    def __post_init__(self) -> None:
        _check_quantity(self.quantity)


@dataclass(frozen=True)
class StatusHistoryEntry:
    status: OrderStatus
    timestamp: datetime
    user: str | None = None
    notes: str | None = None


@dataclass(frozen=True)
class Order:
    """Domain representation of a service order.

    ``subtotal``, ``discount_amount``, ``tax_amount`` and ``total`` are derived
    from the line items, labor cost and rates; only the lifecycle manager
    writes them, through the financial calculator.
    """

    id: str
    number: int
    status: OrderStatus
    created_at: datetime
    updated_at: datetime
    services: tuple[OrderService, ...] = ()
    parts: tuple[OrderPart, ...] = ()
    labor_cost: Money = field(default_factory=Money.zero)
    discount: Percentage = field(default_factory=lambda: Percentage.of(0))
    tax: Percentage = field(default_factory=lambda: Percentage.of(0))
    subtotal: Money = field(default_factory=Money.zero)
    discount_amount: Money = field(default_factory=Money.zero)
    tax_amount: Money = field(default_factory=Money.zero)
    total: Money = field(default_factory=Money.zero)
    technician: str | None = None
    completed_at: datetime | None = None
    status_history: tuple[StatusHistoryEntry, ...] = ()
    version: int = 1

    @property
    def line_items(self) -> tuple[OrderService | OrderPart, ...]:
        return self.services + self.parts


@dataclass(frozen=True)
class Appointment:
    """Domain representation of an appointment on a resource (mechanic)."""

    id: str
    resource_id: str
    start_time: datetime
    end_time: datetime
    status: AppointmentStatus
    created_at: datetime
    updated_at: datetime
    client_id: str | None = None
    vehicle_id: str | None = None
    service_type: str | None = None
    notes: str | None = None
    version: int = 1

    @property
    def interval(self) -> TimeInterval:
        return TimeInterval(self.start_time, self.end_time)

    @property
    def is_cancelled(self) -> bool:
        return self.status is AppointmentStatus.CANCELLED
