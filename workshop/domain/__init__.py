from workshop.domain.errors import (
    ConflictError,
    DomainError,
    ErrorCode,
    InvalidTransitionError,
    NotFoundError,
    ValidationError,
)
from workshop.domain.models import (
    Appointment,
    AppointmentStatus,
    Order,
    OrderPart,
    OrderService,
    OrderStatus,
    StatusHistoryEntry,
)
from workshop.domain.value_objects import Money, Percentage, TimeInterval

__all__ = [
    "Appointment",
    "AppointmentStatus",
    "Order",
    "OrderPart",
    "OrderService",
    "OrderStatus",
    "StatusHistoryEntry",
    "Money",
    "Percentage",
    "TimeInterval",
    "DomainError",
    "ErrorCode",
    "ValidationError",
    "InvalidTransitionError",
    "ConflictError",
    "NotFoundError",
]
