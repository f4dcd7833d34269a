"""Domain error codes for the workshop module."""

from dataclasses import dataclass
from enum import Enum


class ErrorCode(Enum):
    """Domain error codes."""

    VALIDATION_FAILED = "VALIDATION_FAILED"
    INVALID_TRANSITION = "INVALID_TRANSITION"
    SCHEDULE_CONFLICT = "SCHEDULE_CONFLICT"
    VERSION_CONFLICT = "VERSION_CONFLICT"
    ORDER_NOT_FOUND = "ORDER_NOT_FOUND"
    APPOINTMENT_NOT_FOUND = "APPOINTMENT_NOT_FOUND"


@dataclass(frozen=True)
class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    code: ErrorCode
    message: str

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class ValidationError(DomainError):
    """Raised when input is malformed or out of range."""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(code=ErrorCode.VALIDATION_FAILED, message=message)
        self.field = field


class InvalidTransitionError(DomainError):
    """Raised when a status target is not reachable from the current status."""

    def __init__(self, current: str, target: str) -> None:
        super().__init__(
            code=ErrorCode.INVALID_TRANSITION,
            message=f"Cannot move from '{current}' to '{target}'",
        )
        self.current = current
        self.target = target


class ConflictError(DomainError):
    """Raised on a scheduling collision or a stale record version."""

    def __init__(self, code: ErrorCode, message: str) -> None:
        super().__init__(code=code, message=message)

    @classmethod
    def schedule(cls, resource_id: str, conflicting_ids: list[str]) -> "ConflictError":
        error = cls(
            ErrorCode.SCHEDULE_CONFLICT,
            f"Resource '{resource_id}' already has an appointment in this time range",
        )
        error.conflicting_ids = conflicting_ids
        return error

    @classmethod
    def version(cls, entity_id: str, expected: int) -> "ConflictError":
        error = cls(
            ErrorCode.VERSION_CONFLICT,
            "Record was modified by another request",
        )
        error.entity_id = entity_id
        error.expected_version = expected
        return error


class NotFoundError(DomainError):
    """Raised when an order or appointment does not exist."""

    def __init__(self, code: ErrorCode, entity_id: str) -> None:
        kind = "Order" if code is ErrorCode.ORDER_NOT_FOUND else "Appointment"
        super().__init__(code=code, message=f"{kind} not found")
        self.entity_id = entity_id
