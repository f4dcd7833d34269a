"""Domain primitives that enforce validity at creation time."""

from dataclasses import dataclass
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Self

from workshop.domain.errors import ValidationError

CENT = Decimal("0.01")


def _to_decimal(value: object, field: str) -> Decimal:
    if isinstance(value, bool):
        raise ValidationError(f"{field} must be a number", field=field)
    if isinstance(value, float):
        value = str(value)
    try:
        result = Decimal(value)
    except (InvalidOperation, TypeError, ValueError):
        raise ValidationError(f"{field} must be a number", field=field) from None
    if not result.is_finite():
        raise ValidationError(f"{field} must be a finite number", field=field)
    return result


def ensure_cents(value: Decimal, field: str) -> Decimal:
    """Reject amounts and rates that do not fit two decimal places."""
    try:
        exact = value == value.quantize(CENT)
    except InvalidOperation:
        exact = False
    if not exact:
        raise ValidationError(f"{field} must have at most two decimal places", field=field)
    return value


@dataclass(frozen=True)
class Money:
    """Non-negative monetary amount."""

    amount: Decimal

    def __post_init__(self) -> None:
        if self.amount < 0:
            raise ValidationError("Money amount cannot be negative", field="amount")

    @classmethod
    def of(cls, value: "Money | Decimal | int | float | str | None") -> Self:
        if isinstance(value, Money):
            ensure_cents(value.amount, "amount")
            return value
        if value is None:
            return cls(Decimal("0"))
        return cls(ensure_cents(_to_decimal(value, "amount"), "amount"))

    @classmethod
    def zero(cls) -> Self:
        return cls(Decimal("0"))

    def __add__(self, other: "Money") -> "Money":
        return Money(self.amount + other.amount)

    def __sub__(self, other: "Money") -> "Money":
        return Money(self.amount - other.amount)

    def times(self, quantity: int) -> "Money":
        return Money(self.amount * quantity)

    def percent(self, rate: "Percentage") -> "Money":
        """Return ``rate`` percent of this amount, rounded half-up to cents."""
        return Money(self.amount * rate.value / 100).rounded()

    def rounded(self) -> "Money":
        return Money(self.amount.quantize(CENT, rounding=ROUND_HALF_UP))

    def __str__(self) -> str:
        return f"{self.amount:.2f}"


@dataclass(frozen=True)
class Percentage:
    """Rate in the closed range [0, 100]."""

    value: Decimal

    def __post_init__(self) -> None:
        if not Decimal("0") <= self.value <= Decimal("100"):
            raise ValidationError("Percentage must be between 0 and 100", field="percentage")

    @classmethod
    def of(cls, value: "Percentage | Decimal | int | float | str | None", field: str = "percentage") -> Self:
        if isinstance(value, Percentage):
            ensure_cents(value.value, field)
            return value
        if value is None:
            return cls(Decimal("0"))
        number = ensure_cents(_to_decimal(value, field), field)
        if not Decimal("0") <= number <= Decimal("100"):
            raise ValidationError(f"{field} must be between 0 and 100", field=field)
        return cls(number)


@dataclass(frozen=True)
class TimeInterval:
    """Half-open time range ``[start, end)``."""

    start: datetime
    end: datetime

    def overlaps(self, other: "TimeInterval") -> bool:
        return self.start < other.end and other.start < self.end

    def contains(self, instant: datetime) -> bool:
        return self.start <= instant < self.end

    @property
    def is_empty(self) -> bool:
        return self.end <= self.start
