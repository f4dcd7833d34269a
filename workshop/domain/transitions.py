"""Order status transition policy.

The table is exhaustive: any (source, target) pair not listed is rejected,
including self-transitions.
"""

from workshop.domain.errors import InvalidTransitionError, ValidationError
from workshop.domain.models import OrderStatus

ORDER_TRANSITIONS: dict[OrderStatus, tuple[OrderStatus, ...]] = {
    OrderStatus.OPEN: (
        OrderStatus.IN_PROGRESS,
        OrderStatus.WAITING_APPROVAL,
        OrderStatus.CANCELED,
    ),
    OrderStatus.IN_PROGRESS: (
        OrderStatus.COMPLETED,
        OrderStatus.WAITING_PARTS,
        OrderStatus.OPEN,
    ),
    OrderStatus.WAITING_PARTS: (
        OrderStatus.IN_PROGRESS,
        OrderStatus.CANCELED,
    ),
    OrderStatus.WAITING_APPROVAL: (
        OrderStatus.IN_PROGRESS,
        OrderStatus.CANCELED,
    ),
    # reopen
    OrderStatus.COMPLETED: (OrderStatus.IN_PROGRESS,),
    # reactivate
    OrderStatus.CANCELED: (OrderStatus.OPEN,),
}


def parse_order_status(value: str | OrderStatus) -> OrderStatus:
    """Convert external input into an OrderStatus, rejecting unknown values."""
    if isinstance(value, OrderStatus):
        return value
    try:
        return OrderStatus(value)
    except ValueError:
        raise ValidationError(f"Unknown order status '{value}'", field="status") from None


def allowed_targets(current: OrderStatus | str) -> tuple[OrderStatus, ...]:
    if not isinstance(current, OrderStatus):
        try:
            current = OrderStatus(current)
        except ValueError:
            return ()
    return ORDER_TRANSITIONS.get(current, ())


def ensure_transition(current: OrderStatus | str, target: OrderStatus | str) -> OrderStatus:
    """Return ``target`` as an OrderStatus if the table allows it from ``current``.

    Raises:
        InvalidTransitionError: If the pair is absent from the table.
    """
    current_value = current.value if isinstance(current, OrderStatus) else str(current)
    target_value = target.value if isinstance(target, OrderStatus) else str(target)
    for candidate in allowed_targets(current):
        if candidate.value == target_value:
            return candidate
    raise InvalidTransitionError(current_value, target_value)
