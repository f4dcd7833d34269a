"""Order service - all order business logic lives here.

Services:
- Depend only on interfaces (stores, clock)
- Validate domain invariants
- Perform orchestration and error mapping
- Return domain models or domain errors
"""

import logging
import uuid
from dataclasses import replace
from decimal import Decimal
from typing import Any, Iterable

from workshop.domain import (
    ErrorCode,
    InvalidTransitionError,
    Money,
    NotFoundError,
    Order,
    OrderPart,
    OrderService,
    OrderStatus,
    Percentage,
    StatusHistoryEntry,
    ValidationError,
)
from workshop.domain import finance
from workshop.domain.transitions import allowed_targets, ensure_transition
from workshop.signals import order_created, order_status_changed, order_updated
from workshop.stores.interfaces import Clock, DataStore, EntityKind

logger = logging.getLogger(__name__)

FIRST_ORDER_NUMBER = 1000

MoneyInput = Money | Decimal | int | str | None
PercentInput = Percentage | Decimal | int | str | None


def new_line_item_id() -> str:
    return str(uuid.uuid4())


class OrderLifecycleManager:
    """Service for order status and pricing operations."""

    def __init__(self, store: DataStore, clock: Clock) -> None:
        self._store = store
        self._clock = clock

    def list_orders(self) -> list[Order]:
        """Return all orders, newest number first."""
        orders = self._store.get_all(EntityKind.ORDER)
        return sorted(orders, key=lambda order: order.number, reverse=True)

    def get_order(self, order_id: str) -> Order:
        """Return an order by ID.

        Raises:
            NotFoundError: If the order does not exist.
        """
        order = self._store.get_by_id(EntityKind.ORDER, order_id)
        if order is None:
            raise NotFoundError(ErrorCode.ORDER_NOT_FOUND, order_id)
        return order

    def next_order_number(self) -> int:
        orders = self._store.get_all(EntityKind.ORDER)
        if not orders:
            return FIRST_ORDER_NUMBER
        return max(order.number for order in orders) + 1

    def open_order(
        self,
        services: Iterable[OrderService] = (),
        parts: Iterable[OrderPart] = (),
        labor_cost: MoneyInput = None,
        discount: PercentInput = None,
        tax: PercentInput = None,
        technician: str | None = None,
    ) -> Order:
        """Create a new order in ``open`` with consistent totals.

        The status history starts empty; see ``timeline`` for the creation
        entry shown to readers.
        """
        now = self._clock.now()
        draft = Order(
            id=str(uuid.uuid4()),
            number=self.next_order_number(),
            status=OrderStatus.OPEN,
            created_at=now,
            updated_at=now,
            technician=technician,
        )
        order = replace(draft, **self._priced(services, parts, labor_cost, discount, tax))
        stored = self._store.insert(EntityKind.ORDER, order)
        logger.info("Opened order #%s (%s), total %s", stored.number, stored.id, stored.total)
        order_created.send(sender=self.__class__, order=stored)
        return stored

    def available_transitions(self, order: Order) -> tuple[OrderStatus, ...]:
        return allowed_targets(order.status)

    def transition(
        self,
        order: Order,
        target: OrderStatus | str,
        actor: str | None = None,
        note: str | None = None,
    ) -> Order:
        """Move ``order`` to ``target`` and record the change.

        The write is conditional on ``order.version``.

        Raises:
            InvalidTransitionError: If the table has no (current, target) pair.
            NotFoundError: If the order no longer exists.
            ConflictError: If the order changed since it was read.
        """
        try:
            status = ensure_transition(order.status, target)
        except InvalidTransitionError:
            logger.warning("Rejected transition of order %s: %s -> %s", order.id, order.status.value, target)
            raise

        now = self._clock.now()
        entry = StatusHistoryEntry(status=status, timestamp=now, user=actor, notes=note)
        changes: dict[str, Any] = {
            "status": status,
            "status_history": order.status_history + (entry,),
            "updated_at": now,
        }
        if status is OrderStatus.COMPLETED:
            changes["completed_at"] = now

        updated = self._store.update(EntityKind.ORDER, order.id, changes, order.version)
        logger.info("Order #%s moved %s -> %s", order.number, order.status.value, status.value)
        order_status_changed.send(
            sender=self.__class__, order=updated, old_status=order.status, new_status=status
        )
        return updated

    def update_pricing(
        self,
        order: Order,
        services: Iterable[OrderService] | None = None,
        parts: Iterable[OrderPart] | None = None,
        labor_cost: MoneyInput = None,
        discount: PercentInput = None,
        tax: PercentInput = None,
    ) -> Order:
        """Replace any of the pricing inputs and recompute the totals.

        Arguments left as None keep their current value.
        """
        changes = self._priced(
            order.services if services is None else services,
            order.parts if parts is None else parts,
            order.labor_cost if labor_cost is None else labor_cost,
            order.discount if discount is None else discount,
            order.tax if tax is None else tax,
        )
        changes["updated_at"] = self._clock.now()
        updated = self._store.update(EntityKind.ORDER, order.id, changes, order.version)
        order_updated.send(sender=self.__class__, order=updated)
        return updated

    def add_service(
        self, order: Order, name: str, price: MoneyInput, quantity: int = 1
    ) -> Order:
        service = OrderService(id=new_line_item_id(), name=name, unit_price=Money.of(price), quantity=quantity)
        return self.update_pricing(order, services=order.services + (service,))

    def add_part(
        self, order: Order, name: str, price: MoneyInput, quantity: int = 1, code: str | None = None
    ) -> Order:
        part = OrderPart(id=new_line_item_id(), name=name, unit_price=Money.of(price), quantity=quantity, code=code)
        return self.update_pricing(order, parts=order.parts + (part,))

    def remove_line_item(self, order: Order, item_id: str) -> Order:
        services = tuple(s for s in order.services if s.id != item_id)
        parts = tuple(p for p in order.parts if p.id != item_id)
        if len(services) + len(parts) == len(order.line_items):
            raise ValidationError(f"Order has no line item '{item_id}'", field="item_id")
        return self.update_pricing(order, services=services, parts=parts)

    def set_service_completed(self, order: Order, service_id: str, completed: bool = True) -> Order:
        if not any(s.id == service_id for s in order.services):
            raise ValidationError(f"Order has no service '{service_id}'", field="service_id")
        services = tuple(
            replace(s, completed=completed) if s.id == service_id else s for s in order.services
        )
        return self.update_pricing(order, services=services)

    def timeline(self, order: Order) -> list[StatusHistoryEntry]:
        """Status history for display, oldest first.

        Orders without recorded history get a single entry for their
        creation; the stored order is left untouched.
        """
        if not order.status_history:
            notes = "Order created"
            if order.status is not OrderStatus.OPEN:
                notes = f"Order created; later changes up to '{order.status.value}' were not recorded"
            return [
                StatusHistoryEntry(
                    status=OrderStatus.OPEN,
                    timestamp=order.created_at,
                    user=order.technician,
                    notes=notes,
                )
            ]
        return sorted(order.status_history, key=lambda entry: entry.timestamp)

    @staticmethod
    def _priced(
        services: Iterable[OrderService],
        parts: Iterable[OrderPart],
        labor_cost: MoneyInput,
        discount: PercentInput,
        tax: PercentInput,
    ) -> dict[str, Any]:
        """Single entry point for every pricing change.

        Returns the inputs together with the totals derived from them, so
        callers can never write one without the other.
        """
        services = tuple(services)
        parts = tuple(parts)
        labor = Money.of(labor_cost)
        discount_rate = Percentage.of(discount, field="discount")
        tax_rate = Percentage.of(tax, field="tax")
        totals = finance.compute(services + parts, labor, discount_rate, tax_rate)
        return {
            "services": services,
            "parts": parts,
            "labor_cost": labor,
            "discount": discount_rate,
            "tax": tax_rate,
            "subtotal": totals.subtotal,
            "discount_amount": totals.discount_amount,
            "tax_amount": totals.tax_amount,
            "total": totals.total,
        }
