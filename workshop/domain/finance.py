"""Financial calculator for service orders.

Discount is applied to the subtotal before tax; tax is charged on the
discounted amount.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Protocol

from workshop.domain.errors import ValidationError
from workshop.domain.value_objects import Money, Percentage


class PricedItem(Protocol):
    unit_price: Money | Decimal | int | str
    quantity: int


@dataclass(frozen=True)
class OrderTotals:
    subtotal: Money
    discount_amount: Money
    tax_amount: Money
    total: Money

    @property
    def taxable_amount(self) -> Money:
        return self.subtotal - self.discount_amount


def compute(
    line_items: Iterable[PricedItem],
    labor_cost: Money | Decimal | int | str | None,
    discount_percent: Percentage | Decimal | int | str | None,
    tax_percent: Percentage | Decimal | int | str | None,
) -> OrderTotals:
    """Derive subtotal, discount, tax and total.

    Raises:
        ValidationError: On a negative price, a quantity below 1, or a rate
            outside [0, 100].
    """
    discount = Percentage.of(discount_percent, field="discount")
    tax = Percentage.of(tax_percent, field="tax")

    subtotal = Money.of(labor_cost)
    for item in line_items:
        quantity = item.quantity
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
            raise ValidationError("Quantity must be a positive integer", field="quantity")
        subtotal = subtotal + Money.of(item.unit_price).times(quantity)

    discount_amount = subtotal.percent(discount)
    taxable = subtotal - discount_amount
    tax_amount = taxable.percent(tax)
    return OrderTotals(
        subtotal=subtotal,
        discount_amount=discount_amount,
        tax_amount=tax_amount,
        total=taxable + tax_amount,
    )
