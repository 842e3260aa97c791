from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Optional

from stockjournal.domain.models import ZERO, parse_decimal

HUNDRED = Decimal("100")


@dataclass(frozen=True)
class PurchaseOrderLine:
    product_id: Optional[int]
    quantity: Decimal = ZERO
    unit_price: Decimal = ZERO
    discount: Decimal = ZERO
    tax_rate: Decimal = ZERO

    @classmethod
    def parse(cls, product_id: Optional[int], quantity=None, unit_price=None, discount=None, tax_rate=None) -> "PurchaseOrderLine":
        return cls(
            product_id=product_id,
            quantity=parse_decimal(quantity),
            unit_price=parse_decimal(unit_price),
            discount=parse_decimal(discount),
            tax_rate=parse_decimal(tax_rate),
        )

    @property
    def subtotal(self) -> Decimal:
        return self.quantity * self.unit_price

    @property
    def taxable(self) -> Decimal:
        return max(ZERO, self.subtotal - self.discount)

    @property
    def tax(self) -> Decimal:
        return self.taxable * self.tax_rate / HUNDRED

    @property
    def total(self) -> Decimal:
        return max(ZERO, self.taxable + self.tax)


@dataclass(frozen=True)
class PurchaseOrderTotals:
    subtotal: Decimal
    discount: Decimal
    tax: Decimal
    total: Decimal


def purchase_order_totals(lines: Iterable[PurchaseOrderLine]) -> PurchaseOrderTotals:
    # each component is summed on its own; total is not re-derived from the sums
    subtotal = discount = tax = total = ZERO
    for ln in lines:
        subtotal += ln.subtotal
        discount += ln.discount
        tax += ln.tax
        total += ln.total
    return PurchaseOrderTotals(subtotal=subtotal, discount=discount, tax=tax, total=total)
