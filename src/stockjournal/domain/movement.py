from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date
from decimal import Decimal
from typing import Optional

from stockjournal.domain.catalog import ProductStockCatalog
from stockjournal.domain.models import ZERO, MovementType, parse_decimal


@dataclass(frozen=True)
class MovementLine:
    """One product quantity change inside an entry.

    Lines are values: every setter returns a new line, and ``amount`` and
    ``stock_after`` are computed from the current fields on access.
    ``stock_before`` is None when the product's stock is unknown.
    """

    local_id: str
    product_id: Optional[int] = None
    movement_type: Optional[MovementType] = None
    quantity: Decimal = ZERO
    rate: Decimal = ZERO
    batch_number: Optional[str] = None
    expiry_date: Optional[date] = None
    remarks: Optional[str] = None
    product_name: str = ""
    unit: str = ""
    stock_before: Optional[Decimal] = None

    @property
    def has_product(self) -> bool:
        return self.product_id is not None

    @property
    def amount(self) -> Decimal:
        return self.quantity * self.rate

    @property
    def stock_after(self) -> Optional[Decimal]:
        if self.stock_before is None:
            return None
        if self.movement_type is None or self.quantity <= 0:
            return self.stock_before
        if self.movement_type is MovementType.IN:
            return self.stock_before + self.quantity
        return self.stock_before - self.quantity

    def projected_stock(self) -> Optional[Decimal]:
        return self.stock_after

    def set_product(self, product_id: Optional[int], catalog: ProductStockCatalog) -> "MovementLine":
        product = catalog.get(product_id)
        if product is None:
            return replace(self, product_id=None, product_name="", unit="", stock_before=None)
        return replace(
            self,
            product_id=product.id,
            product_name=product.name,
            unit=product.unit,
            stock_before=product.current_stock,
            rate=product.purchase_rate,
        )

    def set_quantity(self, quantity: object) -> "MovementLine":
        return replace(self, quantity=parse_decimal(quantity))

    def set_rate(self, rate: object) -> "MovementLine":
        return replace(self, rate=parse_decimal(rate))

    def set_movement_type(self, movement_type: MovementType | str | None) -> "MovementLine":
        if movement_type in (None, ""):
            return replace(self, movement_type=None)
        return replace(self, movement_type=MovementType(movement_type))

    def set_batch_number(self, batch_number: Optional[str]) -> "MovementLine":
        return replace(self, batch_number=batch_number)

    def set_expiry_date(self, expiry_date: Optional[date]) -> "MovementLine":
        return replace(self, expiry_date=expiry_date)

    def set_remarks(self, remarks: Optional[str]) -> "MovementLine":
        return replace(self, remarks=remarks)

    def to_item(self) -> dict:
        item = {
            "product_id": self.product_id,
            "movement_type": self.movement_type.value if self.movement_type else None,
            "quantity": self.quantity,
            "rate": self.rate,
        }
        if self.batch_number and self.batch_number.strip():
            item["batch_number"] = self.batch_number.strip()
        if self.expiry_date is not None:
            item["expiry_date"] = self.expiry_date.isoformat()
        if self.remarks and self.remarks.strip():
            item["remarks"] = self.remarks.strip()
        return item
