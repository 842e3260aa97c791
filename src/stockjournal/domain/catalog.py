from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Optional

from stockjournal.domain.models import Product


@dataclass(frozen=True)
class ProductStockCatalog:
    """Snapshot of the products available while composing one entry.

    Fetched once per composition and never refreshed mid-edit, so the stock
    figures it carries are advisory.
    """

    products: tuple[Product, ...] = ()
    _by_id: dict = field(init=False, repr=False, compare=False)
    _by_sku: dict = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_by_id", {p.id: p for p in self.products})
        object.__setattr__(self, "_by_sku", {p.sku.strip().lower(): p for p in self.products if p.sku})

    @classmethod
    def of(cls, products: Iterable[Product]) -> "ProductStockCatalog":
        return cls(tuple(products))

    def __len__(self) -> int:
        return len(self.products)

    def get(self, product_id: Optional[int]) -> Optional[Product]:
        if product_id is None:
            return None
        return self._by_id.get(product_id)

    def get_by_sku(self, sku: str) -> Optional[Product]:
        return self._by_sku.get((sku or "").strip().lower())

    def search(self, term: str, limit: int = 20) -> list[Product]:
        needle = (term or "").strip().lower()
        if not needle:
            return list(self.products[:limit])
        hits = [p for p in self.products if needle in p.name.lower() or needle in p.sku.lower()]
        return hits[:limit]
