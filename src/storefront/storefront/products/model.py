from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Optional


@dataclass(frozen=True)
class Product:
    product_id: int
    name: str
    description: Optional[str]
    price: Decimal
    inventory: int
    category: Optional[str]
    images: tuple[str, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict:
        return {
            "id": self.product_id,
            "name": self.name,
            "description": self.description,
            "price": float(self.price),
            "inventory": self.inventory,
            "category": self.category,
            "images": list(self.images),
        }


@dataclass(frozen=True)
class ProductFilters:
    """Catalog listing filters; None means no constraint."""

    name: Optional[str] = None
    category: Optional[str] = None
    min_price: Optional[Decimal] = None
    max_price: Optional[Decimal] = None
