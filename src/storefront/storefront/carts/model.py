from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Optional

from ..common.money import line_total, sum_lines


@dataclass(frozen=True)
class CartLine:
    """One cart item joined with the product's current catalog data."""

    item_id: int
    cart_id: int
    product_id: int
    quantity: int
    name: str
    price: Decimal
    description: Optional[str] = None
    category: Optional[str] = None

    @property
    def subtotal(self) -> Decimal:
        return line_total(self.price, self.quantity)

    def to_dict(self) -> dict:
        return {
            "id": self.item_id,
            "cart_id": self.cart_id,
            "product_id": self.product_id,
            "quantity": self.quantity,
            "name": self.name,
            "description": self.description,
            "price": float(self.price),
            "category": self.category,
            "subtotal": float(self.subtotal),
        }


@dataclass(frozen=True)
class CartView:
    lines: tuple[CartLine, ...] = field(default_factory=tuple)

    @property
    def total(self) -> Decimal:
        return sum_lines((line.price, line.quantity) for line in self.lines)

    @property
    def item_count(self) -> int:
        return sum(line.quantity for line in self.lines)

    def to_dict(self) -> dict:
        return {
            "items": [line.to_dict() for line in self.lines],
            "total": float(self.total),
            "itemCount": self.item_count,
        }
