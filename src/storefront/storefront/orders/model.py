from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from ..common.money import line_total
from ..core.enums import OrderStatus

# One-directional lifecycle; admins may override with force=True.
ALLOWED_TRANSITIONS: dict[OrderStatus, frozenset[OrderStatus]] = {
    OrderStatus.PENDING: frozenset({OrderStatus.PROCESSING, OrderStatus.CANCELLED}),
    OrderStatus.PROCESSING: frozenset({OrderStatus.SHIPPED, OrderStatus.CANCELLED}),
    OrderStatus.SHIPPED: frozenset({OrderStatus.DELIVERED}),
    OrderStatus.DELIVERED: frozenset(),
    OrderStatus.CANCELLED: frozenset(),
}


def can_transition(current: OrderStatus, new: OrderStatus) -> bool:
    return new in ALLOWED_TRANSITIONS[current]


@dataclass(frozen=True)
class OrderItem:
    """A purchased line; `price` is the unit price at purchase time."""

    order_id: int
    product_id: int
    quantity: int
    price: Decimal
    item_id: Optional[int] = None
    name: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None

    @property
    def subtotal(self) -> Decimal:
        return line_total(self.price, self.quantity)

    def to_dict(self) -> dict:
        return {
            "id": self.item_id,
            "order_id": self.order_id,
            "product_id": self.product_id,
            "quantity": self.quantity,
            "price": float(self.price),
            "name": self.name,
            "description": self.description,
            "category": self.category,
        }


@dataclass(frozen=True)
class Order:
    order_id: int
    user_id: int
    status: OrderStatus
    total: Decimal
    payment_intent_id: Optional[str] = None
    created_at: Optional[datetime] = None
    items: tuple[OrderItem, ...] = field(default_factory=tuple)

    def to_dict(self, *, with_items: bool = True) -> dict:
        data = {
            "id": self.order_id,
            "user_id": self.user_id,
            "status": self.status.value,
            "total": float(self.total),
            "payment_intent_id": self.payment_intent_id,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
        if with_items:
            data["items"] = [i.to_dict() for i in self.items]
        return data


@dataclass(frozen=True)
class OrderFilters:
    status: Optional[OrderStatus] = None
    from_date: Optional[date] = None
    to_date: Optional[date] = None
