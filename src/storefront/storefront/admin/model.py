from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Optional

from ..orders.model import Order


@dataclass(frozen=True)
class DashboardStats:
    total_users: int
    total_products: int
    total_orders: int
    total_sales: Decimal
    low_inventory: int
    recent_orders: tuple[Order, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict:
        return {
            "totalUsers": self.total_users,
            "totalProducts": self.total_products,
            "totalOrders": self.total_orders,
            "totalSales": float(self.total_sales),
            "lowInventory": self.low_inventory,
            "recentOrders": [o.to_dict(with_items=False) for o in self.recent_orders],
        }


@dataclass(frozen=True)
class SalesBucket:
    period: str
    order_count: int
    total_sales: Decimal

    def to_dict(self) -> dict:
        return {"period": self.period, "orderCount": self.order_count, "totalSales": float(self.total_sales)}


@dataclass(frozen=True)
class TopProduct:
    product_id: int
    name: str
    category: Optional[str]
    total_quantity: int
    total_sales: Decimal

    def to_dict(self) -> dict:
        return {
            "id": self.product_id,
            "name": self.name,
            "category": self.category,
            "totalQuantity": self.total_quantity,
            "totalSales": float(self.total_sales),
        }
