from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User role used for access checks."""

    USER = "user"
    ADMIN = "admin"


class OrderStatus(str, Enum):
    """Order lifecycle stored in the database."""

    PENDING = "pending"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class SalesPeriod(str, Enum):
    """Grouping for the sales report, mapped to a MySQL DATE_FORMAT pattern."""

    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"

    @property
    def date_format(self) -> str:
        return {
            SalesPeriod.DAILY: "%Y-%m-%d",
            SalesPeriod.WEEKLY: "%Y-%u",
            SalesPeriod.MONTHLY: "%Y-%m",
            SalesPeriod.YEARLY: "%Y",
        }[self]
