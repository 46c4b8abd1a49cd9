from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import SalesPeriod
from .model import SalesBucket, TopProduct


class ReportRepository(Protocol):
    def counts(self, *, low_inventory_threshold: int) -> dict:
        """Keys: users, products, orders, sales, low_inventory."""
        raise NotImplementedError

    def sales_by_period(
        self,
        *,
        period: SalesPeriod,
        start: Optional[date],
        end: Optional[date],
    ) -> Sequence[SalesBucket]:
        raise NotImplementedError

    def top_products(self, *, start: Optional[date], end: Optional[date], limit: int) -> Sequence[TopProduct]:
        raise NotImplementedError
