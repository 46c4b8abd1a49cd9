from __future__ import annotations

from typing import Any, Optional

from ..common.datetime_utils import parse_optional_date
from ..core.constants import DEFAULT_LOW_INVENTORY_THRESHOLD, RECENT_ORDERS_LIMIT, TOP_PRODUCTS_LIMIT
from ..core.enums import SalesPeriod
from ..core.exceptions import ValidationError
from ..orders.model import OrderFilters
from ..orders.repository import OrderRepository
from .model import DashboardStats
from .repository import ReportRepository


class AdminReportService:
    def __init__(
        self,
        reports: ReportRepository,
        orders: OrderRepository,
        *,
        low_inventory_threshold: int = DEFAULT_LOW_INVENTORY_THRESHOLD,
    ):
        self._reports = reports
        self._orders = orders
        self._low_inventory_threshold = int(low_inventory_threshold)

    def dashboard(self) -> DashboardStats:
        counts = self._reports.counts(low_inventory_threshold=self._low_inventory_threshold)
        recent = self._orders.list_page(filters=OrderFilters(), limit=RECENT_ORDERS_LIMIT, offset=0)
        return DashboardStats(
            total_users=counts["users"],
            total_products=counts["products"],
            total_orders=counts["orders"],
            total_sales=counts["sales"],
            low_inventory=counts["low_inventory"],
            recent_orders=tuple(recent),
        )

    def sales_report(
        self,
        *,
        period: Optional[Any] = None,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
    ) -> dict:
        try:
            sales_period = SalesPeriod(period or SalesPeriod.MONTHLY.value)
        except ValueError:
            raise ValidationError("Period must be one of daily, weekly, monthly, yearly")

        start = parse_optional_date(start_date, "startDate")
        end = parse_optional_date(end_date, "endDate")
        if start and end and start > end:
            raise ValidationError("startDate must be before endDate")

        buckets = self._reports.sales_by_period(period=sales_period, start=start, end=end)
        top = self._reports.top_products(start=start, end=end, limit=TOP_PRODUCTS_LIMIT)
        return {
            "period": sales_period.value,
            "salesByPeriod": [b.to_dict() for b in buckets],
            "topProducts": [p.to_dict() for p in top],
        }
