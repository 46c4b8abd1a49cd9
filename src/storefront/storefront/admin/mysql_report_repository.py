from __future__ import annotations

from datetime import date, timedelta
from decimal import Decimal
from typing import Optional, Sequence

from ..core.enums import OrderStatus, SalesPeriod
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import SalesBucket, TopProduct
from .repository import ReportRepository


def _date_range(column: str, start: Optional[date], end: Optional[date]) -> tuple[list[str], list]:
    clauses: list[str] = []
    params: list = []
    if start:
        clauses.append(f"{column} >= %s")
        params.append(start)
    if end:
        clauses.append(f"{column} < %s")
        params.append(end + timedelta(days=1))
    return clauses, params


class MySQLReportRepository(ReportRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def counts(self, *, low_inventory_threshold: int) -> dict:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT
                    (SELECT COUNT(*) FROM users) AS users,
                    (SELECT COUNT(*) FROM products) AS products,
                    (SELECT COUNT(*) FROM orders) AS orders,
                    (SELECT COALESCE(SUM(total), 0) FROM orders WHERE status <> %s) AS sales,
                    (SELECT COUNT(*) FROM products WHERE inventory < %s) AS low_inventory
                """,
                (OrderStatus.CANCELLED.value, int(low_inventory_threshold)),
            )
            row = fetchone(cur) or {}
            return {
                "users": int(row.get("users") or 0),
                "products": int(row.get("products") or 0),
                "orders": int(row.get("orders") or 0),
                "sales": Decimal(row.get("sales") or 0),
                "low_inventory": int(row.get("low_inventory") or 0),
            }

    def sales_by_period(
        self,
        *,
        period: SalesPeriod,
        start: Optional[date],
        end: Optional[date],
    ) -> Sequence[SalesBucket]:
        clauses, params = _date_range("created_at", start, end)
        clauses.insert(0, "status <> %s")
        params.insert(0, OrderStatus.CANCELLED.value)

        sql = f"""
            SELECT DATE_FORMAT(created_at, %s) AS period,
                   COUNT(*) AS order_count,
                   COALESCE(SUM(total), 0) AS total_sales
            FROM orders
            WHERE {" AND ".join(clauses)}
            GROUP BY period
            ORDER BY period ASC
        """
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, (period.date_format, *params))
            return [
                SalesBucket(
                    period=str(r["period"]),
                    order_count=int(r["order_count"]),
                    total_sales=Decimal(r["total_sales"]),
                )
                for r in fetchall(cur)
            ]

    def top_products(self, *, start: Optional[date], end: Optional[date], limit: int) -> Sequence[TopProduct]:
        clauses, params = _date_range("o.created_at", start, end)
        clauses.insert(0, "o.status <> %s")
        params.insert(0, OrderStatus.CANCELLED.value)

        sql = f"""
            SELECT p.id, p.name, p.category,
                   SUM(oi.quantity) AS total_quantity,
                   SUM(oi.price * oi.quantity) AS total_sales
            FROM order_items oi
            JOIN products p ON oi.product_id = p.id
            JOIN orders o ON oi.order_id = o.id
            WHERE {" AND ".join(clauses)}
            GROUP BY p.id, p.name, p.category
            ORDER BY total_quantity DESC, p.id ASC
            LIMIT %s
        """
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, (*params, int(limit)))
            return [
                TopProduct(
                    product_id=int(r["id"]),
                    name=r["name"],
                    category=r.get("category"),
                    total_quantity=int(r["total_quantity"] or 0),
                    total_sales=Decimal(r["total_sales"] or 0),
                )
                for r in fetchall(cur)
            ]
