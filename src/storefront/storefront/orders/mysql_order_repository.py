from __future__ import annotations

from contextlib import contextmanager
from datetime import timedelta
from decimal import Decimal
from typing import Iterator, Optional, Sequence

from ..carts.model import CartLine
from ..carts.mysql_cart_repository import MySQLCartRepository
from ..core.enums import OrderStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, placeholders, transaction
from ..inventory.mysql_inventory_ledger import MySQLInventoryLedger
from .model import Order, OrderFilters, OrderItem
from .repository import CheckoutUnit, OrderRepository

_ORDER_COLUMNS = "id, user_id, status, total, payment_intent_id, created_at"


def _row_to_order(row: dict, items: Sequence[OrderItem] = ()) -> Order:
    return Order(
        order_id=int(row["id"]),
        user_id=int(row["user_id"]),
        status=OrderStatus(row["status"]),
        total=Decimal(row["total"]),
        payment_intent_id=row.get("payment_intent_id"),
        created_at=row.get("created_at"),
        items=tuple(items),
    )


def _row_to_item(row: dict) -> OrderItem:
    return OrderItem(
        item_id=int(row["id"]),
        order_id=int(row["order_id"]),
        product_id=int(row["product_id"]),
        quantity=int(row["quantity"]),
        price=Decimal(row["price"]),
        name=row.get("name"),
        description=row.get("description"),
        category=row.get("category"),
    )


class _MySQLCheckoutUnit(CheckoutUnit):
    """Checkout statements bound to one open transaction cursor."""

    def __init__(self, cur, carts: MySQLCartRepository, ledger: MySQLInventoryLedger):
        self._cur = cur
        self._carts = carts
        self._ledger = ledger

    def lock_cart(self, user_id: int) -> None:
        self._cur.execute("SELECT id FROM carts WHERE user_id=%s FOR UPDATE", (user_id,))
        fetchall(self._cur)

    def order_for_intent(self, payment_intent_id: str) -> Optional[int]:
        self._cur.execute("SELECT id FROM orders WHERE payment_intent_id=%s LIMIT 1", (payment_intent_id,))
        row = fetchone(self._cur)
        return int(row["id"]) if row else None

    def cart_lines(self, user_id: int) -> Sequence[CartLine]:
        return self._carts.lines_in(self._cur, user_id)

    def insert_order(self, *, user_id: int, total: Decimal, payment_intent_id: Optional[str]) -> int:
        self._cur.execute(
            "INSERT INTO orders (user_id, status, total, payment_intent_id) VALUES (%s, %s, %s, %s)",
            (user_id, OrderStatus.PENDING.value, total, payment_intent_id),
        )
        return int(self._cur.lastrowid)

    def insert_order_item(self, *, order_id: int, product_id: int, quantity: int, price: Decimal) -> None:
        self._cur.execute(
            "INSERT INTO order_items (order_id, product_id, quantity, price) VALUES (%s, %s, %s, %s)",
            (order_id, product_id, quantity, price),
        )

    def decrement_inventory(self, product_id: int, quantity: int) -> bool:
        return self._ledger.decrement(self._cur, product_id, quantity)

    def clear_cart(self, user_id: int) -> None:
        self._carts.clear_in(self._cur, user_id)


class MySQLOrderRepository(OrderRepository):
    def __init__(self, conn_factory: DatabaseConnection, carts: MySQLCartRepository, ledger: MySQLInventoryLedger):
        self._conn_factory = conn_factory
        self._carts = carts
        self._ledger = ledger

    @contextmanager
    def checkout(self) -> Iterator[CheckoutUnit]:
        with transaction(self._conn_factory) as (_, cur):
            yield _MySQLCheckoutUnit(cur, self._carts, self._ledger)

    def get_by_id(self, order_id: int) -> Optional[Order]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_ORDER_COLUMNS} FROM orders WHERE id=%s", (order_id,))
            row = fetchone(cur)
            if not row:
                return None
            items = self._items_for(cur, [int(row["id"])])
            return _row_to_order(row, items.get(int(row["id"]), []))

    def get_by_payment_intent(self, payment_intent_id: str) -> Optional[Order]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_ORDER_COLUMNS} FROM orders WHERE payment_intent_id=%s ORDER BY id DESC LIMIT 1",
                (payment_intent_id,),
            )
            row = fetchone(cur)
            if not row:
                return None
            items = self._items_for(cur, [int(row["id"])])
            return _row_to_order(row, items.get(int(row["id"]), []))

    def list_for_user(self, user_id: int) -> Sequence[Order]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_ORDER_COLUMNS} FROM orders WHERE user_id=%s ORDER BY created_at DESC, id DESC",
                (user_id,),
            )
            rows = fetchall(cur)
            items = self._items_for(cur, [int(r["id"]) for r in rows])
            return [_row_to_order(r, items.get(int(r["id"]), [])) for r in rows]

    def list_page(self, *, filters: OrderFilters, limit: int, offset: int) -> Sequence[Order]:
        clauses: list[str] = []
        params: list = []
        if filters.status:
            clauses.append("status = %s")
            params.append(filters.status.value)
        if filters.from_date:
            clauses.append("created_at >= %s")
            params.append(filters.from_date)
        if filters.to_date:
            # inclusive of the whole end day
            clauses.append("created_at < %s")
            params.append(filters.to_date + timedelta(days=1))

        sql = f"SELECT {_ORDER_COLUMNS} FROM orders"
        if clauses:
            sql += " WHERE " + " AND ".join(clauses)
        sql += " ORDER BY created_at DESC, id DESC LIMIT %s OFFSET %s"
        params.extend([int(limit), int(offset)])

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return [_row_to_order(r) for r in fetchall(cur)]

    def update_status(
        self,
        order_id: int,
        status: OrderStatus,
        *,
        expected: Optional[OrderStatus] = None,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            if expected is None:
                cur.execute("UPDATE orders SET status=%s WHERE id=%s", (status.value, order_id))
            else:
                cur.execute(
                    "UPDATE orders SET status=%s WHERE id=%s AND status=%s",
                    (status.value, order_id, expected.value),
                )
            return cur.rowcount > 0

    @staticmethod
    def _items_for(cur, order_ids: list[int]) -> dict[int, list[OrderItem]]:
        if not order_ids:
            return {}
        cur.execute(
            f"""
            SELECT oi.id, oi.order_id, oi.product_id, oi.quantity, oi.price,
                   p.name, p.description, p.category
            FROM order_items oi
            JOIN products p ON oi.product_id = p.id
            WHERE oi.order_id IN ({placeholders(len(order_ids))})
            ORDER BY oi.id
            """,
            tuple(order_ids),
        )
        out: dict[int, list[OrderItem]] = {}
        for r in fetchall(cur):
            item = _row_to_item(r)
            out.setdefault(item.order_id, []).append(item)
        return out
