from __future__ import annotations

from decimal import Decimal
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import CartLine
from .repository import CartRepository

_LINES_SQL = """
    SELECT c.id AS cart_id, ci.id, ci.product_id, ci.quantity,
           p.name, p.description, p.price, p.category
    FROM carts c
    JOIN cart_items ci ON c.id = ci.cart_id
    JOIN products p ON ci.product_id = p.id
    WHERE c.user_id = %s
    ORDER BY ci.id
"""


def _row_to_line(row: dict) -> CartLine:
    return CartLine(
        item_id=int(row["id"]),
        cart_id=int(row["cart_id"]),
        product_id=int(row["product_id"]),
        quantity=int(row["quantity"]),
        name=row["name"],
        price=Decimal(row["price"]),
        description=row.get("description"),
        category=row.get("category"),
    )


class MySQLCartRepository(CartRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_or_create_cart_id(self, user_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            # carts.user_id is UNIQUE: concurrent callers end up with the same row
            cur.execute("INSERT IGNORE INTO carts (user_id) VALUES (%s)", (user_id,))
            cur.execute("SELECT id FROM carts WHERE user_id=%s", (user_id,))
            return int(fetchone(cur)["id"])

    def list_lines(self, user_id: int) -> Sequence[CartLine]:
        with db_cursor(self._conn_factory) as (_, cur):
            return self.lines_in(cur, user_id)

    def get_owned_line(self, user_id: int, item_id: int) -> Optional[CartLine]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT c.id AS cart_id, ci.id, ci.product_id, ci.quantity,
                       p.name, p.description, p.price, p.category
                FROM cart_items ci
                JOIN carts c ON ci.cart_id = c.id
                JOIN products p ON ci.product_id = p.id
                WHERE ci.id = %s AND c.user_id = %s
                """,
                (item_id, user_id),
            )
            row = fetchone(cur)
            return _row_to_line(row) if row else None

    def add_quantity(self, cart_id: int, product_id: int, quantity: int) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO cart_items (cart_id, product_id, quantity)
                VALUES (%s, %s, %s)
                ON DUPLICATE KEY UPDATE quantity = quantity + %s
                """,
                (cart_id, product_id, quantity, quantity),
            )

    def set_quantity(self, user_id: int, item_id: int, quantity: int) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE cart_items ci
                JOIN carts c ON ci.cart_id = c.id
                SET ci.quantity = %s
                WHERE ci.id = %s AND c.user_id = %s
                """,
                (quantity, item_id, user_id),
            )

    def delete_line(self, user_id: int, item_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                DELETE ci FROM cart_items ci
                JOIN carts c ON ci.cart_id = c.id
                WHERE ci.id = %s AND c.user_id = %s
                """,
                (item_id, user_id),
            )
            return cur.rowcount > 0

    def clear(self, user_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            return self.clear_in(cur, user_id)

    # Cursor-level variants used by the checkout transaction.

    def lines_in(self, cur, user_id: int) -> list[CartLine]:
        cur.execute(_LINES_SQL, (user_id,))
        return [_row_to_line(r) for r in fetchall(cur)]

    def clear_in(self, cur, user_id: int) -> int:
        cur.execute(
            """
            DELETE ci FROM cart_items ci
            JOIN carts c ON ci.cart_id = c.id
            WHERE c.user_id = %s
            """,
            (user_id,),
        )
        return int(cur.rowcount)
