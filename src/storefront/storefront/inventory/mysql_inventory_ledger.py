from __future__ import annotations

from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .ledger import InventoryLedger


class MySQLInventoryLedger(InventoryLedger):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def decrement(self, cur, product_id: int, quantity: int) -> bool:
        # The WHERE clause is evaluated against the row as locked by this
        # UPDATE, so two transactions cannot both pass it on the last units.
        cur.execute(
            "UPDATE products SET inventory = inventory - %s WHERE id = %s AND inventory >= %s",
            (int(quantity), int(product_id), int(quantity)),
        )
        return cur.rowcount == 1

    def set_level(self, product_id: int, inventory: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT id FROM products WHERE id=%s FOR UPDATE", (int(product_id),))
            if not fetchone(cur):
                return False
            cur.execute("UPDATE products SET inventory=%s WHERE id=%s", (int(inventory), int(product_id)))
            return True

    def level(self, product_id: int) -> Optional[int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT inventory FROM products WHERE id=%s", (int(product_id),))
            row = fetchone(cur)
            return int(row["inventory"]) if row else None
