from __future__ import annotations

from decimal import Decimal
from typing import Optional, Sequence

import mysql.connector

from ..core.exceptions import ConflictError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, placeholders
from .model import Product, ProductFilters
from .repository import ProductRepository

# Column names allowed in UPDATE statements; inventory goes through the ledger.
_UPDATABLE = ("name", "description", "price", "category")


def _row_to_product(row: dict, images: Sequence[str] = ()) -> Product:
    return Product(
        product_id=int(row["id"]),
        name=row["name"],
        description=row.get("description"),
        price=Decimal(row["price"]),
        inventory=int(row["inventory"]),
        category=row.get("category"),
        images=tuple(images),
    )


class MySQLProductRepository(ProductRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, product_id: int) -> Optional[Product]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT id, name, description, price, inventory, category FROM products WHERE id=%s",
                (product_id,),
            )
            row = fetchone(cur)
            if not row:
                return None
            cur.execute("SELECT image_url FROM product_images WHERE product_id=%s ORDER BY id", (product_id,))
            images = [r["image_url"] for r in fetchall(cur)]
            return _row_to_product(row, images)

    def list_page(self, *, filters: ProductFilters, limit: int, offset: int) -> Sequence[Product]:
        clauses: list[str] = []
        params: list = []
        if filters.name:
            clauses.append("name LIKE %s")
            params.append(f"%{filters.name}%")
        if filters.category:
            clauses.append("category = %s")
            params.append(filters.category)
        if filters.min_price is not None:
            clauses.append("price >= %s")
            params.append(filters.min_price)
        if filters.max_price is not None:
            clauses.append("price <= %s")
            params.append(filters.max_price)

        sql = "SELECT id, name, description, price, inventory, category FROM products"
        if clauses:
            sql += " WHERE " + " AND ".join(clauses)
        sql += " ORDER BY id LIMIT %s OFFSET %s"
        params.extend([int(limit), int(offset)])

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            rows = fetchall(cur)
            if not rows:
                return []

            # One query for the images of the whole page
            ids = [int(r["id"]) for r in rows]
            cur.execute(
                f"SELECT product_id, image_url FROM product_images WHERE product_id IN ({placeholders(len(ids))}) ORDER BY id",
                tuple(ids),
            )
            image_map: dict[int, list[str]] = {}
            for img in fetchall(cur):
                image_map.setdefault(int(img["product_id"]), []).append(img["image_url"])

            return [_row_to_product(r, image_map.get(int(r["id"]), [])) for r in rows]

    def create_product(
        self,
        *,
        name: str,
        description: Optional[str],
        price: Decimal,
        inventory: int,
        category: Optional[str],
        images: Sequence[str],
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO products (name, description, price, inventory, category) VALUES (%s, %s, %s, %s, %s)",
                (name, description, price, int(inventory), category),
            )
            product_id = int(cur.lastrowid)
            if images:
                cur.executemany(
                    "INSERT INTO product_images (product_id, image_url) VALUES (%s, %s)",
                    [(product_id, url) for url in images],
                )
            return product_id

    def update_product(self, product_id: int, *, fields: dict, images: Optional[Sequence[str]] = None) -> bool:
        columns = [c for c in _UPDATABLE if c in fields]
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT id FROM products WHERE id=%s FOR UPDATE", (product_id,))
            if not fetchone(cur):
                return False

            if columns:
                assignments = ", ".join(f"{c}=%s" for c in columns)
                cur.execute(
                    f"UPDATE products SET {assignments} WHERE id=%s",
                    tuple(fields[c] for c in columns) + (product_id,),
                )

            if images is not None:
                cur.execute("DELETE FROM product_images WHERE product_id=%s", (product_id,))
                if images:
                    cur.executemany(
                        "INSERT INTO product_images (product_id, image_url) VALUES (%s, %s)",
                        [(product_id, url) for url in images],
                    )
            return True

    def delete_product(self, product_id: int) -> bool:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute("DELETE FROM product_images WHERE product_id=%s", (product_id,))
                cur.execute("DELETE FROM products WHERE id=%s", (product_id,))
                return cur.rowcount > 0
        except mysql.connector.IntegrityError:
            raise ConflictError("Product has existing orders and cannot be deleted")
