"""In-memory stand-ins for the MySQL repositories, sharing one Store."""

from __future__ import annotations

import itertools
import threading
from contextlib import contextmanager
from dataclasses import replace
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Optional

from werkzeug.security import generate_password_hash

from src.storefront.storefront.admin.model import SalesBucket, TopProduct
from src.storefront.storefront.carts.model import CartLine
from src.storefront.storefront.core.enums import OrderStatus, Role
from src.storefront.storefront.orders.model import Order, OrderItem
from src.storefront.storefront.products.model import Product
from src.storefront.storefront.users.model import User


class Store:
    """Shared in-memory tables. `lock` plays the row lock of the database."""

    def __init__(self):
        self.lock = threading.RLock()
        self.users: dict[int, User] = {}
        self.products: dict[int, Product] = {}
        self.carts: dict[int, int] = {}  # user_id -> cart_id
        self.cart_items: dict[int, dict] = {}  # item_id -> {cart_id, product_id, quantity}
        self.orders: dict[int, dict] = {}
        self.order_items: dict[int, OrderItem] = {}
        self._ids = {name: itertools.count(1) for name in ("user", "product", "cart", "item", "order", "order_item")}
        self._clock = datetime(2026, 3, 1, 9, 0, 0)
        self._cart_locks: dict[int, threading.Lock] = {}

    def next_id(self, name: str) -> int:
        return next(self._ids[name])

    def cart_lock(self, user_id: int) -> threading.Lock:
        with self.lock:
            return self._cart_locks.setdefault(user_id, threading.Lock())

    def tick(self) -> datetime:
        self._clock += timedelta(minutes=1)
        return self._clock

    def cart_lines(self, user_id: int) -> list[CartLine]:
        cart_id = self.carts.get(user_id)
        if cart_id is None:
            return []
        with self.lock:
            rows = sorted((i, dict(r)) for i, r in self.cart_items.items())
        lines = []
        for item_id, row in rows:
            if row["cart_id"] != cart_id:
                continue
            product = self.products[row["product_id"]]
            lines.append(
                CartLine(
                    item_id=item_id,
                    cart_id=cart_id,
                    product_id=product.product_id,
                    quantity=row["quantity"],
                    name=product.name,
                    price=product.price,
                    description=product.description,
                    category=product.category,
                )
            )
        return lines

    def build_order(self, order_id: int) -> Optional[Order]:
        row = self.orders.get(order_id)
        if not row:
            return None
        with self.lock:
            snapshot = sorted(self.order_items.values(), key=lambda i: i.item_id)
        items = []
        for item in snapshot:
            if item.order_id != order_id:
                continue
            product = self.products.get(item.product_id)
            items.append(replace(item, name=product.name if product else None))
        return Order(items=tuple(items), **row)

    # helpers for arranging test data

    def add_user(self, name="Ann", email="ann@x.com", password="secret123", role=Role.USER) -> User:
        user_id = self.next_id("user")
        user = User(
            user_id=user_id,
            name=name,
            email=email,
            password_hash=generate_password_hash(password),
            role=role,
            created_at=self.tick(),
        )
        self.users[user_id] = user
        return user

    def add_product(self, name="Notebook", price="9.99", inventory=3, category="Stationery", product_id=None) -> Product:
        product_id = product_id or self.next_id("product")
        product = Product(
            product_id=product_id,
            name=name,
            description=None,
            price=Decimal(price),
            inventory=inventory,
            category=category,
        )
        self.products[product_id] = product
        return product


class InMemoryUsers:
    def __init__(self, store: Store):
        self._s = store

    def get_by_id(self, user_id):
        return self._s.users.get(int(user_id))

    def get_by_email(self, email):
        return next((u for u in self._s.users.values() if u.email == email), None)

    def create_user(self, *, name, email, password_hash, role):
        user_id = self._s.next_id("user")
        self._s.users[user_id] = User(user_id, name, email, password_hash, Role(role), self._s.tick())
        return user_id

    def update_details(self, user_id, *, name, email):
        self._s.users[user_id] = replace(self._s.users[user_id], name=name, email=email)
        return True

    def update_password(self, user_id, *, password_hash):
        self._s.users[user_id] = replace(self._s.users[user_id], password_hash=password_hash)
        return True

    def update_role(self, user_id, *, role):
        self._s.users[user_id] = replace(self._s.users[user_id], role=Role(role))
        return True

    def list_page(self, *, limit, offset):
        users = sorted(self._s.users.values(), key=lambda u: u.user_id)
        return users[offset : offset + limit]


class InMemoryProducts:
    def __init__(self, store: Store):
        self._s = store

    def get_by_id(self, product_id):
        return self._s.products.get(int(product_id))

    def list_page(self, *, filters, limit, offset):
        items = sorted(self._s.products.values(), key=lambda p: p.product_id)
        if filters.name:
            items = [p for p in items if filters.name.lower() in p.name.lower()]
        if filters.category:
            items = [p for p in items if p.category == filters.category]
        if filters.min_price is not None:
            items = [p for p in items if p.price >= filters.min_price]
        if filters.max_price is not None:
            items = [p for p in items if p.price <= filters.max_price]
        return items[offset : offset + limit]

    def create_product(self, *, name, description, price, inventory, category, images):
        product_id = self._s.next_id("product")
        self._s.products[product_id] = Product(product_id, name, description, price, inventory, category, tuple(images))
        return product_id

    def update_product(self, product_id, *, fields, images=None):
        product = self._s.products.get(product_id)
        if not product:
            return False
        changes = {k: v for k, v in fields.items() if k != "inventory"}
        if images is not None:
            changes["images"] = tuple(images)
        self._s.products[product_id] = replace(product, **changes)
        return True

    def delete_product(self, product_id):
        return self._s.products.pop(product_id, None) is not None


class InMemoryLedger:
    def __init__(self, store: Store):
        self._s = store

    def decrement(self, cur, product_id, quantity):
        with self._s.lock:
            product = self._s.products.get(product_id)
            if not product or product.inventory < quantity:
                return False
            self._s.products[product_id] = replace(product, inventory=product.inventory - quantity)
            return True

    def set_level(self, product_id, inventory):
        with self._s.lock:
            product = self._s.products.get(product_id)
            if not product:
                return False
            self._s.products[product_id] = replace(product, inventory=inventory)
            return True

    def level(self, product_id):
        product = self._s.products.get(product_id)
        return product.inventory if product else None


class InMemoryCarts:
    def __init__(self, store: Store):
        self._s = store

    def get_or_create_cart_id(self, user_id):
        with self._s.lock:
            if user_id not in self._s.carts:
                self._s.carts[user_id] = self._s.next_id("cart")
            return self._s.carts[user_id]

    def list_lines(self, user_id):
        return self._s.cart_lines(user_id)

    def get_owned_line(self, user_id, item_id):
        return next((line for line in self._s.cart_lines(user_id) if line.item_id == item_id), None)

    def add_quantity(self, cart_id, product_id, quantity):
        with self._s.lock:
            for row in self._s.cart_items.values():
                if row["cart_id"] == cart_id and row["product_id"] == product_id:
                    row["quantity"] += quantity
                    return
            self._s.cart_items[self._s.next_id("item")] = {
                "cart_id": cart_id,
                "product_id": product_id,
                "quantity": quantity,
            }

    def set_quantity(self, user_id, item_id, quantity):
        if self.get_owned_line(user_id, item_id):
            self._s.cart_items[item_id]["quantity"] = quantity

    def delete_line(self, user_id, item_id):
        if not self.get_owned_line(user_id, item_id):
            return False
        del self._s.cart_items[item_id]
        return True

    def clear(self, user_id):
        cart_id = self._s.carts.get(user_id)
        doomed = [i for i, row in self._s.cart_items.items() if row["cart_id"] == cart_id]
        for item_id in doomed:
            del self._s.cart_items[item_id]
        return len(doomed)


class InMemoryCheckoutUnit:
    """Applies writes immediately and keeps an undo log for rollback."""

    def __init__(self, store: Store, ledger: InMemoryLedger):
        self._s = store
        self._ledger = ledger
        self.undo: list = []
        self.held: list = []

    def lock_cart(self, user_id):
        lock = self._s.cart_lock(user_id)
        lock.acquire()
        self.held.append(lock)

    def order_for_intent(self, payment_intent_id):
        with self._s.lock:
            return next(
                (oid for oid, row in self._s.orders.items() if row["payment_intent_id"] == payment_intent_id),
                None,
            )

    def cart_lines(self, user_id):
        return self._s.cart_lines(user_id)

    def insert_order(self, *, user_id, total, payment_intent_id):
        with self._s.lock:
            if payment_intent_id and self.order_for_intent(payment_intent_id) is not None:
                raise RuntimeError(f"Duplicate entry '{payment_intent_id}' for key 'idx_orders_payment_intent'")
            order_id = self._s.next_id("order")
            self._s.orders[order_id] = {
                "order_id": order_id,
                "user_id": user_id,
                "status": OrderStatus.PENDING,
                "total": total,
                "payment_intent_id": payment_intent_id,
                "created_at": self._s.tick(),
            }
        self.undo.append(lambda: self._s.orders.pop(order_id, None))
        return order_id

    def insert_order_item(self, *, order_id, product_id, quantity, price):
        with self._s.lock:
            item_id = self._s.next_id("order_item")
            self._s.order_items[item_id] = OrderItem(
                order_id=order_id, product_id=product_id, quantity=quantity, price=price, item_id=item_id
            )
        self.undo.append(lambda: self._s.order_items.pop(item_id, None))

    def decrement_inventory(self, product_id, quantity):
        if not self._ledger.decrement(None, product_id, quantity):
            return False

        def restock():
            with self._s.lock:
                current = self._s.products[product_id]
                self._s.products[product_id] = replace(current, inventory=current.inventory + quantity)

        self.undo.append(restock)
        return True

    def clear_cart(self, user_id):
        with self._s.lock:
            cart_id = self._s.carts.get(user_id)
            removed = {i: dict(row) for i, row in self._s.cart_items.items() if row["cart_id"] == cart_id}
            for item_id in removed:
                del self._s.cart_items[item_id]
        self.undo.append(lambda: self._s.cart_items.update(removed))


class InMemoryOrders:
    def __init__(self, store: Store, ledger: Optional[InMemoryLedger] = None):
        self._s = store
        self._ledger = ledger or InMemoryLedger(store)
        self.rollbacks = 0

    @contextmanager
    def checkout(self):
        unit = InMemoryCheckoutUnit(self._s, self._ledger)
        try:
            yield unit
        except BaseException:
            for undo in reversed(unit.undo):
                undo()
            self.rollbacks += 1
            raise
        finally:
            for lock in reversed(unit.held):
                lock.release()

    def get_by_id(self, order_id):
        return self._s.build_order(int(order_id))

    def get_by_payment_intent(self, payment_intent_id):
        with self._s.lock:
            matches = [oid for oid, row in self._s.orders.items() if row["payment_intent_id"] == payment_intent_id]
        return self._s.build_order(max(matches)) if matches else None

    def list_for_user(self, user_id):
        ids = [oid for oid, row in self._s.orders.items() if row["user_id"] == user_id]
        return [self._s.build_order(oid) for oid in sorted(ids, reverse=True)]

    def list_page(self, *, filters, limit, offset):
        rows = sorted(self._s.orders.values(), key=lambda r: (r["created_at"], r["order_id"]), reverse=True)
        if filters.status:
            rows = [r for r in rows if r["status"] == filters.status]
        if filters.from_date:
            rows = [r for r in rows if r["created_at"].date() >= filters.from_date]
        if filters.to_date:
            rows = [r for r in rows if r["created_at"].date() <= filters.to_date]
        return [replace(self._s.build_order(r["order_id"]), items=()) for r in rows[offset : offset + limit]]

    def update_status(self, order_id, status, *, expected=None):
        with self._s.lock:
            row = self._s.orders.get(order_id)
            if not row or (expected is not None and row["status"] != expected):
                return False
            row["status"] = OrderStatus(status)
            return True


class InMemoryReports:
    def __init__(self, store: Store):
        self._s = store

    def _live_orders(self, start=None, end=None):
        rows = [r for r in self._s.orders.values() if r["status"] != OrderStatus.CANCELLED]
        if start:
            rows = [r for r in rows if r["created_at"].date() >= start]
        if end:
            rows = [r for r in rows if r["created_at"].date() <= end]
        return rows

    def counts(self, *, low_inventory_threshold):
        return {
            "users": len(self._s.users),
            "products": len(self._s.products),
            "orders": len(self._s.orders),
            "sales": sum((r["total"] for r in self._live_orders()), Decimal("0")),
            "low_inventory": sum(1 for p in self._s.products.values() if p.inventory < low_inventory_threshold),
        }

    def sales_by_period(self, *, period, start, end):
        buckets: dict[str, list] = {}
        for row in self._live_orders(start, end):
            buckets.setdefault(row["created_at"].strftime(period.date_format), []).append(row["total"])
        return [
            SalesBucket(period=key, order_count=len(totals), total_sales=sum(totals, Decimal("0")))
            for key, totals in sorted(buckets.items())
        ]

    def top_products(self, *, start, end, limit):
        live = {r["order_id"] for r in self._live_orders(start, end)}
        agg: dict[int, list] = {}
        for item in self._s.order_items.values():
            if item.order_id in live:
                qty, sales = agg.get(item.product_id, [0, Decimal("0")])
                agg[item.product_id] = [qty + item.quantity, sales + item.price * item.quantity]
        ranked = sorted(agg.items(), key=lambda kv: (-kv[1][0], kv[0]))[:limit]
        return [
            TopProduct(
                product_id=pid,
                name=self._s.products[pid].name,
                category=self._s.products[pid].category,
                total_quantity=qty,
                total_sales=sales,
            )
            for pid, (qty, sales) in ranked
        ]
