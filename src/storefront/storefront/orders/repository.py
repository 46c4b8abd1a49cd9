from __future__ import annotations

from decimal import Decimal
from typing import ContextManager, Optional, Protocol, Sequence

from ..carts.model import CartLine
from ..core.enums import OrderStatus
from .model import Order, OrderFilters


class CheckoutUnit(Protocol):
    """Statements of one checkout. They all belong to a single transaction:
    leaving the `checkout()` block by an exception undoes every one of them.
    """

    def lock_cart(self, user_id: int) -> None:
        """Hold the user's cart until the unit ends; a second checkout waits here."""
        raise NotImplementedError

    def order_for_intent(self, payment_intent_id: str) -> Optional[int]:
        raise NotImplementedError

    def cart_lines(self, user_id: int) -> Sequence[CartLine]:
        raise NotImplementedError

    def insert_order(self, *, user_id: int, total: Decimal, payment_intent_id: Optional[str]) -> int:
        raise NotImplementedError

    def insert_order_item(self, *, order_id: int, product_id: int, quantity: int, price: Decimal) -> None:
        raise NotImplementedError

    def decrement_inventory(self, product_id: int, quantity: int) -> bool:
        raise NotImplementedError

    def clear_cart(self, user_id: int) -> None:
        raise NotImplementedError


class OrderRepository(Protocol):
    def checkout(self) -> ContextManager[CheckoutUnit]:
        raise NotImplementedError

    def get_by_id(self, order_id: int) -> Optional[Order]:
        raise NotImplementedError

    def get_by_payment_intent(self, payment_intent_id: str) -> Optional[Order]:
        raise NotImplementedError

    def list_for_user(self, user_id: int) -> Sequence[Order]:
        raise NotImplementedError

    def list_page(self, *, filters: OrderFilters, limit: int, offset: int) -> Sequence[Order]:
        raise NotImplementedError

    def update_status(
        self,
        order_id: int,
        status: OrderStatus,
        *,
        expected: Optional[OrderStatus] = None,
    ) -> bool:
        """Set the status; with `expected`, only if the current status still matches."""
        raise NotImplementedError
