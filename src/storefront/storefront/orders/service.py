from __future__ import annotations

from typing import Any, Optional, Sequence

from ..common.datetime_utils import parse_optional_date
from ..common.logging_setup import get_logger
from ..common.money import sum_lines, to_cents
from ..core.enums import OrderStatus, Role
from ..core.exceptions import (
    AuthorizationError,
    DomainError,
    EmptyCartError,
    InsufficientInventoryError,
    NotFoundError,
    PaymentError,
    ValidationError,
)
from ..users.model import User
from .model import Order, OrderFilters, can_transition
from .repository import OrderRepository


def parse_status(value: Any) -> OrderStatus:
    try:
        return OrderStatus(value)
    except ValueError:
        raise ValidationError("Invalid order status")


class OrderService:
    """Use case: turn a cart into an order, and manage orders afterwards."""

    def __init__(self, orders: OrderRepository, *, logger: Optional[Any] = None):
        self._orders = orders
        self._log = logger or get_logger(__name__)

    def create_from_cart(
        self,
        user_id: int,
        payment_intent_id: Optional[str] = None,
        *,
        paid_cents: Optional[int] = None,
    ) -> Order:
        """Convert the user's cart into a pending order, all or nothing.

        Inside one transaction: lock the user's cart, snapshot it at current
        prices, insert the order and its items, decrement stock line by line,
        clear the cart. A failed decrement (stock taken by a concurrent
        checkout) raises InsufficientInventoryError and the transaction rolls
        back, so the order, its items, the stock and the cart are all left as
        they were.

        With `payment_intent_id`, an order already placed for that intent is
        returned instead of a new one. With `paid_cents`, the cart total must
        equal the amount the processor charged.
        """
        user_id = int(user_id)
        existing_id: Optional[int] = None
        try:
            with self._orders.checkout() as unit:
                unit.lock_cart(user_id)
                if payment_intent_id:
                    existing_id = unit.order_for_intent(payment_intent_id)
                if existing_id is None:
                    order_id = self._place(unit, user_id, payment_intent_id, paid_cents)
        except InsufficientInventoryError as e:
            self._log.warning("Checkout rolled back", user_id=user_id, product_id=e.product_id, reason=e.category)
            raise
        except DomainError:
            raise
        except Exception:
            self._log.exception("Checkout failed, transaction rolled back", user_id=user_id)
            raise

        if existing_id is not None:
            self._log.info("Order already placed for payment", order_id=existing_id, payment_intent_id=payment_intent_id)
            order_id = existing_id

        order = self._orders.get_by_id(order_id)
        if not order:
            raise NotFoundError("Order not found")
        if existing_id is not None:
            return order
        self._log.info(
            "Order created",
            order_id=order.order_id,
            user_id=user_id,
            total=str(order.total),
            lines=len(order.items),
            payment_intent_id=payment_intent_id,
        )
        return order

    @staticmethod
    def _place(unit, user_id: int, payment_intent_id: Optional[str], paid_cents: Optional[int]) -> int:
        lines = unit.cart_lines(user_id)
        if not lines:
            raise EmptyCartError("Cannot create order with empty cart")

        total = sum_lines((line.price, line.quantity) for line in lines)
        if paid_cents is not None and to_cents(total) != int(paid_cents):
            raise PaymentError("Payment amount does not match cart total")

        order_id = unit.insert_order(user_id=user_id, total=total, payment_intent_id=payment_intent_id)
        for line in lines:
            unit.insert_order_item(
                order_id=order_id,
                product_id=line.product_id,
                quantity=line.quantity,
                price=line.price,
            )
            if not unit.decrement_inventory(line.product_id, line.quantity):
                raise InsufficientInventoryError(line.product_id, line.name)

        unit.clear_cart(user_id)
        return order_id

    def get_for(self, user: User, order_id: int) -> Order:
        order = self._orders.get_by_id(int(order_id))
        if not order:
            raise NotFoundError("Order not found")
        if order.user_id != user.user_id and user.role != Role.ADMIN:
            raise AuthorizationError("Not authorized to access this order")
        return order

    def list_for_user(self, user_id: int) -> Sequence[Order]:
        return self._orders.list_for_user(int(user_id))

    def list_all(
        self,
        *,
        limit: int,
        offset: int,
        status: Optional[str] = None,
        from_date: Optional[str] = None,
        to_date: Optional[str] = None,
    ) -> Sequence[Order]:
        filters = OrderFilters(
            status=parse_status(status) if status else None,
            from_date=parse_optional_date(from_date, "fromDate"),
            to_date=parse_optional_date(to_date, "toDate"),
        )
        return self._orders.list_page(filters=filters, limit=limit, offset=offset)

    def update_status(self, order_id: int, status: Any, *, force: bool = False, actor_id: Optional[int] = None) -> Order:
        new_status = parse_status(status)
        order = self._orders.get_by_id(int(order_id))
        if not order:
            raise NotFoundError("Order not found")

        if order.status == new_status:
            return order
        if not force and not can_transition(order.status, new_status):
            raise ValidationError(f"Cannot change order status from {order.status.value} to {new_status.value}")

        expected = None if force else order.status
        if not self._orders.update_status(order.order_id, new_status, expected=expected):
            raise ValidationError("Order status changed concurrently, please retry")

        self._log.info(
            "Order status changed",
            order_id=order.order_id,
            old_status=order.status.value,
            new_status=new_status.value,
            forced=force,
            actor_id=actor_id,
        )
        return self._orders.get_by_id(order.order_id)

    def advance_from_payment(self, order: Order, new_status: OrderStatus) -> bool:
        """Status change driven by the payment processor; never forced."""
        if order.status == new_status or not can_transition(order.status, new_status):
            self._log.info(
                "Payment event ignored for order",
                order_id=order.order_id,
                status=order.status.value,
                requested=new_status.value,
            )
            return False
        changed = self._orders.update_status(order.order_id, new_status, expected=order.status)
        if changed:
            self._log.info("Order status changed by payment", order_id=order.order_id, new_status=new_status.value)
        return changed

    def find_by_payment_intent(self, payment_intent_id: str) -> Optional[Order]:
        return self._orders.get_by_payment_intent(payment_intent_id)

    def find_by_id(self, order_id: int) -> Optional[Order]:
        return self._orders.get_by_id(int(order_id))
