from __future__ import annotations

from decimal import Decimal
from typing import Any, Optional

from ..common.logging_setup import get_logger
from ..common.validators import require_int, require_positive_int
from ..core.exceptions import InsufficientInventoryError, NotFoundError
from ..products.repository import ProductRepository
from .model import CartView
from .repository import CartRepository


class CartService:
    """Use case: the per-user cart, mutable until checkout.

    Stock is only pre-checked here; nothing is reserved. Checkout's
    conditional decrement is what actually guards inventory.
    """

    def __init__(self, carts: CartRepository, products: ProductRepository, *, logger: Optional[Any] = None):
        self._carts = carts
        self._products = products
        self._log = logger or get_logger(__name__)

    def get_or_create(self, user_id: int) -> int:
        return self._carts.get_or_create_cart_id(int(user_id))

    def view(self, user_id: int) -> CartView:
        return CartView(lines=tuple(self._carts.list_lines(int(user_id))))

    def total(self, user_id: int) -> Decimal:
        # Current prices every time; the order total is frozen at checkout
        return self.view(user_id).total

    def add_item(self, user_id: int, product_id: Any, quantity: Any = 1) -> CartView:
        product_id = require_positive_int(product_id, "Product ID")
        quantity = require_positive_int(quantity, "Quantity")

        product = self._products.get_by_id(product_id)
        if not product:
            raise NotFoundError("Product not found")
        if product.inventory < quantity:
            raise InsufficientInventoryError(product.product_id, product.name)

        cart_id = self.get_or_create(user_id)
        self._carts.add_quantity(cart_id, product_id, quantity)
        self._log.debug("Cart item added", user_id=int(user_id), product_id=product_id, quantity=quantity)
        return self.view(user_id)

    def update_quantity(self, user_id: int, item_id: int, quantity: Any) -> CartView:
        quantity = require_int(quantity, "Quantity")
        self._require_owned(user_id, item_id)

        if quantity <= 0:
            self._carts.delete_line(int(user_id), int(item_id))
        else:
            self._carts.set_quantity(int(user_id), int(item_id), quantity)
        return self.view(user_id)

    def remove_item(self, user_id: int, item_id: int) -> CartView:
        self._require_owned(user_id, item_id)
        self._carts.delete_line(int(user_id), int(item_id))
        return self.view(user_id)

    def clear(self, user_id: int) -> CartView:
        removed = self._carts.clear(int(user_id))
        self._log.debug("Cart cleared", user_id=int(user_id), removed=removed)
        return self.view(user_id)

    def _require_owned(self, user_id: int, item_id: int) -> None:
        if not self._carts.get_owned_line(int(user_id), int(item_id)):
            raise NotFoundError("Item not found in user cart")
