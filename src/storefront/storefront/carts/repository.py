from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import CartLine


class CartRepository(Protocol):
    """Cart storage. Every item mutation is scoped to the owning user."""

    def get_or_create_cart_id(self, user_id: int) -> int:
        raise NotImplementedError

    def list_lines(self, user_id: int) -> Sequence[CartLine]:
        raise NotImplementedError

    def get_owned_line(self, user_id: int, item_id: int) -> Optional[CartLine]:
        raise NotImplementedError

    def add_quantity(self, cart_id: int, product_id: int, quantity: int) -> None:
        """Insert a line, or add to the existing line for the same product."""
        raise NotImplementedError

    def set_quantity(self, user_id: int, item_id: int, quantity: int) -> None:
        raise NotImplementedError

    def delete_line(self, user_id: int, item_id: int) -> bool:
        raise NotImplementedError

    def clear(self, user_id: int) -> int:
        raise NotImplementedError
