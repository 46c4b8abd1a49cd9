from __future__ import annotations

from typing import Optional, Protocol


class InventoryLedger(Protocol):
    """The only writer of product stock levels after a product is created."""

    def decrement(self, cur, product_id: int, quantity: int) -> bool:
        """Subtract `quantity` only if current stock covers it.

        Runs on the caller's cursor so it joins the caller's transaction.
        Returns False, changing nothing, when stock is short or the product
        is missing.
        """
        raise NotImplementedError

    def set_level(self, product_id: int, inventory: int) -> bool:
        raise NotImplementedError

    def level(self, product_id: int) -> Optional[int]:
        """Current stock, or None for an unknown product."""
        raise NotImplementedError
