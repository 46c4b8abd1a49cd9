from __future__ import annotations

from decimal import Decimal
from typing import Optional, Protocol, Sequence

from .model import Product, ProductFilters


class ProductRepository(Protocol):
    def get_by_id(self, product_id: int) -> Optional[Product]:
        raise NotImplementedError

    def list_page(self, *, filters: ProductFilters, limit: int, offset: int) -> Sequence[Product]:
        raise NotImplementedError

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
        raise NotImplementedError

    def update_product(self, product_id: int, *, fields: dict, images: Optional[Sequence[str]] = None) -> bool:
        """Update catalog fields (never inventory); `images` replaces all images when given."""
        raise NotImplementedError

    def delete_product(self, product_id: int) -> bool:
        raise NotImplementedError
