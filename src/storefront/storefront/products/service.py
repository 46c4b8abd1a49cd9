from __future__ import annotations

from typing import Any, Optional, Sequence

from ..common.logging_setup import get_logger
from ..common.validators import (
    require_length,
    require_non_negative_decimal,
    require_non_negative_int,
    require_positive_decimal,
)
from ..core.exceptions import NotFoundError, ValidationError
from ..inventory.ledger import InventoryLedger
from .model import Product, ProductFilters
from .repository import ProductRepository


def _optional_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _images(value: Any) -> list[str]:
    if value is None:
        return []
    if not isinstance(value, (list, tuple)) or not all(isinstance(v, str) and v.strip() for v in value):
        raise ValidationError("Images must be a list of URLs")
    return [v.strip() for v in value]


class ProductService:
    """Use case: catalog browsing (public) and product management (admin)."""

    def __init__(self, products: ProductRepository, ledger: InventoryLedger, *, logger: Optional[Any] = None):
        self._products = products
        self._ledger = ledger
        self._log = logger or get_logger(__name__)

    def list_products(
        self,
        *,
        limit: int,
        offset: int,
        name: Optional[str] = None,
        category: Optional[str] = None,
        min_price: Any = None,
        max_price: Any = None,
    ) -> Sequence[Product]:
        filters = ProductFilters(
            name=_optional_text(name),
            category=_optional_text(category),
            min_price=require_non_negative_decimal(min_price, "minPrice") if min_price not in (None, "") else None,
            max_price=require_non_negative_decimal(max_price, "maxPrice") if max_price not in (None, "") else None,
        )
        return self._products.list_page(filters=filters, limit=limit, offset=offset)

    def get_product(self, product_id: int) -> Product:
        product = self._products.get_by_id(int(product_id))
        if not product:
            raise NotFoundError("Product not found")
        return product

    def create_product(self, data: dict) -> Product:
        if data.get("name") in (None, ""):
            raise ValidationError("Product name is required")
        if data.get("price") in (None, ""):
            raise ValidationError("Product price is required")

        product_id = self._products.create_product(
            name=require_length(data["name"], "Product name", 2, 100),
            description=_optional_text(data.get("description")),
            price=require_positive_decimal(data["price"], "Product price"),
            inventory=require_non_negative_int(data.get("inventory", 0), "Inventory"),
            category=_optional_text(data.get("category")),
            images=_images(data.get("images")),
        )
        self._log.info("Product created", product_id=product_id)
        return self.get_product(product_id)

    def update_product(self, product_id: int, data: dict) -> Product:
        self.get_product(product_id)

        fields: dict = {}
        if "name" in data:
            fields["name"] = require_length(data["name"], "Product name", 2, 100)
        if "description" in data:
            fields["description"] = _optional_text(data["description"])
        if "price" in data:
            fields["price"] = require_positive_decimal(data["price"], "Product price")
        if "category" in data:
            fields["category"] = _optional_text(data["category"])
        images = _images(data["images"]) if "images" in data else None
        inventory = require_non_negative_int(data["inventory"], "Inventory") if "inventory" in data else None

        if fields or images is not None:
            if not self._products.update_product(int(product_id), fields=fields, images=images):
                raise NotFoundError("Product not found")
        if inventory is not None:
            self.set_inventory(product_id, inventory)

        self._log.info("Product updated", product_id=int(product_id), fields=sorted(fields))
        return self.get_product(product_id)

    def set_inventory(self, product_id: int, inventory: Any) -> Product:
        level = require_non_negative_int(inventory, "Inventory")
        previous = self._ledger.level(int(product_id))
        if previous is None or not self._ledger.set_level(int(product_id), level):
            raise NotFoundError("Product not found")
        self._log.info("Inventory set", product_id=int(product_id), previous=previous, inventory=level)
        return self.get_product(product_id)

    def delete_product(self, product_id: int) -> None:
        if not self._products.delete_product(int(product_id)):
            raise NotFoundError("Product not found")
        self._log.info("Product deleted", product_id=int(product_id))
