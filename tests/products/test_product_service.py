from __future__ import annotations

from decimal import Decimal

import pytest

from src.storefront.storefront.core.exceptions import NotFoundError, ValidationError


@pytest.fixture
def products(container):
    return container.product_service


def test_create_product_validates_and_stores_images(products):
    product = products.create_product(
        {"name": "Desk Lamp", "price": "24.50", "inventory": 4, "category": "Home", "images": ["a.jpg", "b.jpg"]}
    )

    assert product.price == Decimal("24.50")
    assert product.inventory == 4
    assert product.images == ("a.jpg", "b.jpg")


@pytest.mark.parametrize(
    "data",
    [
        {"price": 10},
        {"name": "Lamp"},
        {"name": "L", "price": 10},
        {"name": "Lamp", "price": 0},
        {"name": "Lamp", "price": 10, "inventory": -1},
        {"name": "Lamp", "price": 10, "images": "a.jpg"},
    ],
)
def test_create_product_rejects_invalid_data(products, data):
    with pytest.raises(ValidationError):
        products.create_product(data)


def test_update_replaces_images_and_routes_inventory_through_ledger(store, products):
    lamp = products.create_product({"name": "Lamp", "price": 10, "images": ["old.jpg"]})

    updated = products.update_product(lamp.product_id, {"price": "12.00", "images": ["new.jpg"], "inventory": 7})

    assert updated.price == Decimal("12.00")
    assert updated.images == ("new.jpg",)
    assert store.products[lamp.product_id].inventory == 7


def test_set_inventory_on_missing_product(products):
    with pytest.raises(NotFoundError):
        products.set_inventory(404, 3)


def test_list_products_filters_by_price_and_category(store, products):
    store.add_product(name="Pen", price="1.00", category="Stationery")
    store.add_product(name="Notebook", price="9.99", category="Stationery")
    store.add_product(name="Lamp", price="24.00", category="Home")

    found = products.list_products(limit=10, offset=0, category="Stationery", min_price="0", max_price="5")

    assert [p.name for p in found] == ["Pen"]


def test_list_products_rejects_bad_price_filter(products):
    with pytest.raises(ValidationError):
        products.list_products(limit=10, offset=0, min_price="cheap")


def test_delete_missing_product(products):
    with pytest.raises(NotFoundError):
        products.delete_product(12345)


def test_set_inventory_reads_and_replaces_stock_level(store, container, products):
    lamp = store.add_product(name="Lamp", inventory=2)

    assert container.ledger.level(lamp.product_id) == 2
    assert products.set_inventory(lamp.product_id, 15).inventory == 15
    assert container.ledger.level(lamp.product_id) == 15
    assert container.ledger.level(999) is None
