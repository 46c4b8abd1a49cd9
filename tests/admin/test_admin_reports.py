from __future__ import annotations

from decimal import Decimal

import pytest

from src.storefront.storefront.core.exceptions import ValidationError


@pytest.fixture
def two_orders(store, container):
    ann = store.add_user()
    bob = store.add_user(name="Bob", email="bob@x.com")
    pen = store.add_product(name="Pen", price="2.00", inventory=50)
    lamp = store.add_product(name="Lamp", price="20.00", inventory=5)
    container.cart_service.add_item(ann.user_id, pen.product_id, 5)
    first = container.order_service.create_from_cart(ann.user_id)
    container.cart_service.add_item(bob.user_id, lamp.product_id, 1)
    second = container.order_service.create_from_cart(bob.user_id)
    return first, second


def test_dashboard_excludes_cancelled_orders_from_sales(container, two_orders):
    first, second = two_orders
    container.order_service.update_status(second.order_id, "cancelled")

    stats = container.admin_report_service.dashboard()

    assert stats.total_users == 2
    assert stats.total_products == 2
    assert stats.total_orders == 2
    assert stats.total_sales == Decimal("10.00")
    assert stats.low_inventory == 1
    assert [o.order_id for o in stats.recent_orders] == [second.order_id, first.order_id]


def test_sales_report_groups_by_month_with_top_products(container, two_orders):
    report = container.admin_report_service.sales_report(period="monthly")

    assert report["salesByPeriod"] == [{"period": "2026-03", "orderCount": 2, "totalSales": 30.0}]
    assert [p["name"] for p in report["topProducts"]] == ["Pen", "Lamp"]
    assert report["topProducts"][0]["totalQuantity"] == 5


def test_sales_report_validates_period_and_dates(container):
    with pytest.raises(ValidationError):
        container.admin_report_service.sales_report(period="hourly")
    with pytest.raises(ValidationError):
        container.admin_report_service.sales_report(start_date="2026-05-01", end_date="2026-04-01")
