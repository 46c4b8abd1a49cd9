from __future__ import annotations

import pytest

from src.storefront.storefront.auth.tokens import TokenService
from src.storefront.storefront.container import wire
from src.storefront.storefront.payments.gateway.fake_adapter import FakeGateway

from tests.fakes import (
    InMemoryCarts,
    InMemoryLedger,
    InMemoryOrders,
    InMemoryProducts,
    InMemoryReports,
    InMemoryUsers,
    Store,
)


@pytest.fixture
def store():
    return Store()


@pytest.fixture
def tokens():
    return TokenService(access_secret="test-access-secret", refresh_secret="test-refresh-secret")


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def container(store, tokens, gateway):
    ledger = InMemoryLedger(store)
    return wire(
        users_repo=InMemoryUsers(store),
        products_repo=InMemoryProducts(store),
        carts_repo=InMemoryCarts(store),
        orders_repo=InMemoryOrders(store, ledger),
        reports_repo=InMemoryReports(store),
        ledger=ledger,
        gateway=gateway,
        tokens=tokens,
    )


@pytest.fixture
def app(container):
    from src.storefront.storefront.main import create_app

    return create_app(container, settings_module="config.testing")


@pytest.fixture
def client(app):
    return app.test_client()
