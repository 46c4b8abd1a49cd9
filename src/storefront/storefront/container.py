from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Optional

from .admin.mysql_report_repository import MySQLReportRepository
from .admin.repository import ReportRepository
from .admin.service import AdminReportService
from .auth.guard import AuthGuard
from .auth.tokens import TokenService
from .carts.mysql_cart_repository import MySQLCartRepository
from .carts.repository import CartRepository
from .carts.service import CartService
from .core.constants import DEFAULT_ACCESS_MINUTES, DEFAULT_LOW_INVENTORY_THRESHOLD, DEFAULT_REFRESH_DAYS
from .database.connection import DBConfig, DatabaseConnection
from .inventory.ledger import InventoryLedger
from .inventory.mysql_inventory_ledger import MySQLInventoryLedger
from .orders.mysql_order_repository import MySQLOrderRepository
from .orders.repository import OrderRepository
from .orders.service import OrderService
from .payments.gateway import build_gateway
from .payments.gateway.port import PaymentGateway
from .payments.service import PaymentService
from .products.mysql_product_repository import MySQLProductRepository
from .products.repository import ProductRepository
from .products.service import ProductService
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import AccountService, UserAdminService


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    users_repo: UserRepository
    products_repo: ProductRepository
    carts_repo: CartRepository
    orders_repo: OrderRepository
    reports_repo: ReportRepository
    ledger: InventoryLedger
    gateway: PaymentGateway

    tokens: TokenService
    auth_guard: AuthGuard
    account_service: AccountService
    user_admin_service: UserAdminService
    product_service: ProductService
    cart_service: CartService
    order_service: OrderService
    payment_service: PaymentService
    admin_report_service: AdminReportService


def wire(
    *,
    users_repo: UserRepository,
    products_repo: ProductRepository,
    carts_repo: CartRepository,
    orders_repo: OrderRepository,
    reports_repo: ReportRepository,
    ledger: InventoryLedger,
    gateway: PaymentGateway,
    tokens: TokenService,
    currency: str = "usd",
    low_inventory_threshold: int = DEFAULT_LOW_INVENTORY_THRESHOLD,
    conn: Optional[DatabaseConnection] = None,
    logger: Optional[Any] = None,
) -> Container:
    """Build the services on top of already-constructed repositories."""
    cart_service = CartService(carts_repo, products_repo, logger=logger)
    order_service = OrderService(orders_repo, logger=logger)

    return Container(
        conn=conn,
        users_repo=users_repo,
        products_repo=products_repo,
        carts_repo=carts_repo,
        orders_repo=orders_repo,
        reports_repo=reports_repo,
        ledger=ledger,
        gateway=gateway,
        tokens=tokens,
        auth_guard=AuthGuard(users_repo, tokens, logger=logger),
        account_service=AccountService(users_repo, logger=logger),
        user_admin_service=UserAdminService(users_repo, logger=logger),
        product_service=ProductService(products_repo, ledger, logger=logger),
        cart_service=cart_service,
        order_service=order_service,
        payment_service=PaymentService(gateway, cart_service, order_service, currency=currency, logger=logger),
        admin_report_service=AdminReportService(
            reports_repo,
            orders_repo,
            low_inventory_threshold=low_inventory_threshold,
        ),
    )


def build_tokens(settings) -> TokenService:
    return TokenService(
        access_secret=getattr(settings, "JWT_SECRET", ""),
        refresh_secret=getattr(settings, "JWT_REFRESH_SECRET", ""),
        access_ttl=timedelta(minutes=int(getattr(settings, "JWT_EXPIRES_MINUTES", DEFAULT_ACCESS_MINUTES))),
        refresh_ttl=timedelta(days=int(getattr(settings, "JWT_REFRESH_EXPIRES_DAYS", DEFAULT_REFRESH_DAYS))),
    )


def build_container(*, db_config: dict, settings) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    carts_repo = MySQLCartRepository(conn)
    ledger = MySQLInventoryLedger(conn)

    return wire(
        conn=conn,
        users_repo=MySQLUserRepository(conn),
        products_repo=MySQLProductRepository(conn),
        carts_repo=carts_repo,
        orders_repo=MySQLOrderRepository(conn, carts_repo, ledger),
        reports_repo=MySQLReportRepository(conn),
        ledger=ledger,
        gateway=build_gateway(settings),
        tokens=build_tokens(settings),
        currency=str(getattr(settings, "CURRENCY", "usd")),
        low_inventory_threshold=int(getattr(settings, "LOW_INVENTORY_THRESHOLD", DEFAULT_LOW_INVENTORY_THRESHOLD)),
    )
