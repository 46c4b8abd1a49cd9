from __future__ import annotations

import importlib
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .common.logging_setup import configure_logging, get_logger
from .container import Container, build_container
from .database.bootstrap import apply_schema, apply_seed_sql, ensure_demo_users, list_tables
from .http.audit import register_audit
from .http.errors import register_error_handlers
from .http.responses import ok

from .admin.controller import register as register_admin
from .carts.controller import register as register_carts
from .orders.controller import register as register_orders
from .payments.controller import register as register_payments
from .products.controller import register as register_products
from .users.controller import register as register_users

log = get_logger(__name__)

DATABASE_DIR = Path(__file__).resolve().parents[3] / "database"


def create_app(container: Optional[Container] = None, settings_module: Optional[str] = None) -> Flask:
    """App factory.

    Tests pass a container wired on in-memory repositories; otherwise the
    MySQL-backed one is built from the active settings module.
    """
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["COOKIE_SECURE"] = not app.config["DEBUG"] and not app.config["TESTING"]

    configure_logging(
        level=str(getattr(settings, "LOG_LEVEL", "INFO")).upper(),
        json=bool(getattr(settings, "LOG_JSON", False)),
    )

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        log.info(
            "Starting storefront",
            settings=settings_module,
            db=f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')}",
        )

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config, schema_path=DATABASE_DIR / "schema.sql")
            log.info("Schema ready", tables=len(list_tables(db_config)))
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            apply_seed_sql(db_config, seed_path=DATABASE_DIR / "seed.sql")
            ensure_demo_users(db_config)
            log.info("Demo seed ready")

        container = build_container(db_config=db_config, settings=settings)

    register_error_handlers(app)
    register_audit(app)

    @app.route("/health", methods=["GET"], endpoint="health")
    def health():
        return ok(message="Server is running")

    register_users(app, container)
    register_products(app, container)
    register_carts(app, container)
    register_orders(app, container)
    register_payments(app, container)
    register_admin(app, container)

    return app
