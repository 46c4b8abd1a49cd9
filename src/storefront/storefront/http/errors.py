"""Map exceptions raised anywhere below a view onto JSON error envelopes."""

from __future__ import annotations

from flask import Flask
from werkzeug.exceptions import HTTPException

from ..common.logging_setup import get_logger
from ..core.exceptions import DomainError, InsufficientInventoryError
from .responses import error

log = get_logger(__name__)


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(e: DomainError):
        if isinstance(e, InsufficientInventoryError):
            return error(str(e), status=e.status_code, category=e.category, productId=e.product_id)
        return error(str(e) or "Server Error", status=e.status_code, category=e.category)

    @app.errorhandler(HTTPException)
    def handle_http_error(e: HTTPException):
        category = (e.name or "error").lower().replace(" ", "_")
        return error(e.description or e.name, status=e.code or 500, category=category)

    @app.errorhandler(Exception)
    def handle_unexpected(e: Exception):
        log.exception("Unhandled error")
        message = str(e) if app.config.get("DEBUG") else "Server Error"
        return error(message, status=500, category="internal_error")
