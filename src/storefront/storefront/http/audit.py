"""Audit trail for API requests.

Every request except health checks and public product reads is logged on
the "storefront.audit" logger; mutating requests also log their (redacted)
body and the response status.
"""

from __future__ import annotations

from typing import Any
from uuid import uuid4

from flask import Flask, g, request

from ..common.logging_setup import add_context, clear_context, get_logger

REDACTED = "[REDACTED]"
SENSITIVE_FIELDS = frozenset({"password", "currentPassword", "newPassword", "creditCard"})
MUTATING_METHODS = frozenset({"POST", "PUT", "PATCH", "DELETE"})

audit_log = get_logger("storefront.audit")


def redact(body: Any) -> Any:
    if isinstance(body, dict):
        return {k: (REDACTED if k in SENSITIVE_FIELDS else redact(v)) for k, v in body.items()}
    if isinstance(body, list):
        return [redact(v) for v in body]
    return body


def _skipped() -> bool:
    return request.path == "/health" or (request.method == "GET" and request.path.startswith("/api/v1/products"))


def _actor() -> tuple[Any, str]:
    user = g.get("current_user")
    if user is None:
        return "unauthenticated", "none"
    return user.user_id, user.role.value


def register_audit(app: Flask) -> None:
    @app.before_request
    def audit_request():
        clear_context()
        add_context(request_id=uuid4().hex[:12])
        if _skipped():
            return None

        event: dict = {"method": request.method, "path": request.path, "ip": request.remote_addr}
        if request.method in MUTATING_METHODS and request.path != "/api/v1/payments/webhook":
            event["request_data"] = redact(request.get_json(silent=True) or {})
        audit_log.info("API request", **event)
        return None

    @app.after_request
    def audit_response(response):
        if request.method in MUTATING_METHODS and not _skipped():
            user_id, role = _actor()
            audit_log.info(
                "API response",
                method=request.method,
                path=request.path,
                status=response.status_code,
                user_id=user_id,
                role=role,
            )
        return response
