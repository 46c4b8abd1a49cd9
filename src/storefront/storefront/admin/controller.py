from __future__ import annotations

from flask import Flask, request

from ..auth.decorators import build_decorators
from ..container import Container
from ..core.enums import Role
from ..http.responses import ok


def register(app: Flask, container: Container) -> None:
    _, roles_required = build_decorators(container.auth_guard)

    @app.route("/api/v1/admin/dashboard", methods=["GET"], endpoint="admin_dashboard")
    @roles_required(Role.ADMIN)
    def admin_dashboard():
        return ok(container.admin_report_service.dashboard().to_dict())

    @app.route("/api/v1/admin/sales-report", methods=["GET"], endpoint="admin_sales_report")
    @roles_required(Role.ADMIN)
    def admin_sales_report():
        args = request.args
        report = container.admin_report_service.sales_report(
            period=args.get("period"),
            start_date=args.get("startDate"),
            end_date=args.get("endDate"),
        )
        return ok(report)
