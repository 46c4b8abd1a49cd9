from __future__ import annotations

from flask import Flask, g, request

from ..auth.decorators import build_decorators
from ..common.validators import parse_pagination
from ..container import Container
from ..core.enums import Role
from ..http.payload import json_body
from ..http.responses import ok


def register(app: Flask, container: Container) -> None:
    login_required, roles_required = build_decorators(container.auth_guard)

    @app.route("/api/v1/orders", methods=["POST"], endpoint="create_order")
    @login_required
    def create_order():
        body = json_body()
        order = container.order_service.create_from_cart(
            g.current_user.user_id,
            payment_intent_id=body.get("paymentIntentId"),
        )
        return ok(order.to_dict(), status=201)

    @app.route("/api/v1/orders", methods=["GET"], endpoint="list_my_orders")
    @login_required
    def list_my_orders():
        orders = container.order_service.list_for_user(g.current_user.user_id)
        return ok([o.to_dict() for o in orders], count=len(orders))

    @app.route("/api/v1/orders/admin/all", methods=["GET"], endpoint="list_all_orders")
    @roles_required(Role.ADMIN)
    def list_all_orders():
        args = request.args
        page, limit, offset = parse_pagination(args.get("page"), args.get("limit"))
        orders = container.order_service.list_all(
            limit=limit,
            offset=offset,
            status=args.get("status"),
            from_date=args.get("fromDate"),
            to_date=args.get("toDate"),
        )
        return ok(
            [o.to_dict(with_items=False) for o in orders],
            count=len(orders),
            pagination={"page": page, "limit": limit},
        )

    @app.route("/api/v1/orders/<int:order_id>", methods=["GET"], endpoint="get_order")
    @login_required
    def get_order(order_id: int):
        return ok(container.order_service.get_for(g.current_user, order_id).to_dict())

    @app.route("/api/v1/orders/<int:order_id>/status", methods=["PUT"], endpoint="update_order_status")
    @roles_required(Role.ADMIN)
    def update_order_status(order_id: int):
        body = json_body()
        order = container.order_service.update_status(
            order_id,
            body.get("status"),
            force=body.get("force") is True,
            actor_id=g.current_user.user_id,
        )
        return ok(order.to_dict())
