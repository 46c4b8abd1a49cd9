from __future__ import annotations

from flask import Flask, g

from ..auth.decorators import build_decorators
from ..container import Container
from ..http.payload import json_body
from ..http.responses import ok


def register(app: Flask, container: Container) -> None:
    login_required, _ = build_decorators(container.auth_guard)

    @app.route("/api/v1/cart", methods=["GET"], endpoint="get_cart")
    @login_required
    def get_cart():
        return ok(container.cart_service.view(g.current_user.user_id).to_dict())

    @app.route("/api/v1/cart/items", methods=["POST"], endpoint="add_cart_item")
    @login_required
    def add_cart_item():
        body = json_body()
        cart = container.cart_service.add_item(
            g.current_user.user_id,
            body.get("productId"),
            body.get("quantity", 1),
        )
        return ok(cart.to_dict())

    @app.route("/api/v1/cart/items/<int:item_id>", methods=["PUT"], endpoint="update_cart_item")
    @login_required
    def update_cart_item(item_id: int):
        body = json_body()
        cart = container.cart_service.update_quantity(g.current_user.user_id, item_id, body.get("quantity"))
        return ok(cart.to_dict())

    @app.route("/api/v1/cart/items/<int:item_id>", methods=["DELETE"], endpoint="remove_cart_item")
    @login_required
    def remove_cart_item(item_id: int):
        return ok(container.cart_service.remove_item(g.current_user.user_id, item_id).to_dict())

    @app.route("/api/v1/cart", methods=["DELETE"], endpoint="clear_cart")
    @login_required
    def clear_cart():
        return ok(container.cart_service.clear(g.current_user.user_id).to_dict())
