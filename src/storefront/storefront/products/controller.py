from __future__ import annotations

from flask import Flask, request

from ..auth.decorators import build_decorators
from ..common.validators import parse_pagination
from ..container import Container
from ..core.enums import Role
from ..http.payload import json_body
from ..http.responses import ok


def register(app: Flask, container: Container) -> None:
    _, roles_required = build_decorators(container.auth_guard)

    @app.route("/api/v1/products", methods=["GET"], endpoint="list_products")
    def list_products():
        args = request.args
        page, limit, offset = parse_pagination(args.get("page"), args.get("limit"))
        products = container.product_service.list_products(
            limit=limit,
            offset=offset,
            name=args.get("name"),
            category=args.get("category"),
            min_price=args.get("minPrice"),
            max_price=args.get("maxPrice"),
        )
        return ok(
            [p.to_dict() for p in products],
            count=len(products),
            pagination={"page": page, "limit": limit},
        )

    @app.route("/api/v1/products/<int:product_id>", methods=["GET"], endpoint="get_product")
    def get_product(product_id: int):
        return ok(container.product_service.get_product(product_id).to_dict())

    @app.route("/api/v1/products", methods=["POST"], endpoint="create_product")
    @roles_required(Role.ADMIN)
    def create_product():
        product = container.product_service.create_product(json_body())
        return ok(product.to_dict(), status=201)

    @app.route("/api/v1/products/<int:product_id>", methods=["PUT"], endpoint="update_product")
    @roles_required(Role.ADMIN)
    def update_product(product_id: int):
        product = container.product_service.update_product(product_id, json_body())
        return ok(product.to_dict())

    @app.route("/api/v1/products/<int:product_id>/inventory", methods=["PUT"], endpoint="set_product_inventory")
    @roles_required(Role.ADMIN)
    def set_product_inventory(product_id: int):
        body = json_body()
        product = container.product_service.set_inventory(product_id, body.get("inventory"))
        return ok(product.to_dict())

    @app.route("/api/v1/products/<int:product_id>", methods=["DELETE"], endpoint="delete_product")
    @roles_required(Role.ADMIN)
    def delete_product(product_id: int):
        container.product_service.delete_product(product_id)
        return ok({}, message="Product deleted")
