from __future__ import annotations

from flask import Flask, g, request

from ..auth.decorators import build_decorators
from ..container import Container
from ..http.payload import json_body
from ..http.responses import ok


def register(app: Flask, container: Container) -> None:
    login_required, _ = build_decorators(container.auth_guard)

    @app.route("/api/v1/payments/create-payment-intent", methods=["POST"], endpoint="create_payment_intent")
    @login_required
    def create_payment_intent():
        return ok(container.payment_service.create_intent(g.current_user))

    @app.route("/api/v1/payments/confirm-payment", methods=["POST"], endpoint="confirm_payment")
    @login_required
    def confirm_payment():
        body = json_body()
        order = container.payment_service.confirm_payment(g.current_user, body.get("paymentIntentId"))
        return ok(order.to_dict(), status=201)

    # Raw body: the processor signs the exact bytes it sent.
    @app.route("/api/v1/payments/webhook", methods=["POST"], endpoint="payment_webhook")
    def payment_webhook():
        result = container.payment_service.handle_webhook(
            request.get_data(),
            request.headers.get("Stripe-Signature"),
        )
        return result, 200

    @app.route("/api/v1/payments/receipt/<int:order_id>", methods=["GET"], endpoint="payment_receipt")
    @login_required
    def payment_receipt(order_id: int):
        return ok(container.payment_service.receipt(g.current_user, order_id))
