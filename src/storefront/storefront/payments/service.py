from __future__ import annotations

from typing import Any, Optional

from ..carts.service import CartService
from ..common.logging_setup import get_logger
from ..common.money import from_cents, to_cents
from ..core.enums import OrderStatus
from ..core.exceptions import (
    AuthorizationError,
    EmptyCartError,
    NotFoundError,
    PaymentError,
    ValidationError,
)
from ..orders.model import Order
from ..orders.service import OrderService
from ..users.model import User
from .gateway.port import PaymentGateway, PaymentIntent

SUCCEEDED_EVENT = "payment_intent.succeeded"
FAILED_EVENT = "payment_intent.payment_failed"


class PaymentService:
    """Use case: take payment for the cart and react to processor events.

    The order is only created once the processor reports the intent as
    succeeded; webhooks then move existing orders along their lifecycle.
    """

    def __init__(
        self,
        gateway: PaymentGateway,
        carts: CartService,
        orders: OrderService,
        *,
        currency: str = "usd",
        logger: Optional[Any] = None,
    ):
        self._gateway = gateway
        self._carts = carts
        self._orders = orders
        self._currency = currency
        self._log = logger or get_logger(__name__)

    def create_intent(self, user: User) -> dict:
        total = self._carts.total(user.user_id)
        if total <= 0:
            raise EmptyCartError("Cannot create payment for empty cart")

        intent = self._gateway.create_payment_intent(
            amount_cents=to_cents(total),
            currency=self._currency,
            metadata={"userId": str(user.user_id)},
        )
        self._log.info(
            "Payment intent created",
            user_id=user.user_id,
            payment_intent_id=intent.intent_id,
            amount_cents=intent.amount_cents,
        )
        return {
            "clientSecret": intent.client_secret,
            "paymentIntentId": intent.intent_id,
            "amount": float(from_cents(intent.amount_cents)),
        }

    def confirm_payment(self, user: User, payment_intent_id: Any) -> Order:
        if not payment_intent_id or not str(payment_intent_id).strip():
            raise ValidationError("Payment intent ID is required")
        payment_intent_id = str(payment_intent_id).strip()

        intent = self._gateway.retrieve_payment_intent(payment_intent_id)
        if not intent:
            raise NotFoundError("Payment intent not found")

        owner = intent.metadata.get("userId")
        if owner and owner != str(user.user_id):
            raise AuthorizationError("Not authorized to confirm this payment")

        if not intent.succeeded:
            self._log.warning("Payment not completed", payment_intent_id=payment_intent_id, status=intent.status)
            raise PaymentError("Payment has not been completed")

        # A retried confirmation must not place a second order
        existing = self._orders.find_by_payment_intent(payment_intent_id)
        if existing:
            return existing

        # Re-checked under the cart lock, together with the amount charged
        return self._orders.create_from_cart(
            user.user_id,
            payment_intent_id=payment_intent_id,
            paid_cents=intent.amount_cents,
        )

    def handle_webhook(self, payload: bytes, signature: Optional[str]) -> dict:
        try:
            event = self._gateway.construct_webhook_event(payload, signature or "")
        except ValueError as e:
            self._log.warning("Webhook rejected", error=str(e))
            raise ValidationError(f"Webhook Error: {e}")

        intent = event.intent
        self._log.info(
            "Payment webhook received",
            event_type=event.event_type,
            payment_intent_id=intent.intent_id if intent else None,
        )

        if intent and event.event_type == SUCCEEDED_EVENT:
            order = self._orders.find_by_payment_intent(intent.intent_id)
            if order:
                self._orders.advance_from_payment(order, OrderStatus.PROCESSING)
        elif intent and event.event_type == FAILED_EVENT:
            order = self._order_for_failed(intent)
            if order:
                self._orders.advance_from_payment(order, OrderStatus.CANCELLED)

        return {"received": True}

    def receipt(self, user: User, order_id: int) -> dict:
        order = self._orders.get_for(user, order_id)
        receipt = {"order": order.to_dict(), "payment": None}

        if order.payment_intent_id:
            intent = self._gateway.retrieve_payment_intent(order.payment_intent_id)
            if intent:
                receipt["payment"] = {
                    "id": intent.intent_id,
                    "amount": float(from_cents(intent.amount_cents)),
                    "currency": intent.currency,
                    "status": intent.status,
                    "paymentMethod": intent.payment_method_types[0] if intent.payment_method_types else None,
                    "created": intent.created,
                }
        return receipt

    def _order_for_failed(self, intent: PaymentIntent) -> Optional[Order]:
        order_id = intent.metadata.get("orderId")
        if order_id and order_id.isdigit():
            order = self._orders.find_by_id(int(order_id))
            if order:
                return order
        return self._orders.find_by_payment_intent(intent.intent_id)
