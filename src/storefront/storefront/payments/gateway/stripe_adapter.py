"""Stripe adapter for the payment gateway port."""

from __future__ import annotations

from typing import Any, Optional

import stripe

from ...core.exceptions import PaymentError
from .port import PaymentGateway, PaymentIntent, WebhookEvent


def _metadata(obj: Any) -> dict:
    meta = getattr(obj, "metadata", None)
    if not meta:
        return {}
    return {str(key): str(meta[key]) for key in meta.keys()}


def _to_intent(obj: Any) -> PaymentIntent:
    return PaymentIntent(
        intent_id=obj.id,
        amount_cents=int(getattr(obj, "amount", 0) or 0),
        currency=str(getattr(obj, "currency", "") or ""),
        status=str(getattr(obj, "status", "") or ""),
        client_secret=getattr(obj, "client_secret", None),
        payment_method_types=tuple(getattr(obj, "payment_method_types", None) or ()),
        created=getattr(obj, "created", None),
        metadata=_metadata(obj),
    )


class StripeGateway(PaymentGateway):
    def __init__(self, api_key: str, webhook_secret: str) -> None:
        self.api_key = api_key
        self.webhook_secret = webhook_secret

    def create_payment_intent(self, *, amount_cents: int, currency: str, metadata: dict) -> PaymentIntent:
        try:
            intent = stripe.PaymentIntent.create(
                amount=int(amount_cents),
                currency=currency,
                metadata={k: str(v) for k, v in metadata.items()},
                api_key=self.api_key,
            )
        except stripe.StripeError as e:
            raise PaymentError(f"Payment processor error: {e.user_message or e}")
        return _to_intent(intent)

    def retrieve_payment_intent(self, intent_id: str) -> Optional[PaymentIntent]:
        try:
            intent = stripe.PaymentIntent.retrieve(intent_id, api_key=self.api_key)
        except stripe.InvalidRequestError:
            return None
        except stripe.StripeError as e:
            raise PaymentError(f"Payment processor error: {e.user_message or e}")
        return _to_intent(intent)

    def construct_webhook_event(self, payload: bytes, signature: str) -> WebhookEvent:
        try:
            event = stripe.Webhook.construct_event(payload, signature, self.webhook_secret)
        except stripe.SignatureVerificationError as e:
            raise ValueError(str(e))

        obj = event.data.object
        intent = _to_intent(obj) if getattr(obj, "object", None) == "payment_intent" else None
        return WebhookEvent(event_type=event.type, intent=intent)
