"""Configurable in-memory payment gateway for development and testing.

Intents are kept in a dict; `complete()` plays the customer paying, and
webhooks are accepted when signed with `WEBHOOK_SIGNATURE`.
"""

from __future__ import annotations

import json
import time
from typing import Optional
from uuid import uuid4

from .port import PaymentGateway, PaymentIntent, WebhookEvent

WEBHOOK_SIGNATURE = "test-signature"


class FakeGateway(PaymentGateway):
    def __init__(self) -> None:
        self.intents: dict[str, PaymentIntent] = {}
        self.calls: list[dict] = []

    def create_payment_intent(self, *, amount_cents: int, currency: str, metadata: dict) -> PaymentIntent:
        self.calls.append({"method": "create_payment_intent", "amount_cents": amount_cents, "currency": currency})
        intent_id = f"pi_fake_{uuid4().hex[:16]}"
        intent = PaymentIntent(
            intent_id=intent_id,
            amount_cents=int(amount_cents),
            currency=currency,
            status="requires_payment_method",
            client_secret=f"{intent_id}_secret_{uuid4().hex[:8]}",
            payment_method_types=("card",),
            created=int(time.time()),
            metadata={k: str(v) for k, v in metadata.items()},
        )
        self.intents[intent_id] = intent
        return intent

    def retrieve_payment_intent(self, intent_id: str) -> Optional[PaymentIntent]:
        self.calls.append({"method": "retrieve_payment_intent", "intent_id": intent_id})
        return self.intents.get(intent_id)

    def complete(self, intent_id: str, status: str = "succeeded") -> PaymentIntent:
        current = self.intents[intent_id]
        updated = PaymentIntent(
            intent_id=current.intent_id,
            amount_cents=current.amount_cents,
            currency=current.currency,
            status=status,
            client_secret=current.client_secret,
            payment_method_types=current.payment_method_types,
            created=current.created,
            metadata=dict(current.metadata),
        )
        self.intents[intent_id] = updated
        return updated

    def construct_webhook_event(self, payload: bytes, signature: str) -> WebhookEvent:
        if signature != WEBHOOK_SIGNATURE:
            raise ValueError("No signatures found matching the expected signature for payload")
        try:
            body = json.loads(payload)
        except (TypeError, ValueError):
            raise ValueError("Invalid payload")

        obj = (body.get("data") or {}).get("object") or {}
        intent = None
        if obj.get("object") == "payment_intent":
            intent = PaymentIntent(
                intent_id=str(obj.get("id")),
                amount_cents=int(obj.get("amount") or 0),
                currency=str(obj.get("currency") or ""),
                status=str(obj.get("status") or ""),
                metadata={str(k): str(v) for k, v in (obj.get("metadata") or {}).items()},
            )
        return WebhookEvent(event_type=str(body.get("type")), intent=intent)
