"""Payment gateway factory.

`build_gateway()` picks the adapter from settings: StripeGateway when
PAYMENT_GATEWAY is 'stripe', FakeGateway otherwise.
"""

from __future__ import annotations

from .fake_adapter import FakeGateway
from .port import PaymentGateway
from .stripe_adapter import StripeGateway


def build_gateway(settings) -> PaymentGateway:
    kind = str(getattr(settings, "PAYMENT_GATEWAY", "fake")).lower()
    if kind == "stripe":
        api_key = getattr(settings, "STRIPE_SECRET_KEY", "")
        if not api_key:
            raise RuntimeError("STRIPE_SECRET_KEY is required when PAYMENT_GATEWAY=stripe")
        return StripeGateway(api_key=api_key, webhook_secret=getattr(settings, "STRIPE_WEBHOOK_SECRET", ""))
    return FakeGateway()
