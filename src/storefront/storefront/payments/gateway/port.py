"""Payment gateway port.

The contract every payment processor adapter implements, so that
FakeGateway (dev/test) and StripeGateway (production) are interchangeable.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class PaymentIntent:
    intent_id: str
    amount_cents: int
    currency: str
    status: str
    client_secret: Optional[str] = None
    payment_method_types: tuple[str, ...] = ()
    created: Optional[int] = None
    metadata: dict = field(default_factory=dict)

    @property
    def succeeded(self) -> bool:
        return self.status == "succeeded"


@dataclass(frozen=True)
class WebhookEvent:
    event_type: str
    intent: Optional[PaymentIntent]


class PaymentGateway(ABC):
    @abstractmethod
    def create_payment_intent(self, *, amount_cents: int, currency: str, metadata: dict) -> PaymentIntent:
        ...

    @abstractmethod
    def retrieve_payment_intent(self, intent_id: str) -> Optional[PaymentIntent]:
        """Return None when the processor does not know the id."""
        ...

    @abstractmethod
    def construct_webhook_event(self, payload: bytes, signature: str) -> WebhookEvent:
        """Verify the signature and parse the payload; ValueError if either is bad."""
        ...
