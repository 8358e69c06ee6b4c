"""Payment gateway port (abstract interface).

Defines the contract every payment processor adapter implements, so the
checkout flow can run against FakeGateway (dev/test) or StripeGateway
(production) without changing any domain or application code.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field


class PaymentGatewayError(Exception):
    """The payment processor rejected or failed a request."""


class WebhookSignatureError(PaymentGatewayError):
    """A webhook payload could not be authenticated or parsed."""


@dataclass(frozen=True)
class PaymentIntent:
    """A charge created by the processor, awaiting confirmation by the customer."""

    id: str
    client_secret: str | None
    status: str
    amount: int  # minor units
    currency: str


@dataclass(frozen=True)
class WebhookEvent:
    """A verified notification from the processor."""

    type: str
    charge_id: str | None = None
    data: dict = field(default_factory=dict)

    @classmethod
    def from_payload(cls, payload: dict) -> "WebhookEvent":
        obj = (payload.get("data") or {}).get("object") or {}
        return cls(type=payload.get("type", ""), charge_id=obj.get("id"), data=obj)


class PaymentGateway(ABC):
    """Abstract payment gateway interface."""

    @abstractmethod
    def create_payment_intent(
        self,
        amount: int,
        currency: str,
        metadata: dict[str, str],
    ) -> PaymentIntent:
        """Create a payment intent for ``amount`` minor units."""
        ...

    @abstractmethod
    def construct_webhook_event(
        self,
        payload: bytes,
        signature: str,
    ) -> WebhookEvent:
        """Verify a webhook payload's signature and parse it.

        Raises ``WebhookSignatureError`` if the payload is not authentic.
        """
        ...
