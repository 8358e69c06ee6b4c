"""Configurable fake payment gateway for development and testing.

Simulates the processor without any external calls. It can be configured
at runtime to succeed or fail, and records every call it receives.
Webhooks are accepted when signed with ``test-signature``.
"""

import json
from uuid import uuid4

from checkout.payments.gateway.port import (
    PaymentGateway,
    PaymentGatewayError,
    PaymentIntent,
    WebhookEvent,
    WebhookSignatureError,
)

TEST_SIGNATURE = "test-signature"


class FakeGateway(PaymentGateway):
    """Configurable fake payment gateway."""

    def __init__(self) -> None:
        self.should_succeed: bool = True
        self.failure_reason: str = "Card declined"
        self.calls: list[dict] = []

    def configure(self, should_succeed: bool, failure_reason: str = "Card declined") -> None:
        """Configure gateway behavior at runtime."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    def create_payment_intent(
        self,
        amount: int,
        currency: str,
        metadata: dict[str, str],
    ) -> PaymentIntent:
        call = {
            "method": "create_payment_intent",
            "amount": amount,
            "currency": currency,
            "metadata": metadata,
        }
        self.calls.append(call)

        if not self.should_succeed:
            raise PaymentGatewayError(self.failure_reason)

        intent_id = f"pi_fake_{uuid4().hex[:16]}"
        return PaymentIntent(
            id=intent_id,
            client_secret=f"{intent_id}_secret_{uuid4().hex[:12]}",
            status="requires_payment_method",
            amount=amount,
            currency=currency,
        )

    def construct_webhook_event(self, payload: bytes, signature: str) -> WebhookEvent:
        self.calls.append({"method": "construct_webhook_event", "signature": signature})

        if signature != TEST_SIGNATURE:
            raise WebhookSignatureError("No signatures found matching the expected signature for payload")
        try:
            data = json.loads(payload)
        except ValueError as exc:
            raise WebhookSignatureError(f"Invalid payload: {exc}") from exc
        return WebhookEvent.from_payload(data)
