"""Stripe payment gateway adapter.

Payment intents are created with automatic payment methods enabled and the
checkout metadata attached. Webhooks are authenticated against the endpoint's
signing secret before anything in them is trusted.
"""

import json

import stripe
import structlog

from checkout.payments.gateway.port import (
    PaymentGateway,
    PaymentGatewayError,
    PaymentIntent,
    WebhookEvent,
    WebhookSignatureError,
)

logger = structlog.get_logger(__name__)


class StripeGateway(PaymentGateway):
    """Production gateway backed by the Stripe API."""

    def __init__(self, api_key: str | None, webhook_secret: str | None) -> None:
        if not api_key:
            raise PaymentGatewayError("STRIPE_SECRET_KEY must be set to use the Stripe gateway")
        self.api_key = api_key
        self.webhook_secret = webhook_secret

    def create_payment_intent(
        self,
        amount: int,
        currency: str,
        metadata: dict[str, str],
    ) -> PaymentIntent:
        try:
            intent = stripe.PaymentIntent.create(
                api_key=self.api_key,
                amount=amount,
                currency=currency,
                automatic_payment_methods={"enabled": True},
                metadata=metadata,
            )
        except stripe.StripeError as exc:
            logger.error("Stripe rejected payment intent", amount=amount, currency=currency, error=str(exc))
            raise PaymentGatewayError(exc.user_message or "Payment processor error") from exc

        return PaymentIntent(
            id=intent.id,
            client_secret=intent.client_secret,
            status=intent.status,
            amount=intent.amount,
            currency=intent.currency,
        )

    def construct_webhook_event(self, payload: bytes, signature: str) -> WebhookEvent:
        if not self.webhook_secret:
            raise PaymentGatewayError("STRIPE_WEBHOOK_SECRET must be set to verify webhooks")

        try:
            stripe.Webhook.construct_event(payload, signature, self.webhook_secret)
        except stripe.SignatureVerificationError as exc:
            raise WebhookSignatureError(str(exc)) from exc
        except ValueError as exc:
            raise WebhookSignatureError(f"Invalid payload: {exc}") from exc

        return WebhookEvent.from_payload(json.loads(payload))
