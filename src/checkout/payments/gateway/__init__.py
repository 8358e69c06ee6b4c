"""Payment gateway factory.

Provides get_gateway() / set_gateway() to swap implementations:
- FakeGateway for development and testing
- StripeGateway for production

The default is chosen by the PAYMENT_GATEWAY setting. Production never
runs on the fake gateway.
"""

from checkout.config import get_settings
from checkout.payments.gateway.fake_adapter import FakeGateway
from checkout.payments.gateway.port import PaymentGateway, PaymentGatewayError
from checkout.payments.gateway.stripe_adapter import StripeGateway

_current_gateway: PaymentGateway | None = None


def _default_gateway() -> PaymentGateway:
    settings = get_settings()
    if settings.payment_gateway == "stripe":
        return StripeGateway(
            api_key=settings.stripe_secret_key,
            webhook_secret=settings.stripe_webhook_secret,
        )
    if settings.environment == "production":
        raise PaymentGatewayError(
            f"PAYMENT_GATEWAY={settings.payment_gateway!r} is not allowed in production; use 'stripe'"
        )
    return FakeGateway()


def get_gateway() -> PaymentGateway:
    """Return the current payment gateway."""
    global _current_gateway
    if _current_gateway is None:
        _current_gateway = _default_gateway()
    return _current_gateway


def set_gateway(gateway: PaymentGateway) -> None:
    """Override the active payment gateway (useful for tests)."""
    global _current_gateway
    _current_gateway = gateway


def reset_gateway() -> None:
    """Reset to default gateway."""
    global _current_gateway
    _current_gateway = None
