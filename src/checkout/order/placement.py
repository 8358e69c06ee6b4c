"""Checkout flow, from a priced cart to a recorded, payable order.

Flow:
    1. Price the cart against the catalogue and check the customer details
       (a bad line or field rejects the request before the processor is
       contacted)
    2. Create a payment intent for the priced total
    3. Record a pending order keyed by the intent's charge identifier
    4. When the processor reports ``payment_intent.succeeded``, mark the
       order as paid
"""

import json
from collections.abc import Iterable
from dataclasses import dataclass

import structlog

from checkout.cart.pricing import CartLine, PricedLine, price_cart
from checkout.catalogue.catalogue import Catalogue
from checkout.order.order import Order, OrderStatus, customer_snapshot
from checkout.order.store import OrderStore
from checkout.payments.gateway.port import PaymentGateway

logger = structlog.get_logger(__name__)

PAYMENT_SUCCEEDED_EVENT = "payment_intent.succeeded"


@dataclass(frozen=True)
class PlacedOrder:
    """What the storefront needs to confirm the payment client-side."""

    client_secret: str | None
    payment_intent_id: str
    order_number: str
    amount: int
    currency: str
    lines: tuple[PricedLine, ...]


class CheckoutService:
    def __init__(self, catalogue: Catalogue, gateway: PaymentGateway, store: OrderStore):
        self.catalogue = catalogue
        self.gateway = gateway
        self.store = store

    def place_order(self, cart_lines: Iterable[CartLine], customer_info: dict) -> PlacedOrder:
        pricing = price_cart(self.catalogue, cart_lines)
        customer_snapshot(customer_info)

        intent = self.gateway.create_payment_intent(
            amount=pricing.total_minor_units,
            currency=pricing.currency,
            metadata={
                "customerEmail": customer_info.get("email") or "",
                "customerName": customer_info.get("name") or "",
                "customerPhone": customer_info.get("phone") or "",
                "shippingAddress": json.dumps(customer_info.get("address") or {}),
                "orderItems": json.dumps([line.to_dict() for line in pricing.lines]),
            },
        )
        logger.info(
            "Payment intent created",
            charge_id=intent.id,
            amount=pricing.total_minor_units,
            currency=pricing.currency,
        )

        order = self.store.create_order(intent, customer_info, pricing.lines)

        return PlacedOrder(
            client_secret=intent.client_secret,
            payment_intent_id=intent.id,
            order_number=order.order_number,
            amount=pricing.total_minor_units,
            currency=pricing.currency,
            lines=pricing.lines,
        )

    def record_payment_succeeded(self, charge_id: str) -> Order | None:
        order = self.store.update_order_status(charge_id, OrderStatus.PAID.value)
        if order is None:
            logger.warning("Payment succeeded for unknown order", charge_id=charge_id)
        else:
            logger.info("Order marked as paid", order_number=order.order_number, charge_id=charge_id)
        return order

    def handle_webhook(self, payload: bytes, signature: str) -> Order | None:
        """Verify and dispatch a processor webhook.

        Only successful payments change state; other event types are
        acknowledged and ignored.
        """
        event = self.gateway.construct_webhook_event(payload, signature)

        if event.type != PAYMENT_SUCCEEDED_EVENT:
            logger.debug("Ignoring webhook event", event_type=event.type)
            return None

        logger.info("Payment succeeded", charge_id=event.charge_id)
        if not event.charge_id:
            logger.warning("Payment succeeded event without a charge identifier")
            return None
        return self.record_payment_succeeded(event.charge_id)
