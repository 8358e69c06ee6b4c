"""Checkout bounded context: cart pricing and the order lifecycle.

Prices carts against the static catalogue, records orders once the payment
processor has issued a charge, and tracks their status afterwards.
"""

import structlog
from protean.domain import Domain

checkout = Domain(name="checkout")

logger = structlog.get_logger(__name__)
