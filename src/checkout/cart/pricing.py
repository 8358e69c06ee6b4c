"""Cart pricing: the server-side source of truth for what a cart costs.

Totals sent by the storefront are never trusted. Every line is looked up in
the static catalogue and priced here, and the resulting minor-unit total is
the exact amount handed to the payment processor.

Rounding happens once, on the grand total: line totals are summed as exact
decimals and the sum is converted to minor units with ROUND_HALF_UP (for the
non-negative amounts a catalogue can produce this is the same as rounding
half away from zero).
"""

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from protean.exceptions import ValidationError

from checkout.catalogue.catalogue import Catalogue

MINOR_UNITS_PER_MAJOR = 100


class CartValidationError(ValidationError):
    """A cart line could not be priced. The whole cart is rejected."""

    def __init__(self, message: str, product_id=None):
        self.message = message
        self.product_id = product_id
        super().__init__({"cart_items": [message]})


class UnknownProduct(CartValidationError):
    def __init__(self, product_id):
        super().__init__(f"Product with ID {product_id} not found", product_id=product_id)


class InvalidQuantity(CartValidationError):
    def __init__(self, product_id, quantity):
        self.quantity = quantity
        super().__init__(f"Invalid quantity for product {product_id}", product_id=product_id)


@dataclass(frozen=True)
class CartLine:
    """A product and quantity as requested by the storefront."""

    product_id: int
    quantity: int


@dataclass(frozen=True)
class PricedLine:
    product_id: int
    name: str
    unit_price: Decimal
    quantity: int
    line_total: Decimal

    def to_dict(self) -> dict:
        return {
            "product_id": self.product_id,
            "name": self.name,
            "unit_price": float(self.unit_price),
            "quantity": self.quantity,
            "line_total": float(self.line_total),
        }


@dataclass(frozen=True)
class CartPricing:
    lines: tuple[PricedLine, ...]
    total_minor_units: int
    currency: str

    @property
    def subtotal(self) -> Decimal:
        return sum((line.line_total for line in self.lines), Decimal("0"))


def to_minor_units(amount: Decimal) -> int:
    """Convert a major-unit amount to an integer number of minor units."""
    return int((amount * MINOR_UNITS_PER_MAJOR).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def price_cart(catalogue: Catalogue, lines: Iterable[CartLine]) -> CartPricing:
    """Validate and price ``lines`` against ``catalogue``.

    Lines are priced in the order given. Raises ``UnknownProduct`` or
    ``InvalidQuantity`` on the first bad line; no partial result is returned.
    """
    priced = []
    subtotal = Decimal("0")

    for line in lines:
        product = catalogue.get(line.product_id)
        if product is None:
            raise UnknownProduct(line.product_id)
        if line.quantity <= 0:
            raise InvalidQuantity(line.product_id, line.quantity)

        line_total = product.unit_price * line.quantity
        subtotal += line_total
        priced.append(
            PricedLine(
                product_id=product.id,
                name=product.name,
                unit_price=product.unit_price,
                quantity=line.quantity,
                line_total=line_total,
            )
        )

    return CartPricing(
        lines=tuple(priced),
        total_minor_units=to_minor_units(subtotal),
        currency=catalogue.currency,
    )
