"""Order aggregate: the durable record of a checkout.

An order is created exactly once per payment intent and keyed by the
processor's charge identifier. After creation only its status (and an
optional tracking number) ever changes; the amount, customer snapshot and
line items stay exactly as they were at checkout, regardless of later
catalogue changes.

Status is an open string: the well-known values are listed in
``OrderStatus`` but admins may assign any other label.
"""

from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import (
    DateTime,
    Float,
    HasMany,
    Integer,
    String,
    Text,
    ValueObject,
)

from checkout.domain import checkout
from checkout.order.events import OrderPlaced, OrderStatusChanged

DEFAULT_COUNTRY = "PT"

STATUS_MAX_LENGTH = 50
TRACKING_NUMBER_MAX_LENGTH = 255


class OrderStatus(Enum):
    PENDING = "pending"
    PAID = "paid"
    SHIPPED = "shipped"
    CANCELLED = "cancelled"


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@checkout.value_object(part_of="Order")
class Customer:
    """Who placed the order, as captured at checkout."""

    email = String(required=True, max_length=254)
    name = String(max_length=255)
    phone = String(max_length=50)


@checkout.value_object(part_of="Order")
class ShippingAddress:
    """Where the order ships to. Every part is optional except the country."""

    line1 = String(max_length=255)
    line2 = String(max_length=255)
    city = String(max_length=100)
    postal_code = String(max_length=20)
    state = String(max_length=100)
    country = String(max_length=100, default=DEFAULT_COUNTRY)


def customer_snapshot(customer_info):
    """Build the customer and shipping address value objects from checkout input.

    Raises ``ValidationError`` when a field does not fit, so callers can
    reject the request before any payment is requested.
    """
    address = customer_info.get("address") or {}
    customer = Customer(
        email=customer_info.get("email"),
        name=customer_info.get("name"),
        phone=customer_info.get("phone"),
    )
    shipping_address = ShippingAddress(
        line1=address.get("line1"),
        line2=address.get("line2"),
        city=address.get("city"),
        postal_code=address.get("postal_code"),
        state=address.get("state"),
        country=address.get("country") or DEFAULT_COUNTRY,
    )
    return customer, shipping_address


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@checkout.entity(part_of="Order")
class OrderItem:
    """A priced cart line frozen onto the order."""

    product_id = Integer(required=True)
    name = String(required=True, max_length=255)
    unit_price = Float(required=True, min_value=0.0)
    quantity = Integer(required=True, min_value=1)
    line_total = Float(required=True, min_value=0.0)

    def snapshot(self):
        return {
            "product_id": self.product_id,
            "name": self.name,
            "unit_price": self.unit_price,
            "quantity": self.quantity,
            "line_total": self.line_total,
        }


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@checkout.aggregate
class Order:
    charge_id = String(identifier=True, required=True, max_length=255)
    order_number = String(required=True, max_length=20)
    status = String(max_length=STATUS_MAX_LENGTH, default=OrderStatus.PENDING.value)
    payment_status = String(max_length=50)
    amount = Integer(required=True, min_value=0)  # minor units
    currency = String(max_length=3, required=True)
    customer = ValueObject(Customer)
    shipping_address = ValueObject(ShippingAddress)
    items = HasMany(OrderItem)
    tracking_number = String(max_length=TRACKING_NUMBER_MAX_LENGTH)
    notes = Text()
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def updated_at_must_not_precede_created_at(self):
        if self.created_at and self.updated_at and self.updated_at < self.created_at:
            raise ValidationError({"updated_at": ["Order cannot be updated before it was created"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(
        cls,
        charge_id,
        order_number,
        payment_status,
        amount,
        currency,
        customer_info,
        items,
        placed_at=None,
    ):
        """Create a pending order for a newly issued charge.

        Args:
            charge_id: The payment processor's identifier for the charge.
            order_number: Human-facing order number.
            payment_status: Status reported by the processor at creation.
            amount: Charged amount in minor units.
            currency: Currency code reported by the processor.
            customer_info: Dict with email, name, phone and an optional
                address dict (line1, line2, city, postal_code, state, country).
            items: Priced cart lines (anything with product_id, name,
                unit_price, quantity and line_total).
            placed_at: Creation timestamp; defaults to now.
        """
        now = placed_at or datetime.now(UTC)
        customer, shipping_address = customer_snapshot(customer_info)

        order = cls(
            charge_id=charge_id,
            order_number=order_number,
            status=OrderStatus.PENDING.value,
            payment_status=payment_status,
            amount=amount,
            currency=currency,
            customer=customer,
            shipping_address=shipping_address,
            items=[
                OrderItem(
                    product_id=line.product_id,
                    name=line.name,
                    unit_price=float(line.unit_price),
                    quantity=line.quantity,
                    line_total=float(line.line_total),
                )
                for line in items
            ],
            notes="",
            created_at=now,
            updated_at=now,
        )

        order.raise_(
            OrderPlaced(
                charge_id=charge_id,
                order_number=order_number,
                amount=amount,
                currency=currency,
                customer_email=order.customer.email,
                placed_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # Status
    # -------------------------------------------------------------------
    def update_status(self, status, tracking_number=None, changed_at=None):
        """Overwrite the status; set the tracking number only when one is given.

        All arguments are checked before the order is touched, so a rejected
        update leaves it exactly as it was.
        """
        now = changed_at or datetime.now(UTC)
        self._check_status_change(status, tracking_number, now)

        previous_status = self.status

        self.status = status
        if tracking_number:
            self.tracking_number = tracking_number
        self.updated_at = now

        self.raise_(
            OrderStatusChanged(
                charge_id=self.charge_id,
                order_number=self.order_number,
                previous_status=previous_status,
                new_status=status,
                tracking_number=self.tracking_number,
                changed_at=now,
            )
        )

    def _check_status_change(self, status, tracking_number, changed_at):
        errors = {}
        if not status or not str(status).strip():
            errors["status"] = ["Status must not be empty"]
        elif len(status) > STATUS_MAX_LENGTH:
            errors["status"] = [f"Status must be at most {STATUS_MAX_LENGTH} characters"]
        if tracking_number and len(tracking_number) > TRACKING_NUMBER_MAX_LENGTH:
            errors["tracking_number"] = [f"Tracking number must be at most {TRACKING_NUMBER_MAX_LENGTH} characters"]
        if self.created_at and changed_at < self.created_at:
            errors["updated_at"] = ["Order cannot be updated before it was created"]
        if errors:
            raise ValidationError(errors)

    # -------------------------------------------------------------------
    # Views
    # -------------------------------------------------------------------
    def public_view(self):
        """What a customer may see when looking an order up by number.

        Customer details and the charge identifier are withheld.
        """
        return {
            "order_number": self.order_number,
            "status": self.status,
            "items": [item.snapshot() for item in self.items],
            "amount": self.amount,
            "currency": self.currency,
            "created_at": self.created_at,
            "tracking_number": self.tracking_number,
        }
