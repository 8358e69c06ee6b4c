"""Domain events for the Order aggregate."""

from protean.fields import DateTime, Integer, String

from checkout.domain import checkout


@checkout.event(part_of="Order")
class OrderPlaced:
    """An order was recorded for a freshly created payment intent."""

    __version__ = "v1"

    charge_id = String(required=True, max_length=255)
    order_number = String(required=True, max_length=20)
    amount = Integer(required=True)  # minor units
    currency = String(max_length=3, required=True)
    customer_email = String(required=True, max_length=254)
    placed_at = DateTime(required=True)


@checkout.event(part_of="Order")
class OrderStatusChanged:
    """An order's status was overwritten, by the payment webhook or an admin."""

    __version__ = "v1"

    charge_id = String(required=True, max_length=255)
    order_number = String(required=True, max_length=20)
    previous_status = String(max_length=50)
    new_status = String(required=True, max_length=50)
    tracking_number = String(max_length=255)
    changed_at = DateTime(required=True)
