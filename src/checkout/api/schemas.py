"""Pydantic request/response schemas for the Checkout API.

These are external contracts (anti-corruption layer), separate from the
internal domain objects. The storefront speaks camelCase, so every schema
uses camelCase aliases while still accepting snake_case field names.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from checkout.cart.pricing import CartLine, PricedLine
from checkout.order.order import Order
from checkout.order.store import OrderStats


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---------------------------------------------------------------------------
# Shared sub-models
# ---------------------------------------------------------------------------
class AddressSchema(CamelModel):
    line1: str | None = Field(default=None, max_length=255)
    line2: str | None = Field(default=None, max_length=255)
    city: str | None = Field(default=None, max_length=100)
    postal_code: str | None = Field(default=None, max_length=20)
    state: str | None = Field(default=None, max_length=100)
    country: str | None = Field(default=None, max_length=100)


class CustomerSchema(CamelModel):
    email: str = Field(min_length=1, max_length=254)
    name: str | None = Field(default=None, max_length=255)
    phone: str | None = Field(default=None, max_length=50)
    address: AddressSchema | None = None


class PricedLineSchema(CamelModel):
    product_id: int
    name: str
    unit_price: float
    quantity: int
    line_total: float

    @classmethod
    def from_line(cls, line: PricedLine) -> "PricedLineSchema":
        return cls(**line.to_dict())


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------
class CartItemSchema(CamelModel):
    id: int
    quantity: int

    def to_cart_line(self) -> CartLine:
        return CartLine(product_id=self.id, quantity=self.quantity)


class CreatePaymentIntentRequest(CamelModel):
    cart_items: list[CartItemSchema] = Field(min_length=1)
    customer_info: CustomerSchema

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "cartItems": [{"id": 1, "quantity": 2}],
                    "customerInfo": {
                        "email": "ana@example.com",
                        "name": "Ana Silva",
                        "phone": "+351 912 345 678",
                        "address": {
                            "line1": "Rua Augusta 100",
                            "city": "Lisboa",
                            "postal_code": "1100-053",
                            "country": "PT",
                        },
                    },
                }
            ]
        }
    }


class UpdateOrderStatusRequest(CamelModel):
    status: str = Field(min_length=1, max_length=50)
    tracking_number: str | None = Field(default=None, max_length=255)


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------
class PaymentIntentResponse(CamelModel):
    client_secret: str | None
    payment_intent_id: str
    order_id: str
    amount: int
    currency: str
    items: list[PricedLineSchema]


class WebhookAckResponse(CamelModel):
    received: bool = True


class OrderSchema(CamelModel):
    """Full admin view of an order."""

    id: str
    order_id: str
    status: str
    payment_status: str | None
    amount: int
    currency: str
    customer: CustomerSchema
    items: list[PricedLineSchema]
    created_at: datetime
    updated_at: datetime
    tracking_number: str | None
    notes: str

    @classmethod
    def from_order(cls, order: Order) -> "OrderSchema":
        address = order.shipping_address
        return cls(
            id=order.charge_id,
            order_id=order.order_number,
            status=order.status,
            payment_status=order.payment_status,
            amount=order.amount,
            currency=order.currency,
            customer=CustomerSchema(
                email=order.customer.email,
                name=order.customer.name or "",
                phone=order.customer.phone or "",
                address=AddressSchema(
                    line1=address.line1 or "",
                    line2=address.line2 or "",
                    city=address.city or "",
                    postal_code=address.postal_code or "",
                    state=address.state or "",
                    country=address.country,
                )
                if address
                else None,
            ),
            items=[PricedLineSchema(**item.snapshot()) for item in order.items],
            created_at=order.created_at,
            updated_at=order.updated_at,
            tracking_number=order.tracking_number,
            notes=order.notes or "",
        )


class PublicOrderResponse(CamelModel):
    """Customer-facing order lookup. No customer details, no charge identifier."""

    order_id: str
    status: str
    items: list[PricedLineSchema]
    amount: int
    currency: str
    created_at: datetime
    tracking_number: str | None

    @classmethod
    def from_order(cls, order: Order) -> "PublicOrderResponse":
        view = order.public_view()
        return cls(
            order_id=view["order_number"],
            status=view["status"],
            items=[PricedLineSchema(**item) for item in view["items"]],
            amount=view["amount"],
            currency=view["currency"],
            created_at=view["created_at"],
            tracking_number=view["tracking_number"],
        )


class StatsSchema(CamelModel):
    total_orders: int
    total_revenue: float
    currency: str
    orders_by_status: dict[str, int]
    recent_orders: list[OrderSchema]

    @classmethod
    def from_stats(cls, stats: OrderStats) -> "StatsSchema":
        return cls(
            total_orders=stats.total_orders,
            total_revenue=stats.total_revenue,
            currency=stats.currency,
            orders_by_status=stats.orders_by_status,
            recent_orders=[OrderSchema.from_order(order) for order in stats.recent_orders],
        )


class AdminOrdersResponse(CamelModel):
    stats: StatsSchema
    orders: list[OrderSchema]


class ErrorResponse(CamelModel):
    error: str


class HealthResponse(CamelModel):
    status: str = "ok"
    timestamp: datetime
    environment: str
