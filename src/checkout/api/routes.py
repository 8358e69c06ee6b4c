"""FastAPI routes for the Checkout API: payment intents, webhooks and orders."""

from fastapi import APIRouter, Header, Request
from fastapi.responses import JSONResponse

from checkout.api.schemas import (
    AdminOrdersResponse,
    CreatePaymentIntentRequest,
    ErrorResponse,
    OrderSchema,
    PaymentIntentResponse,
    PricedLineSchema,
    PublicOrderResponse,
    StatsSchema,
    UpdateOrderStatusRequest,
    WebhookAckResponse,
)
from checkout.catalogue.catalogue import get_catalogue
from checkout.order.placement import CheckoutService
from checkout.order.store import get_store
from checkout.payments.gateway import get_gateway

router = APIRouter(prefix="/api", tags=["checkout"])

_ORDER_NOT_FOUND = {"error": "Order not found"}

_NOT_FOUND = {404: {"model": ErrorResponse}}
_BAD_REQUEST = {400: {"model": ErrorResponse}}


def _checkout_service() -> CheckoutService:
    return CheckoutService(
        catalogue=get_catalogue(),
        gateway=get_gateway(),
        store=get_store(),
    )


# ---------------------------------------------------------------------------
# Storefront
# ---------------------------------------------------------------------------
@router.post(
    "/create-payment-intent",
    response_model=PaymentIntentResponse,
    responses={**_BAD_REQUEST, 502: {"model": ErrorResponse}},
)
async def create_payment_intent(body: CreatePaymentIntentRequest) -> PaymentIntentResponse:
    """Price the cart server-side, open a payment intent and record the order."""
    placed = _checkout_service().place_order(
        cart_lines=[item.to_cart_line() for item in body.cart_items],
        customer_info=body.customer_info.model_dump(),
    )
    return PaymentIntentResponse(
        client_secret=placed.client_secret,
        payment_intent_id=placed.payment_intent_id,
        order_id=placed.order_number,
        amount=placed.amount,
        currency=placed.currency,
        items=[PricedLineSchema.from_line(line) for line in placed.lines],
    )


@router.post("/webhook", response_model=WebhookAckResponse, responses=_BAD_REQUEST)
async def payment_webhook(
    request: Request,
    stripe_signature: str = Header(default=""),
) -> WebhookAckResponse:
    """Process a payment processor webhook callback."""
    payload = await request.body()
    _checkout_service().handle_webhook(payload, stripe_signature)
    return WebhookAckResponse()


@router.get("/orders/{order_number}", response_model=PublicOrderResponse, responses=_NOT_FOUND)
async def get_public_order(order_number: str):
    order = get_store().get_order_by_number(order_number)
    if order is None:
        return JSONResponse(status_code=404, content=_ORDER_NOT_FOUND)
    return PublicOrderResponse.from_order(order)


# ---------------------------------------------------------------------------
# Admin
# ---------------------------------------------------------------------------
@router.get("/admin/orders", response_model=AdminOrdersResponse)
async def list_orders() -> AdminOrdersResponse:
    store = get_store()
    return AdminOrdersResponse(
        stats=StatsSchema.from_stats(store.get_stats()),
        orders=[OrderSchema.from_order(order) for order in store.get_all_orders()],
    )


@router.post(
    "/admin/orders/{charge_id}/status",
    response_model=OrderSchema,
    responses={**_NOT_FOUND, **_BAD_REQUEST},
)
async def update_order_status(charge_id: str, body: UpdateOrderStatusRequest):
    order = get_store().update_order_status(charge_id, body.status, body.tracking_number)
    if order is None:
        return JSONResponse(status_code=404, content=_ORDER_NOT_FOUND)
    return OrderSchema.from_order(order)
