"""FastAPI application factory for the checkout service.

Wraps every ``/api`` request in the checkout domain context and maps the
domain's error taxonomy onto HTTP responses:

    CartValidationError   → 400 (unknown product, invalid quantity)
    DuplicateChargeError  → 409
    ValidationError       → 400
    WebhookSignatureError → 400
    PaymentGatewayError   → 502
    OrderNumberExhausted  → 503
    OrderPersistenceError → 500
"""

from datetime import UTC, datetime

import structlog
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from protean.exceptions import ValidationError

from checkout.api.routes import router
from checkout.api.schemas import HealthResponse
from checkout.cart.pricing import CartValidationError
from checkout.config import get_settings
from checkout.domain import checkout
from checkout.order.numbering import OrderNumberExhausted
from checkout.order.store import DuplicateChargeError, OrderPersistenceError
from checkout.payments.gateway.port import PaymentGatewayError, WebhookSignatureError
from checkout.utils.logging import add_context, clear_context

logger = structlog.get_logger(__name__)


def _error(status_code: int, message: str, **extra) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=jsonable_encoder({"error": message, **extra}))


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return _error(400, "Invalid request", details=exc.errors())

    @app.exception_handler(CartValidationError)
    async def cart_validation_handler(request: Request, exc: CartValidationError):
        logger.info("Cart rejected", reason=exc.message, product_id=exc.product_id)
        return _error(400, exc.message)

    @app.exception_handler(DuplicateChargeError)
    async def duplicate_charge_handler(request: Request, exc: DuplicateChargeError):
        return _error(409, exc.message)

    @app.exception_handler(ValidationError)
    async def validation_handler(request: Request, exc: ValidationError):
        return _error(400, "Invalid request", details=exc.messages)

    @app.exception_handler(WebhookSignatureError)
    async def webhook_signature_handler(request: Request, exc: WebhookSignatureError):
        logger.warning("Webhook signature verification failed", error=str(exc))
        return _error(400, f"Webhook Error: {exc}")

    @app.exception_handler(PaymentGatewayError)
    async def payment_gateway_handler(request: Request, exc: PaymentGatewayError):
        logger.error("Payment gateway error", error=str(exc))
        return _error(502, str(exc) or "Payment processor error")

    @app.exception_handler(OrderNumberExhausted)
    async def order_number_exhausted_handler(request: Request, exc: OrderNumberExhausted):
        logger.error("Order numbers exhausted", day=exc.day)
        return _error(503, "Cannot accept more orders today")

    @app.exception_handler(OrderPersistenceError)
    async def persistence_handler(request: Request, exc: OrderPersistenceError):
        return _error(500, "Internal server error")


def create_app() -> FastAPI:
    app = FastAPI(
        title="Storefront Checkout API",
        description="Cart pricing, payment intents and order tracking",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def domain_context_middleware(request: Request, call_next):
        """Push the checkout domain context for API requests."""
        if not request.url.path.startswith("/api"):
            return await call_next(request)

        add_context(method=request.method, path=request.url.path)
        try:
            with checkout.domain_context():
                return await call_next(request)
        finally:
            clear_context()

    register_exception_handlers(app)
    app.include_router(router)

    @app.get("/api/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(
            status="ok",
            timestamp=datetime.now(UTC),
            environment=get_settings().environment,
        )

    return app
