"""Storefront checkout FastAPI application.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 3001
"""

from checkout.api.app import create_app
from checkout.config import get_settings
from checkout.domain import checkout, logger
from checkout.payments.gateway import get_gateway
from checkout.utils.logging import configure_logging

configure_logging()

checkout.init()

app = create_app()

# Fails at startup when the gateway is misconfigured
gateway = get_gateway()

settings = get_settings()
logger.info(
    "Checkout backend ready",
    environment=settings.environment,
    port=settings.port,
    payment_gateway=type(gateway).__name__,
    orders_file=str(settings.orders_file),
)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=settings.port)
