"""Runtime configuration for the checkout service.

Values come from the environment; a ``.env`` file in the working directory
is loaded first so local setups don't need to export anything.
"""

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv


@dataclass(frozen=True)
class Settings:
    environment: str = "development"
    orders_file: Path = Path("orders.json")
    catalogue_file: Path | None = None
    payment_gateway: str = "fake"
    stripe_secret_key: str | None = None
    stripe_webhook_secret: str | None = None
    log_level: str | None = None
    log_dir: Path = Path("logs")
    port: int = 3001


def _default_gateway_name(environment: str) -> str:
    return "stripe" if environment == "production" else "fake"


def load_settings() -> Settings:
    """Build settings from the current environment."""
    load_dotenv()

    environment = (os.getenv("ENVIRONMENT") or "development").lower()
    catalogue_file = os.getenv("CATALOGUE_FILE")
    return Settings(
        environment=environment,
        orders_file=Path(os.getenv("ORDERS_FILE", "orders.json")),
        catalogue_file=Path(catalogue_file) if catalogue_file else None,
        payment_gateway=(os.getenv("PAYMENT_GATEWAY") or _default_gateway_name(environment)).lower(),
        stripe_secret_key=os.getenv("STRIPE_SECRET_KEY"),
        stripe_webhook_secret=os.getenv("STRIPE_WEBHOOK_SECRET"),
        log_level=os.getenv("LOG_LEVEL") or None,
        log_dir=Path(os.getenv("LOG_DIR", "logs")),
        port=int(os.getenv("PORT", "3001")),
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return load_settings()
