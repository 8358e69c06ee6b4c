"""Static product catalogue.

The catalogue is loaded once at process start and never changes while the
process runs. Prices are kept as ``Decimal`` so cart totals can be summed
exactly before the single conversion to minor units.
"""

import json
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from decimal import Decimal
from pathlib import Path

import structlog

from checkout.config import get_settings

logger = structlog.get_logger(__name__)

DEFAULT_CURRENCY = "eur"


@dataclass(frozen=True)
class Product:
    """A catalogue entry. Immutable at runtime."""

    id: int
    name: str
    unit_price: Decimal
    currency: str = DEFAULT_CURRENCY

    def __post_init__(self):
        if self.unit_price < 0:
            raise ValueError(f"Product {self.id} has a negative price: {self.unit_price}")
        if len(self.currency) != 3:
            raise ValueError(f"Product {self.id} has an invalid currency code: {self.currency!r}")


class Catalogue:
    """Products keyed by id, all priced in a single currency."""

    def __init__(self, products: Iterable[Product], currency: str = DEFAULT_CURRENCY):
        self.currency = currency
        self._products: dict[int, Product] = {}
        for product in products:
            if product.currency != currency:
                raise ValueError(
                    f"Product {product.id} is priced in {product.currency!r}, catalogue currency is {currency!r}"
                )
            self._products[product.id] = product

    def get(self, product_id: int) -> Product | None:
        return self._products.get(product_id)

    def __len__(self) -> int:
        return len(self._products)

    @classmethod
    def from_records(cls, records: Iterable[Mapping], currency: str = DEFAULT_CURRENCY) -> "Catalogue":
        """Build a catalogue from plain dicts (``id``, ``name``, ``price``, ``currency``).

        Prices go through ``str`` before ``Decimal`` so a JSON float such as
        16.99 becomes exactly ``Decimal("16.99")``.
        """
        products = [
            Product(
                id=int(record["id"]),
                name=record["name"],
                unit_price=Decimal(str(record["price"])),
                currency=record.get("currency", currency).lower(),
            )
            for record in records
        ]
        return cls(products, currency=currency)

    @classmethod
    def from_file(cls, path: Path) -> "Catalogue":
        with open(path, encoding="utf-8") as f:
            records = json.load(f)
        catalogue = cls.from_records(records)
        logger.info("Catalogue loaded", path=str(path), products=len(catalogue))
        return catalogue


# Matches the products listed on the storefront.
DEFAULT_PRODUCTS = (
    Product(
        id=1,
        name="Anua Heartleaf Pore Deep Cleansing Foam",
        unit_price=Decimal("16.99"),
        currency=DEFAULT_CURRENCY,
    ),
)


def default_catalogue() -> Catalogue:
    return Catalogue(DEFAULT_PRODUCTS)


_current_catalogue: Catalogue | None = None


def get_catalogue() -> Catalogue:
    """Return the process-wide catalogue, loading it on first use."""
    global _current_catalogue
    if _current_catalogue is None:
        catalogue_file = get_settings().catalogue_file
        _current_catalogue = Catalogue.from_file(catalogue_file) if catalogue_file else default_catalogue()
    return _current_catalogue


def set_catalogue(catalogue: Catalogue) -> None:
    global _current_catalogue
    _current_catalogue = catalogue


def reset_catalogue() -> None:
    global _current_catalogue
    _current_catalogue = None
