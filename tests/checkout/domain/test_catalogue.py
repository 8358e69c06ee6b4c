"""Tests for the static product catalogue."""

import json
from decimal import Decimal

import pytest
from checkout.catalogue.catalogue import (
    Catalogue,
    Product,
    default_catalogue,
    get_catalogue,
    set_catalogue,
)


class TestProduct:
    def test_negative_price_rejected(self):
        with pytest.raises(ValueError):
            Product(id=1, name="Broken", unit_price=Decimal("-1.00"))

    def test_currency_must_be_three_letters(self):
        with pytest.raises(ValueError):
            Product(id=1, name="Broken", unit_price=Decimal("1.00"), currency="euro")

    def test_is_immutable(self):
        product = Product(id=1, name="Foam", unit_price=Decimal("16.99"))
        with pytest.raises(AttributeError):
            product.unit_price = Decimal("0.01")


class TestCatalogue:
    def test_default_catalogue_has_storefront_product(self):
        catalogue = default_catalogue()
        product = catalogue.get(1)
        assert product.name == "Anua Heartleaf Pore Deep Cleansing Foam"
        assert product.unit_price == Decimal("16.99")
        assert catalogue.currency == "eur"

    def test_lookup_of_missing_product(self):
        assert default_catalogue().get(2) is None

    def test_mixed_currencies_rejected(self):
        with pytest.raises(ValueError):
            Catalogue([Product(id=1, name="A", unit_price=Decimal("1"), currency="usd")])

    def test_from_records_keeps_prices_exact(self):
        catalogue = Catalogue.from_records([{"id": "5", "name": "Toner", "price": 12.3}])
        assert catalogue.get(5).unit_price == Decimal("12.3")

    def test_from_file(self, tmp_path):
        path = tmp_path / "catalogue.json"
        path.write_text(
            json.dumps(
                [
                    {"id": 1, "name": "Foam", "price": 16.99, "currency": "EUR"},
                    {"id": 2, "name": "Toner", "price": "12.50"},
                ]
            )
        )
        catalogue = Catalogue.from_file(path)
        assert len(catalogue) == 2
        assert catalogue.get(2).unit_price == Decimal("12.50")
        assert catalogue.get(1).currency == "eur"


class TestCatalogueRegistry:
    def test_defaults_to_storefront_catalogue(self):
        assert get_catalogue().get(1) is not None

    def test_override(self, catalogue):
        set_catalogue(catalogue)
        assert get_catalogue() is catalogue
