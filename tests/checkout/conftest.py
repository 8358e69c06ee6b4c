import random
from datetime import UTC, datetime, timedelta
from decimal import Decimal

import pytest
from checkout.catalogue.catalogue import DEFAULT_PRODUCTS, Catalogue, Product
from checkout.order.store import OrderStore
from checkout.payments.gateway.fake_adapter import FakeGateway
from protean.integrations.pytest import DomainFixture


@pytest.fixture(scope="session")
def checkout_bed():
    from checkout.domain import checkout

    bed = DomainFixture(checkout)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(checkout_bed):
    with checkout_bed.domain_context():
        yield


class SteppingClock:
    """Returns a strictly increasing time on every call."""

    def __init__(self, start, step=timedelta(minutes=1)):
        self.now = start
        self.step = step

    def __call__(self):
        value = self.now
        self.now += self.step
        return value


@pytest.fixture()
def clock():
    return SteppingClock(datetime(2026, 3, 14, 9, 30, tzinfo=UTC))


@pytest.fixture()
def orders_path(tmp_path):
    return tmp_path / "orders.json"


@pytest.fixture()
def store(orders_path, clock):
    return OrderStore(orders_path, clock=clock, rng=random.Random(7))


@pytest.fixture()
def catalogue():
    return Catalogue(
        DEFAULT_PRODUCTS
        + (
            Product(id=2, name="Centella Toner", unit_price=Decimal("12.50")),
            Product(id=3, name="Lip Balm Sample", unit_price=Decimal("0.10")),
        )
    )


@pytest.fixture()
def gateway():
    return FakeGateway()


@pytest.fixture()
def customer_info():
    return {
        "email": "ana@example.com",
        "name": "Ana Silva",
        "phone": "+351 912 345 678",
        "address": {
            "line1": "Rua Augusta 100",
            "line2": "3 Esq",
            "city": "Lisboa",
            "postal_code": "1100-053",
            "state": "Lisboa",
            "country": "PT",
        },
    }
