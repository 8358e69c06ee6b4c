"""Tests for the order store's commands and queries."""

import json
import re
from decimal import Decimal

import pytest
from checkout.cart.pricing import PricedLine
from checkout.order.store import DuplicateChargeError
from checkout.payments.gateway.port import PaymentIntent
from protean.exceptions import ValidationError


def _charge(charge_id="pi_001", amount=3398):
    return PaymentIntent(
        id=charge_id,
        client_secret=f"{charge_id}_secret",
        status="requires_payment_method",
        amount=amount,
        currency="eur",
    )


def _items(quantity=2):
    return [
        PricedLine(
            product_id=1,
            name="Anua Heartleaf Pore Deep Cleansing Foam",
            unit_price=Decimal("16.99"),
            quantity=quantity,
            line_total=Decimal("16.99") * quantity,
        )
    ]


class TestCreateOrder:
    def test_created_order_is_retrievable(self, store, customer_info):
        order = store.create_order(_charge(), customer_info, _items())

        assert store.get_order("pi_001") is order
        assert store.get_order_by_number(order.order_number) is order
        assert order.status == "pending"
        assert order.payment_status == "requires_payment_method"
        assert order.amount == 3398
        assert len(store) == 1

    def test_order_number_uses_creation_day(self, store, customer_info):
        order = store.create_order(_charge(), customer_info, _items())
        assert re.fullmatch(r"ES260314\d{3}", order.order_number)

    def test_created_at_equals_updated_at(self, store, customer_info):
        order = store.create_order(_charge(), customer_info, _items())
        assert order.created_at == order.updated_at

    def test_duplicate_charge_rejected(self, store, customer_info):
        store.create_order(_charge(), customer_info, _items())
        with pytest.raises(DuplicateChargeError) as exc:
            store.create_order(_charge(), customer_info, _items(quantity=5))
        assert exc.value.charge_id == "pi_001"
        assert isinstance(exc.value, ValidationError)
        assert len(store) == 1
        assert store.get_order("pi_001").items[0].quantity == 2

    def test_order_numbers_are_unique(self, store, customer_info):
        numbers = {
            store.create_order(_charge(f"pi_{i:03d}"), customer_info, _items()).order_number for i in range(50)
        }
        assert len(numbers) == 50

    def test_events_are_cleared_after_commit(self, store, customer_info):
        order = store.create_order(_charge(), customer_info, _items())
        assert order._events == []


class TestUpdateOrderStatus:
    def test_update_existing(self, store, customer_info):
        created = store.create_order(_charge(), customer_info, _items())
        updated = store.update_order_status("pi_001", "paid")

        assert updated is created
        assert updated.status == "paid"
        assert updated.updated_at > updated.created_at

    def test_unknown_charge_returns_none(self, store, customer_info):
        store.create_order(_charge(), customer_info, _items())
        assert store.update_order_status("pi_missing", "paid") is None
        assert len(store) == 1
        assert store.get_order("pi_missing") is None

    def test_tracking_number_set_and_kept(self, store, customer_info):
        store.create_order(_charge(), customer_info, _items())

        store.update_order_status("pi_001", "shipped", "CTT123PT")
        order = store.update_order_status("pi_001", "delivered")

        assert order.status == "delivered"
        assert order.tracking_number == "CTT123PT"

    def test_empty_status_rejected(self, store, customer_info):
        store.create_order(_charge(), customer_info, _items())
        with pytest.raises(ValidationError):
            store.update_order_status("pi_001", "")
        assert store.get_order("pi_001").status == "pending"

    def test_rejected_update_is_not_applied_or_saved(self, store, orders_path, customer_info):
        store.create_order(_charge(), customer_info, _items())

        with pytest.raises(ValidationError):
            store.update_order_status("pi_001", "shipped", "T" * 300)

        order = store.get_order("pi_001")
        assert order.status == "pending"
        assert order.updated_at == order.created_at

        store.create_order(_charge("pi_002"), customer_info, _items())
        records = json.loads(orders_path.read_text())
        assert records[0]["status"] == "pending"
        assert not records[0]["tracking_number"]


class TestQueries:
    def test_lookup_misses_return_none(self, store):
        assert store.get_order("pi_nope") is None
        assert store.get_order_by_number("ES000000000") is None

    def test_all_orders_newest_first(self, store, customer_info):
        for i in range(4):
            store.create_order(_charge(f"pi_{i}"), customer_info, _items())

        orders = store.get_all_orders()
        assert [o.charge_id for o in orders] == ["pi_3", "pi_2", "pi_1", "pi_0"]
        assert all(a.created_at >= b.created_at for a, b in zip(orders, orders[1:]))

    def test_empty_store(self, store):
        assert store.get_all_orders() == []
        assert len(store) == 0
