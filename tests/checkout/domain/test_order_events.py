"""Tests for Order events: construction and field completeness."""

from datetime import UTC, datetime

from checkout.order.events import OrderPlaced, OrderStatusChanged


class TestOrderPlacedEvent:
    def test_version(self):
        assert OrderPlaced.__version__ == "v1"

    def test_construction(self):
        now = datetime.now(UTC)
        event = OrderPlaced(
            charge_id="pi_123",
            order_number="ES260314042",
            amount=3398,
            currency="eur",
            customer_email="ana@example.com",
            placed_at=now,
        )
        assert event.charge_id == "pi_123"
        assert event.amount == 3398
        assert event.placed_at == now


class TestOrderStatusChangedEvent:
    def test_version(self):
        assert OrderStatusChanged.__version__ == "v1"

    def test_construction(self):
        now = datetime.now(UTC)
        event = OrderStatusChanged(
            charge_id="pi_123",
            order_number="ES260314042",
            previous_status="paid",
            new_status="shipped",
            tracking_number="CTT123PT",
            changed_at=now,
        )
        assert event.previous_status == "paid"
        assert event.new_status == "shipped"
        assert event.tracking_number == "CTT123PT"

    def test_tracking_number_optional(self):
        event = OrderStatusChanged(
            charge_id="pi_123",
            order_number="ES260314042",
            previous_status="pending",
            new_status="paid",
            changed_at=datetime.now(UTC),
        )
        assert event.tracking_number is None
