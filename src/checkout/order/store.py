"""Order store: the durable, keyed collection of orders.

Orders live in memory keyed by charge identifier. The whole collection is
read from a JSON file when the store starts and rewritten after every
mutation. Writes go to a temporary file that is then renamed over the old
one, so a crash mid-write leaves the previous contents intact.

Records are written in insertion order; display order (newest first) is
computed when reading.
"""

import json
import os
import random
import tempfile
from collections import Counter
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path

import structlog
from protean.exceptions import ValidationError

from checkout.catalogue.catalogue import DEFAULT_CURRENCY
from checkout.config import get_settings
from checkout.order.numbering import generate_order_number
from checkout.order.order import DEFAULT_COUNTRY, Customer, Order, OrderItem, ShippingAddress

logger = structlog.get_logger(__name__)

RECENT_ORDERS_LIMIT = 10


class DuplicateChargeError(ValidationError):
    """An order already exists for this charge identifier."""

    def __init__(self, charge_id: str):
        self.charge_id = charge_id
        self.message = f"An order already exists for charge {charge_id}"
        super().__init__({"charge_id": [self.message]})


class OrderPersistenceError(Exception):
    """The order file could not be written."""


@dataclass(frozen=True)
class OrderStats:
    total_orders: int
    total_revenue: float  # major units
    currency: str
    orders_by_status: dict[str, int] = field(default_factory=dict)
    recent_orders: list[Order] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Record (de)serialization
# ---------------------------------------------------------------------------
def order_to_record(order: Order) -> dict:
    customer = order.customer
    address = order.shipping_address
    return {
        "charge_id": order.charge_id,
        "order_number": order.order_number,
        "status": order.status,
        "payment_status": order.payment_status,
        "amount": order.amount,
        "currency": order.currency,
        "customer": {
            "email": customer.email,
            "name": customer.name or "",
            "phone": customer.phone or "",
            "address": {
                "line1": (address and address.line1) or "",
                "line2": (address and address.line2) or "",
                "city": (address and address.city) or "",
                "postal_code": (address and address.postal_code) or "",
                "state": (address and address.state) or "",
                "country": (address and address.country) or DEFAULT_COUNTRY,
            },
        },
        "items": [item.snapshot() for item in order.items],
        "created_at": order.created_at.isoformat(),
        "updated_at": order.updated_at.isoformat(),
        "tracking_number": order.tracking_number,
        "notes": order.notes or "",
    }


def order_from_record(record: dict) -> Order:
    customer = record.get("customer") or {}
    address = customer.get("address") or {}
    return Order(
        charge_id=record["charge_id"],
        order_number=record["order_number"],
        status=record["status"],
        payment_status=record.get("payment_status"),
        amount=record["amount"],
        currency=record["currency"],
        customer=Customer(
            email=customer.get("email"),
            name=customer.get("name"),
            phone=customer.get("phone"),
        ),
        shipping_address=ShippingAddress(
            line1=address.get("line1"),
            line2=address.get("line2"),
            city=address.get("city"),
            postal_code=address.get("postal_code"),
            state=address.get("state"),
            country=address.get("country") or DEFAULT_COUNTRY,
        ),
        items=[OrderItem(**item) for item in record.get("items", [])],
        tracking_number=record.get("tracking_number"),
        notes=record.get("notes") or "",
        created_at=datetime.fromisoformat(record["created_at"]),
        updated_at=datetime.fromisoformat(record["updated_at"]),
    )


# ---------------------------------------------------------------------------
# Store
# ---------------------------------------------------------------------------
class OrderStore:
    """Keyed order collection backed by a single JSON file."""

    def __init__(
        self,
        path: Path,
        clock: Callable[[], datetime] | None = None,
        rng: random.Random | None = None,
        currency: str = DEFAULT_CURRENCY,
    ):
        self.path = Path(path)
        self.currency = currency
        self._clock = clock or (lambda: datetime.now(UTC))
        self._rng = rng or random.Random()
        self._orders: dict[str, Order] = {}
        self.load()

    # -------------------------------------------------------------------
    # Persistence
    # -------------------------------------------------------------------
    def load(self) -> None:
        """Replace the in-memory collection with the file's contents.

        A missing or unreadable file leaves the store empty.
        """
        self._orders = {}
        if not self.path.exists():
            logger.info("No previous orders found", path=str(self.path))
            return

        try:
            with open(self.path, encoding="utf-8") as f:
                records = json.load(f)
            orders = [order_from_record(record) for record in records]
        except (OSError, ValueError, KeyError, TypeError, ValidationError) as exc:
            logger.warning("Could not read orders, starting empty", path=str(self.path), error=str(exc))
            return

        for order in orders:
            self._orders[order.charge_id] = order
        logger.info("Orders loaded", path=str(self.path), count=len(self._orders))

    def save(self) -> None:
        """Rewrite the order file with the full collection, in insertion order."""
        records = [order_to_record(order) for order in self._orders.values()]
        directory = self.path.parent
        try:
            directory.mkdir(parents=True, exist_ok=True)
            fd, temp_path = tempfile.mkstemp(dir=directory, prefix=f".{self.path.name}.", suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(records, f, indent=2)
                    f.write("\n")
                os.replace(temp_path, self.path)
            except BaseException:
                try:
                    os.unlink(temp_path)
                except OSError:
                    pass
                raise
        except OSError as exc:
            logger.error("Error saving orders", path=str(self.path), error=str(exc))
            raise OrderPersistenceError(f"Could not write orders to {self.path}") from exc

    def _commit(self, order: Order) -> None:
        """Write the collection, then log the order's raised events.

        Events are dropped even when the write fails, so a later commit
        never reports them a second time.
        """
        events = list(order._events)
        order._events.clear()
        self.save()
        for event in events:
            logger.info(
                "Order event raised",
                event_type=event.__class__.__name__,
                charge_id=order.charge_id,
                order_number=order.order_number,
            )

    # -------------------------------------------------------------------
    # Commands
    # -------------------------------------------------------------------
    def create_order(self, charge, customer_info: dict, items: Iterable) -> Order:
        """Record a new pending order for ``charge``.

        ``charge`` is the processor's payment intent (``id``, ``status``,
        ``amount`` in minor units, ``currency``). Raises
        ``DuplicateChargeError`` if an order already exists for it.
        """
        if charge.id in self._orders:
            raise DuplicateChargeError(charge.id)

        now = self._clock()
        taken = {order.order_number for order in self._orders.values()}
        order = Order.create(
            charge_id=charge.id,
            order_number=generate_order_number(now, taken, self._rng),
            payment_status=charge.status,
            amount=charge.amount,
            currency=charge.currency,
            customer_info=customer_info,
            items=items,
            placed_at=now,
        )

        self._orders[order.charge_id] = order
        self._commit(order)

        logger.info("New order created", order_number=order.order_number, charge_id=order.charge_id)
        return order

    def update_order_status(self, charge_id: str, status: str, tracking_number: str | None = None) -> Order | None:
        """Overwrite an order's status. Returns ``None`` if there is no such order."""
        order = self._orders.get(charge_id)
        if order is None:
            logger.info("Order not found for status update", charge_id=charge_id, status=status)
            return None

        changed_at = max(self._clock(), order.created_at)
        order.update_status(status, tracking_number=tracking_number, changed_at=changed_at)
        self._commit(order)

        logger.info("Order status updated", order_number=order.order_number, status=status)
        return order

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    def get_order(self, charge_id: str) -> Order | None:
        return self._orders.get(charge_id)

    def get_order_by_number(self, order_number: str) -> Order | None:
        return next(
            (order for order in self._orders.values() if order.order_number == order_number),
            None,
        )

    def get_all_orders(self) -> list[Order]:
        """All orders, newest first."""
        return sorted(self._orders.values(), key=lambda order: order.created_at, reverse=True)

    def get_stats(self) -> OrderStats:
        orders = self.get_all_orders()
        total_minor_units = sum(order.amount for order in orders)
        return OrderStats(
            total_orders=len(orders),
            total_revenue=total_minor_units / 100,
            currency=self.currency.upper(),
            orders_by_status=dict(Counter(order.status for order in orders)),
            recent_orders=orders[:RECENT_ORDERS_LIMIT],
        )

    def __len__(self) -> int:
        return len(self._orders)


# ---------------------------------------------------------------------------
# Process-wide store
# ---------------------------------------------------------------------------
_current_store: OrderStore | None = None


def get_store() -> OrderStore:
    """Return the process-wide order store, loading it on first use."""
    global _current_store
    if _current_store is None:
        _current_store = OrderStore(get_settings().orders_file)
    return _current_store


def set_store(store: OrderStore) -> None:
    """Override the active order store (useful for tests)."""
    global _current_store
    _current_store = store


def reset_store() -> None:
    global _current_store
    _current_store = None
