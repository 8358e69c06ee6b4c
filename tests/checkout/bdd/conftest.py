"""Shared BDD fixtures and step definitions for the checkout flow."""

from decimal import Decimal

import pytest
from checkout.cart.pricing import CartLine, CartValidationError
from checkout.catalogue.catalogue import Catalogue, Product
from checkout.order.placement import CheckoutService
from pytest_bdd import given, parsers, then, when


@pytest.fixture()
def error():
    """Container for a captured checkout rejection."""
    return {"exc": None}


@pytest.fixture()
def service(bdd_catalogue, gateway, store):
    return CheckoutService(catalogue=bdd_catalogue, gateway=gateway, store=store)


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(
    parsers.cfparse("the catalogue lists product {product_id:d} at {price}"),
    target_fixture="bdd_catalogue",
)
def _(product_id, price):
    return Catalogue([Product(id=product_id, name=f"Product {product_id}", unit_price=Decimal(price))])


@given(parsers.cfparse('a customer with email "{email}"'), target_fixture="customer")
def _(email):
    return {"email": email, "name": "Ana Silva", "address": {"city": "Lisboa", "country": "PT"}}


@given(
    parsers.cfparse("the customer has checked out {quantity:d} of product {product_id:d}"),
    target_fixture="placed",
)
def _(service, customer, quantity, product_id):
    return service.place_order([CartLine(product_id, quantity)], customer)


# ---------------------------------------------------------------------------
# When steps
# ---------------------------------------------------------------------------
@when(
    parsers.cfparse("the customer checks out {quantity:d} of product {product_id:d}"),
    target_fixture="placed",
)
def _(service, customer, error, quantity, product_id):
    try:
        return service.place_order([CartLine(product_id, quantity)], customer)
    except CartValidationError as exc:
        error["exc"] = exc
        return None


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the order is "{status}"'))
def _(store, placed, status):
    assert store.get_order(placed.payment_intent_id).status == status


@then(parsers.cfparse('the checkout is rejected with "{message}"'))
def _(error, message):
    assert error["exc"] is not None
    assert error["exc"].message == message


@then("no charge is requested")
def _(gateway, store):
    assert gateway.calls == []
    assert len(store) == 0
