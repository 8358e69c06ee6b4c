"""BDD tests for cart pricing rejections."""

from pytest_bdd import scenarios

scenarios("features/cart_pricing.feature")
