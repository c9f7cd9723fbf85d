"""Tests for the cart value object and the cart use case."""

from decimal import Decimal

import pytest

from storefront.core.domain.model.cart import Cart
from storefront.core.domain.model.errors import AuthError, ProductNotFound, ValidationError
from storefront.core.domain.model.money import Money
from storefront.core.ports.inbound.cart import AddToCartCommand, ChangeQuantityCommand
from storefront.core.ports.inbound.catalog import UpdateProductCommand


class TestCart:
    def test_empty_cart(self):
        cart = Cart()
        assert cart.is_empty
        assert cart.item_count == 0
        assert cart.total() == Money.zero()

    def test_add_appends_in_order(self):
        cart = Cart().add("1", "Phone", Money.of("999.00")).add("3", "Earbuds", Money.of("199.00"), 2)
        assert [ln.product_id for ln in cart.lines] == ["1", "3"]
        assert cart.item_count == 3
        assert str(cart.total()) == "1397.00"

    def test_add_same_product_merges_and_keeps_first_price(self):
        cart = Cart().add("1", "Phone", Money.of("999.00")).add("1", "Phone", Money.of("899.00"), 2)
        assert len(cart.lines) == 1
        assert cart.lines[0].quantity == 3
        assert cart.lines[0].unit_price == Money.of("999.00")

    def test_add_rejects_non_positive_quantity(self):
        with pytest.raises(ValueError):
            Cart().add("1", "Phone", Money.of("1.00"), 0)

    def test_set_quantity_applies_delta(self):
        cart = Cart().add("1", "Phone", Money.of("10.00"), 2).set_quantity("1", 3)
        assert cart.lines[0].quantity == 5

    def test_line_reaching_zero_is_removed(self):
        cart = Cart().add("1", "Phone", Money.of("10.00"), 2).set_quantity("1", -2)
        assert cart.is_empty

    def test_set_quantity_on_unknown_product_is_noop(self):
        cart = Cart().add("1", "Phone", Money.of("10.00"))
        assert cart.set_quantity("9", 1) == cart

    def test_remove_and_clear(self):
        cart = Cart().add("1", "A", Money.of("1.00")).add("2", "B", Money.of("2.00"))
        assert [ln.product_id for ln in cart.remove("1").lines] == ["2"]
        assert cart.clear().is_empty


class TestCartService:
    def test_add_takes_price_snapshot_from_catalog(self, usecases, customer):
        cart = usecases.cart.add(AddToCartCommand(customer, "3", 2)).unwrap()
        assert cart.lines[0].name == "Wireless Earbuds"
        assert str(cart.lines[0].unit_price) == "199.00"
        assert cart.item_count == 2

    def test_snapshot_survives_catalog_price_change(self, usecases, customer, admin):
        usecases.cart.add(AddToCartCommand(customer, "3"))
        usecases.catalog.update_product(
            UpdateProductCommand(admin, "3", price=Decimal("149.00"))
        ).unwrap()
        cart = usecases.cart.view(customer).unwrap()
        assert str(cart.lines[0].unit_price) == "199.00"

    def test_carts_are_per_identity(self, usecases, customer, other_customer):
        usecases.cart.add(AddToCartCommand(customer, "1"))
        assert usecases.cart.view(other_customer).unwrap().is_empty

    def test_change_quantity_and_remove(self, usecases, customer):
        usecases.cart.add(AddToCartCommand(customer, "1", 2))
        usecases.cart.add(AddToCartCommand(customer, "2"))
        cart = usecases.cart.change_quantity(
            ChangeQuantityCommand(customer, "1", -2)
        ).unwrap()
        assert [ln.product_id for ln in cart.lines] == ["2"]
        cart = usecases.cart.remove(customer, "2").unwrap()
        assert cart.is_empty

    def test_clear(self, usecases, customer):
        usecases.cart.add(AddToCartCommand(customer, "1"))
        assert usecases.cart.clear(customer).unwrap().is_empty
        assert usecases.cart.view(customer).unwrap().is_empty

    def test_unknown_product(self, usecases, customer):
        result = usecases.cart.add(AddToCartCommand(customer, "nope"))
        assert isinstance(result.failure(), ProductNotFound)

    def test_inactive_product_cannot_be_added(self, usecases, customer, admin):
        usecases.catalog.deactivate_product(admin, "4").unwrap()
        result = usecases.cart.add(AddToCartCommand(customer, "4"))
        assert isinstance(result.failure(), ProductNotFound)

    def test_zero_quantity_rejected(self, usecases, customer):
        result = usecases.cart.add(AddToCartCommand(customer, "1", 0))
        assert isinstance(result.failure(), ValidationError)

    def test_requires_identity(self, usecases):
        assert isinstance(usecases.cart.view(None).failure(), AuthError)
        assert isinstance(usecases.cart.add(AddToCartCommand(None, "1")).failure(), AuthError)
