"""Tests for order totals."""

from decimal import Decimal

from storefront.core.domain.model.money import Money
from storefront.core.domain.model.order import Coupon, LineItem
from storefront.core.domain.service.pricing import PricingPolicy, compute_totals


def items(*pairs):
    return [
        LineItem(product_id=str(i), name=f"item-{i}", unit_price=Money.of(price), quantity=qty)
        for i, (price, qty) in enumerate(pairs, start=1)
    ]


def as_strings(totals):
    return (
        str(totals.items_price),
        str(totals.discount),
        str(totals.tax_price),
        str(totals.shipping_price),
        str(totals.total_price),
    )


class TestComputeTotals:
    def test_small_order_pays_shipping(self):
        totals = compute_totals(items(("10.00", 3)))
        assert as_strings(totals) == ("30.00", "0.00", "2.55", "5.99", "38.54")

    def test_order_over_threshold_ships_free(self):
        totals = compute_totals(items(("60.00", 1)))
        assert as_strings(totals) == ("60.00", "0.00", "5.10", "0.00", "65.10")

    def test_threshold_is_inclusive(self):
        assert compute_totals(items(("50.00", 1))).shipping_price == Money.zero()
        assert compute_totals(items(("49.99", 1))).shipping_price == Money.of("5.99")

    def test_tax_rounds_half_up(self):
        # 1.00 * 0.085 = 0.085 exactly
        assert str(compute_totals(items(("1.00", 1))).tax_price) == "0.09"

    def test_total_is_sum_of_parts(self):
        totals = compute_totals(items(("19.99", 2), ("3.35", 5)))
        expected = (
            totals.items_price.amount
            - totals.discount.amount
            + totals.tax_price.amount
            + totals.shipping_price.amount
        )
        assert totals.total_price.amount == expected

    def test_coupon_reduces_taxable_amount(self):
        coupon = Coupon(code="WELCOME10", discount=Money.of("10.00"))
        totals = compute_totals(items(("60.00", 1)), coupon)
        assert as_strings(totals) == ("60.00", "10.00", "4.25", "0.00", "54.25")

    def test_coupon_discount_is_capped_at_items_price(self):
        coupon = Coupon(code="BIG", discount=Money.of("100.00"))
        totals = compute_totals(items(("10.00", 3)), coupon)
        assert as_strings(totals) == ("30.00", "30.00", "0.00", "5.99", "5.99")

    def test_coupon_can_drop_order_below_free_shipping(self):
        coupon = Coupon(code="SMALL", discount=Money.of("15.00"))
        totals = compute_totals(items(("60.00", 1)), coupon)
        assert str(totals.shipping_price) == "5.99"

    def test_custom_policy(self):
        policy = PricingPolicy(
            tax_rate=Decimal("0.10"),
            free_shipping_threshold=Decimal("100.00"),
            flat_shipping=Decimal("7.50"),
        )
        totals = compute_totals(items(("60.00", 1)), policy=policy)
        assert as_strings(totals) == ("60.00", "0.00", "6.00", "7.50", "73.50")
