from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable

from storefront.core.domain.model.money import DEFAULT_CURRENCY, Money, fold_money
from storefront.core.domain.model.order import Coupon, LineItem, Totals


@dataclass(frozen=True)
class PricingPolicy:
    tax_rate: Decimal = Decimal("0.085")
    free_shipping_threshold: Decimal = Decimal("50.00")
    flat_shipping: Decimal = Decimal("5.99")
    currency: str = DEFAULT_CURRENCY


def compute_totals(
    items: Iterable[LineItem],
    coupon: Coupon | None = None,
    policy: PricingPolicy = PricingPolicy(),
) -> Totals:
    """
    items    = sum(price * quantity)
    discount = coupon discount, capped at items
    tax      = 8.5% of (items - discount), rounded half-up to cents
    shipping = 0 from 50.00 of (items - discount) upwards, else 5.99
    """
    items_price = fold_money((it.subtotal() for it in items), currency=policy.currency)
    discount = Money.zero(policy.currency)
    if coupon is not None:
        discount = Money.of(max(coupon.discount.amount, Decimal("0")), policy.currency)
    discount = discount.min(items_price)

    discounted = items_price - discount
    tax_price = discounted.scale(policy.tax_rate)
    if discounted.amount >= policy.free_shipping_threshold:
        shipping_price = Money.zero(policy.currency)
    else:
        shipping_price = Money.of(policy.flat_shipping, policy.currency)

    return Totals(
        items_price=items_price,
        discount=discount,
        tax_price=tax_price,
        shipping_price=shipping_price,
        total_price=discounted + tax_price + shipping_price,
    )
