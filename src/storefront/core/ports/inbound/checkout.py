from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Protocol, Sequence

from returns.result import Result

from storefront.core.domain.model.errors import StorefrontError
from storefront.core.domain.model.identity import CustomerId, Identity
from storefront.core.domain.model.order import Address, OrderId, OrderStatus, Totals


@dataclass(frozen=True)
class CheckoutLine:
    product_id: str
    name: str
    unit_price: Decimal
    quantity: int


@dataclass(frozen=True)
class CheckoutCommand:
    identity: Identity | None
    method: str  # pickup | delivery
    lines: Sequence[CheckoutLine] | None = None  # None: use the stored cart
    address: str | None = None
    shipping_address: Address | None = None
    billing_address: Address | None = None
    payment_method: str = "cash_on_delivery"
    coupon_code: str | None = None
    notes: str | None = None
    is_gift: bool = False
    gift_message: str | None = None


@dataclass(frozen=True)
class CheckoutReceipt:
    order_id: OrderId
    order_number: str
    customer_id: CustomerId
    status: OrderStatus
    totals: Totals
    message: str


@dataclass(frozen=True)
class QuoteCommand:
    lines: Sequence[CheckoutLine]
    discount: Decimal = Decimal("0")
    coupon_code: str | None = None


class CheckoutUseCase(Protocol):
    def checkout(
        self, command: CheckoutCommand
    ) -> Result[CheckoutReceipt, StorefrontError]: ...

    def quote(self, command: QuoteCommand) -> Result[Totals, StorefrontError]: ...
