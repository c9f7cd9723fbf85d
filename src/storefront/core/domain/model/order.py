from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum
from typing import Mapping, Tuple
from uuid import UUID, uuid4

from storefront.core.domain.model.identity import CustomerId
from storefront.core.domain.model.money import Money


@dataclass(frozen=True)
class OrderId:
    value: UUID

    @staticmethod
    def new() -> "OrderId":
        return OrderId(uuid4())


class OrderStatus(StrEnum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    REJECTED = "rejected"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"
    REFUNDED = "refunded"


TRANSITIONS: Mapping[OrderStatus, frozenset[OrderStatus]] = {
    OrderStatus.PENDING: frozenset(
        {
            OrderStatus.CONFIRMED,
            OrderStatus.REJECTED,
            OrderStatus.PROCESSING,
            OrderStatus.CANCELLED,
        }
    ),
    OrderStatus.CONFIRMED: frozenset(
        {
            OrderStatus.PROCESSING,
            OrderStatus.SHIPPED,
            OrderStatus.CANCELLED,
            OrderStatus.REFUNDED,
        }
    ),
    OrderStatus.PROCESSING: frozenset(
        {OrderStatus.SHIPPED, OrderStatus.CANCELLED, OrderStatus.REFUNDED}
    ),
    OrderStatus.SHIPPED: frozenset(
        {OrderStatus.DELIVERED, OrderStatus.CANCELLED, OrderStatus.REFUNDED}
    ),
    OrderStatus.DELIVERED: frozenset({OrderStatus.REFUNDED}),
    OrderStatus.CANCELLED: frozenset({OrderStatus.REFUNDED}),
    OrderStatus.REJECTED: frozenset(),
    OrderStatus.REFUNDED: frozenset(),
}


def can_transition(current: OrderStatus, target: OrderStatus) -> bool:
    return target in TRANSITIONS[current]


class FulfillmentMethod(StrEnum):
    PICKUP = "pickup"
    DELIVERY = "delivery"


class PaymentMethod(StrEnum):
    STRIPE = "stripe"
    PAYPAL = "paypal"
    CASH_ON_DELIVERY = "cash_on_delivery"


class PaymentStatus(StrEnum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"
    REFUNDED = "refunded"


@dataclass(frozen=True)
class Address:
    first_name: str
    last_name: str
    street: str
    city: str
    state: str
    zip_code: str
    email: str = ""
    phone: str = ""
    country: str = "USA"

    def one_line(self) -> str:
        return f"{self.street}, {self.city}, {self.state} {self.zip_code}, {self.country}"


@dataclass(frozen=True)
class PaymentInfo:
    method: PaymentMethod = PaymentMethod.CASH_ON_DELIVERY
    status: PaymentStatus = PaymentStatus.PENDING


@dataclass(frozen=True)
class Coupon:
    code: str
    discount: Money


@dataclass(frozen=True)
class LineItem:
    product_id: str
    name: str
    unit_price: Money
    quantity: int

    def subtotal(self) -> Money:
        return self.unit_price * self.quantity


@dataclass(frozen=True)
class Totals:
    items_price: Money
    discount: Money
    tax_price: Money
    shipping_price: Money
    total_price: Money


@dataclass(frozen=True)
class ShippingInfo:
    tracking_number: str
    carrier: str
    shipped_at: datetime
    estimated_delivery: datetime | None = None
    delivered_at: datetime | None = None


@dataclass(frozen=True)
class RefundInfo:
    amount: Money
    reason: str
    processed_at: datetime
    processed_by: CustomerId


@dataclass(frozen=True)
class Order:
    order_id: OrderId
    order_number: str
    customer_id: CustomerId
    items: Tuple[LineItem, ...]
    fulfillment_method: FulfillmentMethod
    totals: Totals
    created_at: datetime
    updated_at: datetime
    status: OrderStatus = OrderStatus.PENDING
    address: str | None = None
    shipping_address: Address | None = None
    billing_address: Address | None = None
    payment: PaymentInfo = PaymentInfo()
    coupon: Coupon | None = None
    notes: str | None = None
    is_gift: bool = False
    gift_message: str | None = None
    admin_message: str | None = None
    cancellation_reason: str | None = None
    shipping: ShippingInfo | None = None
    refund: RefundInfo | None = None

    @property
    def item_count(self) -> int:
        return sum(it.quantity for it in self.items)
