from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, Union

from returns.result import Result

from storefront.core.domain.model.errors import StorefrontError
from storefront.core.domain.model.identity import CustomerId
from storefront.core.domain.model.order import OrderId, OrderStatus


@dataclass(frozen=True)
class OrderPlaced:
    order_id: OrderId
    order_number: str
    customer_id: CustomerId


@dataclass(frozen=True)
class OrderStatusChanged:
    order_id: OrderId
    order_number: str
    previous: OrderStatus
    current: OrderStatus
    changed_by: CustomerId


OrderEvent = Union[OrderPlaced, OrderStatusChanged]


class EventPublisher(Protocol):
    def publish(self, event: OrderEvent) -> Result[None, StorefrontError]: ...
