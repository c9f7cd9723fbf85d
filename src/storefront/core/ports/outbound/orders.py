from __future__ import annotations

from datetime import datetime
from typing import Protocol, Sequence

from returns.result import Result

from storefront.core.domain.model.errors import StorefrontError
from storefront.core.domain.model.identity import CustomerId
from storefront.core.domain.model.order import Order, OrderId, OrderStatus


class OrderRepository(Protocol):
    """
    Orders are created once and afterwards only replaced by a transitioned
    copy. A real store keeps a UNIQUE index on order_number.
    """

    def save(self, order: Order) -> Result[OrderId, StorefrontError]: ...

    def get(self, order_id: OrderId) -> Result[Order, StorefrontError]: ...

    def update(self, order: Order) -> Result[Order, StorefrontError]: ...

    def list(
        self,
        offset: int,
        limit: int,
        customer_id: CustomerId | None = None,
        status: OrderStatus | None = None,
    ) -> Result[Sequence[Order], StorefrontError]:
        """Newest first."""
        ...

    def count(
        self,
        customer_id: CustomerId | None = None,
        status: OrderStatus | None = None,
    ) -> Result[int, StorefrontError]: ...

    def count_created_since(self, since: datetime) -> Result[int, StorefrontError]: ...

    def all(self) -> Result[Sequence[Order], StorefrontError]: ...
