from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Sequence

from returns.result import Failure, Result, Success

from storefront.core.domain.model.errors import (
    OrderNotFound,
    PersistenceError,
    StorefrontError,
)
from storefront.core.domain.model.identity import CustomerId
from storefront.core.domain.model.order import Order, OrderId, OrderStatus
from storefront.core.ports.outbound.orders import OrderRepository


@dataclass
class InMemoryOrderRepository(OrderRepository):
    _store: Dict[str, Order] = field(default_factory=dict)

    def save(self, order: Order) -> Result[OrderId, StorefrontError]:
        key = str(order.order_id.value)
        if key in self._store:
            return Failure(PersistenceError(message="order_id already exists"))
        if any(o.order_number == order.order_number for o in self._store.values()):
            return Failure(
                PersistenceError(
                    message=f"order_number {order.order_number} already exists"
                )
            )
        self._store[key] = order
        return Success(order.order_id)

    def get(self, order_id: OrderId) -> Result[Order, StorefrontError]:
        key = str(order_id.value)
        if key not in self._store:
            return Failure(OrderNotFound(message="Order not found", order_id=key))
        return Success(self._store[key])

    def update(self, order: Order) -> Result[Order, StorefrontError]:
        key = str(order.order_id.value)
        if key not in self._store:
            return Failure(OrderNotFound(message="Order not found", order_id=key))
        self._store[key] = order
        return Success(order)

    def list(
        self,
        offset: int,
        limit: int,
        customer_id: CustomerId | None = None,
        status: OrderStatus | None = None,
    ) -> Result[Sequence[Order], StorefrontError]:
        orders = self._matching(customer_id, status)
        # ties on created_at: later insertion first
        orders = sorted(
            enumerate(orders), key=lambda pair: (pair[1].created_at, pair[0]), reverse=True
        )
        sliced = [o for _, o in orders][offset : offset + limit]
        return Success(tuple(sliced))

    def count(
        self,
        customer_id: CustomerId | None = None,
        status: OrderStatus | None = None,
    ) -> Result[int, StorefrontError]:
        return Success(len(self._matching(customer_id, status)))

    def count_created_since(self, since: datetime) -> Result[int, StorefrontError]:
        return Success(sum(1 for o in self._store.values() if o.created_at >= since))

    def all(self) -> Result[Sequence[Order], StorefrontError]:
        return Success(tuple(self._store.values()))

    def _matching(
        self, customer_id: CustomerId | None, status: OrderStatus | None
    ) -> list[Order]:
        orders = list(self._store.values())  # insertion order
        if customer_id is not None:
            orders = [o for o in orders if o.customer_id.value == customer_id.value]
        if status is not None:
            orders = [o for o in orders if o.status is status]
        return orders
