from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, Sequence

from returns.result import Result

from storefront.core.domain.model.errors import StorefrontError
from storefront.core.domain.model.identity import Identity
from storefront.core.domain.model.money import Money
from storefront.core.domain.model.order import Order


@dataclass(frozen=True)
class ListOrdersQuery:
    identity: Identity | None
    page: int = 1
    limit: int = 10
    status: str | None = None  # admin listing only


@dataclass(frozen=True)
class GetOrderQuery:
    identity: Identity | None
    order_id: str  # UUID string


@dataclass(frozen=True)
class OrderPage:
    orders: Sequence[Order]
    total: int
    page: int
    limit: int


@dataclass(frozen=True)
class OrderStats:
    total_orders: int
    total_revenue: Money
    average_order_value: Money


class OrderQueriesUseCase(Protocol):
    def my_orders(self, query: ListOrdersQuery) -> Result[OrderPage, StorefrontError]: ...

    def list_all(self, query: ListOrdersQuery) -> Result[OrderPage, StorefrontError]: ...

    def get_order(self, query: GetOrderQuery) -> Result[Order, StorefrontError]: ...

    def stats(self, identity: Identity | None) -> Result[OrderStats, StorefrontError]: ...
