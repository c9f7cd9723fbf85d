from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Sequence

from returns.result import Failure, Result

from storefront.core.domain.model.errors import StorefrontError, ValidationError
from storefront.core.domain.model.identity import CustomerId, Identity
from storefront.core.domain.model.money import DEFAULT_CURRENCY, Money, fold_money
from storefront.core.domain.model.order import Order, OrderStatus
from storefront.core.domain.service.auth_gate import (
    require_admin,
    require_identity,
    require_owner_or_admin,
)
from storefront.core.domain.service.validation import parse_order_id, validate_page
from storefront.core.ports.inbound.list_orders import (
    GetOrderQuery,
    ListOrdersQuery,
    OrderPage,
    OrderQueriesUseCase,
    OrderStats,
)
from storefront.core.ports.outbound.orders import OrderRepository


@dataclass(frozen=True)
class OrderQueriesDeps:
    orders: OrderRepository
    max_page_size: int = 50
    currency: str = DEFAULT_CURRENCY


@dataclass(frozen=True)
class OrderQueriesService(OrderQueriesUseCase):
    deps: OrderQueriesDeps

    def my_orders(self, query: ListOrdersQuery) -> Result[OrderPage, StorefrontError]:
        return require_identity(query.identity).bind(
            lambda identity: self._page(query, customer_id=identity.user_id, status=None)
        )

    def list_all(self, query: ListOrdersQuery) -> Result[OrderPage, StorefrontError]:
        admin = require_admin(query.identity)
        if isinstance(admin, Failure):
            return admin

        status: OrderStatus | None = None
        if query.status is not None:
            try:
                status = OrderStatus(query.status)
            except ValueError:
                return Failure(ValidationError(f"unknown order status: {query.status}"))
        return self._page(query, customer_id=None, status=status)

    def get_order(self, query: GetOrderQuery) -> Result[Order, StorefrontError]:
        authenticated = require_identity(query.identity)
        if isinstance(authenticated, Failure):
            return authenticated
        return (
            parse_order_id(query.order_id)
            .bind(self.deps.orders.get)
            .bind(
                lambda order: require_owner_or_admin(
                    query.identity, order.customer_id
                ).map(lambda _: order)
            )
        )

    def stats(self, identity: Identity | None) -> Result[OrderStats, StorefrontError]:
        return require_admin(identity).bind(lambda _: self.deps.orders.all()).map(
            self._summarize
        )

    def _page(
        self,
        query: ListOrdersQuery,
        customer_id: CustomerId | None,
        status: OrderStatus | None,
    ) -> Result[OrderPage, StorefrontError]:
        checked = validate_page(query.page, query.limit, self.deps.max_page_size)
        if isinstance(checked, Failure):
            return checked

        offset = (query.page - 1) * query.limit
        orders = self.deps.orders.list(
            offset, query.limit, customer_id=customer_id, status=status
        )
        total = self.deps.orders.count(customer_id=customer_id, status=status)
        return orders.bind(
            lambda page: total.map(
                lambda n: OrderPage(
                    orders=tuple(page), total=n, page=query.page, limit=query.limit
                )
            )
        )

    def _summarize(self, orders: Sequence[Order]) -> OrderStats:
        revenue = fold_money(
            (o.totals.total_price for o in orders), currency=self.deps.currency
        )
        if orders:
            average = Money.of(
                (revenue.amount / Decimal(len(orders))).quantize(
                    Decimal("0.01"), rounding=ROUND_HALF_UP
                ),
                self.deps.currency,
            )
        else:
            average = Money.zero(self.deps.currency)
        return OrderStats(
            total_orders=len(orders), total_revenue=revenue, average_order_value=average
        )
