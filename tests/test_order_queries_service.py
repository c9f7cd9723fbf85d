"""Tests for order listing, lookup and statistics."""

import pytest

from conftest import line
from storefront.core.domain.model.errors import (
    AuthError,
    AuthorizationError,
    OrderNotFound,
    ValidationError,
)
from storefront.core.domain.model.order import OrderStatus
from storefront.core.ports.inbound.list_orders import GetOrderQuery, ListOrdersQuery
from storefront.core.ports.inbound.order_lifecycle import OrderActionCommand


class TestMyOrders:
    def test_only_own_orders(self, usecases, place_order, customer, other_customer):
        mine = [place_order(customer) for _ in range(2)]
        place_order(other_customer)

        page = usecases.orders.my_orders(ListOrdersQuery(customer)).unwrap()
        assert page.total == 2
        assert {o.order_id for o in page.orders} == {r.order_id for r in mine}
        assert all(o.customer_id == customer.user_id for o in page.orders)

    def test_newest_first(self, usecases, place_order, customer, clock):
        first = place_order(customer)
        clock.advance(minutes=1)
        second = place_order(customer)
        page = usecases.orders.my_orders(ListOrdersQuery(customer)).unwrap()
        assert [o.order_id for o in page.orders] == [second.order_id, first.order_id]

    def test_pagination(self, usecases, place_order, customer, clock):
        for _ in range(5):
            place_order(customer)
            clock.advance(minutes=1)
        page = usecases.orders.my_orders(ListOrdersQuery(customer, page=2, limit=2)).unwrap()
        assert page.total == 5
        assert len(page.orders) == 2
        assert [o.order_number for o in page.orders] == ["GOPG2506030003", "GOPG2506030002"]

    @pytest.mark.parametrize("page, limit", [(0, 10), (1, 0), (1, 51)])
    def test_bad_paging(self, usecases, customer, page, limit):
        result = usecases.orders.my_orders(ListOrdersQuery(customer, page=page, limit=limit))
        assert isinstance(result.failure(), ValidationError)

    def test_requires_identity(self, usecases):
        result = usecases.orders.my_orders(ListOrdersQuery(None))
        assert isinstance(result.failure(), AuthError)


class TestListAll:
    def test_admin_sees_everything(self, usecases, place_order, customer, other_customer, admin):
        place_order(customer)
        place_order(other_customer)
        assert usecases.orders.list_all(ListOrdersQuery(admin)).unwrap().total == 2

    def test_status_filter(self, usecases, place_order, customer, admin):
        first = place_order(customer)
        place_order(customer)
        usecases.lifecycle.confirm(
            OrderActionCommand(admin, str(first.order_id.value))
        ).unwrap()

        page = usecases.orders.list_all(ListOrdersQuery(admin, status="pending")).unwrap()
        assert page.total == 1
        assert page.orders[0].status is OrderStatus.PENDING

    def test_unknown_status(self, usecases, admin):
        result = usecases.orders.list_all(ListOrdersQuery(admin, status="lost"))
        assert isinstance(result.failure(), ValidationError)

    def test_customer_is_forbidden(self, usecases, customer):
        result = usecases.orders.list_all(ListOrdersQuery(customer, status="lost"))
        assert isinstance(result.failure(), AuthorizationError)


class TestGetOrder:
    def test_owner_and_admin_can_read(self, usecases, place_order, customer, admin):
        receipt = place_order(customer)
        order_id = str(receipt.order_id.value)
        for who in (customer, admin):
            order = usecases.orders.get_order(GetOrderQuery(who, order_id)).unwrap()
            assert order.order_number == receipt.order_number

    def test_stranger_is_forbidden(self, usecases, place_order, customer, other_customer):
        receipt = place_order(customer)
        result = usecases.orders.get_order(
            GetOrderQuery(other_customer, str(receipt.order_id.value))
        )
        assert isinstance(result.failure(), AuthorizationError)

    def test_missing(self, usecases, customer):
        result = usecases.orders.get_order(
            GetOrderQuery(customer, "00000000-0000-0000-0000-000000000000")
        )
        assert isinstance(result.failure(), OrderNotFound)


class TestStats:
    def test_revenue_and_average(self, usecases, place_order, customer, admin):
        place_order(customer)  # 38.54
        place_order(customer, lines=(line(price="60.00"),))  # 65.10
        stats = usecases.orders.stats(admin).unwrap()
        assert stats.total_orders == 2
        assert str(stats.total_revenue) == "103.64"
        assert str(stats.average_order_value) == "51.82"

    def test_empty(self, usecases, admin):
        stats = usecases.orders.stats(admin).unwrap()
        assert stats.total_orders == 0
        assert str(stats.average_order_value) == "0.00"

    def test_admin_only(self, usecases, customer):
        assert isinstance(usecases.orders.stats(customer).failure(), AuthorizationError)
