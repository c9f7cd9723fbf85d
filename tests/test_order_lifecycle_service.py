"""Tests for order status transitions and the admin review workflow."""

import uuid
from decimal import Decimal

import pytest

from conftest import checkout_command
from storefront.core.domain.model.errors import (
    AuthError,
    AuthorizationError,
    InvalidStatusTransition,
    OrderNotFound,
    ValidationError,
)
from storefront.core.domain.model.order import (
    TRANSITIONS,
    OrderStatus,
    PaymentStatus,
    can_transition,
)
from storefront.core.ports.inbound.order_lifecycle import (
    OrderActionCommand,
    RefundOrderCommand,
    ShipOrderCommand,
    StatusUpdateCommand,
)


def oid(receipt):
    return str(receipt.order_id.value)


class TestTransitionTable:
    def test_every_status_has_an_entry(self):
        assert set(TRANSITIONS) == set(OrderStatus)

    @pytest.mark.parametrize("terminal", [OrderStatus.REJECTED, OrderStatus.REFUNDED])
    def test_terminal_states(self, terminal):
        assert not any(can_transition(terminal, target) for target in OrderStatus)

    def test_nothing_returns_to_pending(self):
        assert not any(can_transition(s, OrderStatus.PENDING) for s in OrderStatus)

    def test_review_edges(self):
        assert can_transition(OrderStatus.PENDING, OrderStatus.CONFIRMED)
        assert can_transition(OrderStatus.PENDING, OrderStatus.REJECTED)
        assert not can_transition(OrderStatus.CONFIRMED, OrderStatus.REJECTED)


class TestAdminReview:
    def test_confirm_with_message(self, usecases, stores, place_order, customer, admin, clock):
        receipt = place_order(customer)
        clock.advance(hours=1)

        order = usecases.lifecycle.confirm(
            OrderActionCommand(admin, oid(receipt), "Ready for pickup at 5pm")
        ).unwrap()

        assert order.status is OrderStatus.CONFIRMED
        assert order.admin_message == "Ready for pickup at 5pm"
        assert order.updated_at > order.created_at
        assert stores.orders.get(receipt.order_id).unwrap() == order

    def test_reject_without_message_stores_empty_string(
        self, usecases, place_order, customer, admin
    ):
        receipt = place_order(customer)
        order = usecases.lifecycle.reject(OrderActionCommand(admin, oid(receipt))).unwrap()
        assert order.status is OrderStatus.REJECTED
        assert order.admin_message == ""

    def test_missing_order(self, usecases, admin):
        result = usecases.lifecycle.confirm(OrderActionCommand(admin, str(uuid.uuid4())))
        assert isinstance(result.failure(), OrderNotFound)

    @pytest.mark.parametrize("raw", ["not-a-uuid", "1718000000000", ""])
    def test_malformed_order_id_is_not_found(self, usecases, admin, raw):
        result = usecases.lifecycle.confirm(OrderActionCommand(admin, raw))
        failure = result.failure()
        assert isinstance(failure, OrderNotFound)
        assert failure.order_id == raw

    def test_non_admin_cannot_review(self, usecases, stores, place_order, customer):
        receipt = place_order(customer)
        for action in (usecases.lifecycle.confirm, usecases.lifecycle.reject):
            result = action(OrderActionCommand(customer, oid(receipt), "sure"))
            assert isinstance(result.failure(), AuthorizationError)
        order = stores.orders.get(receipt.order_id).unwrap()
        assert order.status is OrderStatus.PENDING
        assert order.admin_message is None

    def test_anonymous_cannot_review(self, usecases, place_order, customer):
        receipt = place_order(customer)
        result = usecases.lifecycle.confirm(OrderActionCommand(None, oid(receipt)))
        assert isinstance(result.failure(), AuthError)

    def test_rejected_order_cannot_be_confirmed(self, usecases, place_order, customer, admin):
        receipt = place_order(customer)
        usecases.lifecycle.reject(OrderActionCommand(admin, oid(receipt))).unwrap()
        result = usecases.lifecycle.confirm(OrderActionCommand(admin, oid(receipt)))
        err = result.failure()
        assert isinstance(err, InvalidStatusTransition)
        assert (err.current, err.target) == ("rejected", "confirmed")

    def test_publish_failure_keeps_transition(self, failing_usecases, stores, customer, admin):
        receipt = failing_usecases.checkout.checkout(checkout_command(customer)).unwrap()
        failing_usecases.lifecycle.confirm(OrderActionCommand(admin, oid(receipt))).unwrap()
        assert stores.orders.get(receipt.order_id).unwrap().status is OrderStatus.CONFIRMED


class TestFulfillment:
    def test_full_delivery_path(self, usecases, place_order, customer, admin):
        receipt = place_order(customer)
        lc = usecases.lifecycle
        lc.confirm(OrderActionCommand(admin, oid(receipt))).unwrap()
        lc.mark_processing(OrderActionCommand(admin, oid(receipt))).unwrap()
        shipped = lc.mark_shipped(
            ShipOrderCommand(admin, oid(receipt), tracking_number="1Z999", carrier="UPS")
        ).unwrap()
        assert shipped.status is OrderStatus.SHIPPED
        assert shipped.shipping.tracking_number == "1Z999"

        delivered = lc.mark_delivered(OrderActionCommand(admin, oid(receipt))).unwrap()
        assert delivered.status is OrderStatus.DELIVERED
        assert delivered.shipping.delivered_at is not None
        assert delivered.shipping.carrier == "UPS"

    def test_ship_requires_tracking(self, usecases, place_order, customer, admin):
        receipt = place_order(customer)
        result = usecases.lifecycle.mark_shipped(
            ShipOrderCommand(admin, oid(receipt), tracking_number=" ", carrier="UPS")
        )
        assert str(result.failure()) == "tracking_number is required"

    def test_pending_cannot_be_delivered(self, usecases, place_order, customer, admin):
        receipt = place_order(customer)
        result = usecases.lifecycle.mark_delivered(OrderActionCommand(admin, oid(receipt)))
        assert isinstance(result.failure(), InvalidStatusTransition)

    def test_delivery_keeps_shipment_record(self, usecases, clock, place_order, customer, admin):
        receipt = place_order(customer)
        lc = usecases.lifecycle
        lc.confirm(OrderActionCommand(admin, oid(receipt))).unwrap()
        shipped = lc.mark_shipped(
            ShipOrderCommand(admin, oid(receipt), tracking_number="1Z999", carrier="UPS")
        ).unwrap()
        clock.advance(days=2)

        delivered = lc.mark_delivered(OrderActionCommand(admin, oid(receipt))).unwrap()
        assert delivered.shipping.shipped_at == shipped.shipping.shipped_at
        assert delivered.shipping.delivered_at == clock.now
        assert delivered.shipping.tracking_number == "1Z999"

    def test_processing_cannot_skip_shipment(self, usecases, stores, place_order, customer, admin):
        receipt = place_order(customer)
        lc = usecases.lifecycle
        lc.mark_processing(OrderActionCommand(admin, oid(receipt))).unwrap()
        result = lc.mark_delivered(OrderActionCommand(admin, oid(receipt)))
        assert isinstance(result.failure(), InvalidStatusTransition)
        assert stores.orders.get(receipt.order_id).unwrap().shipping is None


class TestCancel:
    def test_owner_cancels_pending_order(self, usecases, place_order, customer):
        receipt = place_order(customer)
        order = usecases.lifecycle.cancel(
            OrderActionCommand(customer, oid(receipt), "changed my mind")
        ).unwrap()
        assert order.status is OrderStatus.CANCELLED
        assert order.cancellation_reason == "changed my mind"

    def test_owner_cannot_cancel_confirmed_order(self, usecases, place_order, customer, admin):
        receipt = place_order(customer)
        usecases.lifecycle.confirm(OrderActionCommand(admin, oid(receipt))).unwrap()
        result = usecases.lifecycle.cancel(OrderActionCommand(customer, oid(receipt)))
        assert isinstance(result.failure(), AuthorizationError)

    def test_stranger_cannot_cancel(self, usecases, place_order, customer, other_customer):
        receipt = place_order(customer)
        result = usecases.lifecycle.cancel(OrderActionCommand(other_customer, oid(receipt)))
        assert isinstance(result.failure(), AuthorizationError)

    def test_admin_cancels_confirmed_order(self, usecases, place_order, customer, admin):
        receipt = place_order(customer)
        usecases.lifecycle.confirm(OrderActionCommand(admin, oid(receipt))).unwrap()
        order = usecases.lifecycle.cancel(OrderActionCommand(admin, oid(receipt))).unwrap()
        assert order.status is OrderStatus.CANCELLED


class TestRefund:
    def test_refund_records_actor(self, usecases, place_order, customer, admin):
        receipt = place_order(customer)
        lc = usecases.lifecycle
        lc.confirm(OrderActionCommand(admin, oid(receipt))).unwrap()
        order = lc.refund(
            RefundOrderCommand(admin, oid(receipt), Decimal("10.00"), "damaged box")
        ).unwrap()
        assert order.status is OrderStatus.REFUNDED
        assert order.payment.status is PaymentStatus.REFUNDED
        assert str(order.refund.amount) == "10.00"
        assert order.refund.processed_by == admin.user_id

    def test_refund_cannot_exceed_total(self, usecases, place_order, customer, admin):
        receipt = place_order(customer)
        usecases.lifecycle.confirm(OrderActionCommand(admin, oid(receipt))).unwrap()
        result = usecases.lifecycle.refund(
            RefundOrderCommand(admin, oid(receipt), Decimal("38.55"), "too much")
        )
        assert isinstance(result.failure(), ValidationError)

    @pytest.mark.parametrize("amount, reason", [(Decimal("0"), "x"), (Decimal("5"), " ")])
    def test_refund_input(self, usecases, place_order, customer, admin, amount, reason):
        receipt = place_order(customer)
        result = usecases.lifecycle.refund(RefundOrderCommand(admin, oid(receipt), amount, reason))
        assert isinstance(result.failure(), ValidationError)


class TestUpdateStatus:
    def test_dispatches_to_confirm(self, usecases, place_order, customer, admin):
        receipt = place_order(customer)
        order = usecases.lifecycle.update_status(
            StatusUpdateCommand(admin, oid(receipt), "confirmed", message="ok")
        ).unwrap()
        assert order.status is OrderStatus.CONFIRMED
        assert order.admin_message == "ok"

    def test_unknown_status(self, usecases, place_order, customer, admin):
        receipt = place_order(customer)
        result = usecases.lifecycle.update_status(
            StatusUpdateCommand(admin, oid(receipt), "teleported")
        )
        assert isinstance(result.failure(), ValidationError)

    def test_back_to_pending_is_rejected(self, usecases, place_order, customer, admin):
        receipt = place_order(customer)
        result = usecases.lifecycle.update_status(
            StatusUpdateCommand(admin, oid(receipt), "pending")
        )
        assert isinstance(result.failure(), InvalidStatusTransition)

    def test_owner_may_cancel_through_status_update(self, usecases, place_order, customer):
        receipt = place_order(customer)
        order = usecases.lifecycle.update_status(
            StatusUpdateCommand(customer, oid(receipt), "cancelled")
        ).unwrap()
        assert order.status is OrderStatus.CANCELLED
