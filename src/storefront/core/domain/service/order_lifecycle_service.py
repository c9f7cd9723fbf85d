from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Callable

from returns.result import Failure, Result, Success

from storefront.core.domain.model.errors import (
    AuthorizationError,
    InvalidStatusTransition,
    StorefrontError,
    ValidationError,
)
from storefront.core.domain.model.identity import Identity
from storefront.core.domain.model.money import Money, now_local
from storefront.core.domain.model.order import (
    Order,
    OrderStatus,
    PaymentStatus,
    RefundInfo,
    ShippingInfo,
    can_transition,
)
from storefront.core.domain.service.auth_gate import require_admin, require_identity
from storefront.core.domain.service.validation import blank, parse_order_id, to_decimal
from storefront.core.ports.inbound.order_lifecycle import (
    OrderActionCommand,
    OrderLifecycleUseCase,
    RefundOrderCommand,
    ShipOrderCommand,
    StatusUpdateCommand,
)
from storefront.core.ports.outbound.events import EventPublisher, OrderStatusChanged
from storefront.core.ports.outbound.orders import OrderRepository

logger = logging.getLogger("storefront.orders")

# Receives the order with status/updated_at already moved to the target.
Change = Callable[[Order, Identity, datetime], Result[Order, StorefrontError]]


def _unchanged(order: Order, _: Identity, __: datetime) -> Result[Order, StorefrontError]:
    return Success(order)


@dataclass(frozen=True)
class OrderLifecycleDeps:
    orders: OrderRepository
    events: EventPublisher
    clock: Callable[[], datetime] = now_local


@dataclass(frozen=True)
class OrderLifecycleService(OrderLifecycleUseCase):
    deps: OrderLifecycleDeps

    def confirm(self, command: OrderActionCommand) -> Result[Order, StorefrontError]:
        return self._apply(
            command.identity,
            command.order_id,
            OrderStatus.CONFIRMED,
            _with_admin_message(command.message),
        )

    def reject(self, command: OrderActionCommand) -> Result[Order, StorefrontError]:
        return self._apply(
            command.identity,
            command.order_id,
            OrderStatus.REJECTED,
            _with_admin_message(command.message),
        )

    def mark_processing(
        self, command: OrderActionCommand
    ) -> Result[Order, StorefrontError]:
        return self._apply(command.identity, command.order_id, OrderStatus.PROCESSING)

    def mark_shipped(self, command: ShipOrderCommand) -> Result[Order, StorefrontError]:
        if blank(command.tracking_number):
            return Failure(ValidationError("tracking_number is required"))
        if blank(command.carrier):
            return Failure(ValidationError("carrier is required"))

        def ship(order: Order, _: Identity, now: datetime) -> Result[Order, StorefrontError]:
            return Success(
                replace(
                    order,
                    shipping=ShippingInfo(
                        tracking_number=command.tracking_number.strip(),
                        carrier=command.carrier.strip(),
                        shipped_at=now,
                        estimated_delivery=command.estimated_delivery,
                    ),
                )
            )

        return self._apply(command.identity, command.order_id, OrderStatus.SHIPPED, ship)

    def mark_delivered(
        self, command: OrderActionCommand
    ) -> Result[Order, StorefrontError]:
        def deliver(
            order: Order, _: Identity, now: datetime
        ) -> Result[Order, StorefrontError]:
            # delivered is only reachable from shipped
            shipping = replace(order.shipping, delivered_at=now)  # type: ignore[type-var]
            return Success(replace(order, shipping=shipping))

        return self._apply(
            command.identity, command.order_id, OrderStatus.DELIVERED, deliver
        )

    def cancel(self, command: OrderActionCommand) -> Result[Order, StorefrontError]:
        def record_reason(
            order: Order, _: Identity, __: datetime
        ) -> Result[Order, StorefrontError]:
            return Success(replace(order, cancellation_reason=command.message))

        return self._apply(
            command.identity,
            command.order_id,
            OrderStatus.CANCELLED,
            record_reason,
            owner_may_act=True,
        )

    def refund(self, command: RefundOrderCommand) -> Result[Order, StorefrontError]:
        amount = to_decimal(command.amount)
        if amount is None or amount <= 0:
            return Failure(ValidationError("refund amount must be > 0"))
        if blank(command.reason):
            return Failure(ValidationError("refund reason is required"))

        def process(
            order: Order, actor: Identity, now: datetime
        ) -> Result[Order, StorefrontError]:
            total = order.totals.total_price
            refunded = Money.of(amount, total.currency)
            if refunded.amount > total.amount:
                return Failure(
                    ValidationError(f"refund amount cannot exceed order total {total}")
                )
            return Success(
                replace(
                    order,
                    payment=replace(order.payment, status=PaymentStatus.REFUNDED),
                    refund=RefundInfo(
                        amount=refunded,
                        reason=command.reason.strip(),
                        processed_at=now,
                        processed_by=actor.user_id,
                    ),
                )
            )

        return self._apply(
            command.identity, command.order_id, OrderStatus.REFUNDED, process
        )

    def update_status(
        self, command: StatusUpdateCommand
    ) -> Result[Order, StorefrontError]:
        try:
            target = OrderStatus(command.status)
        except ValueError:
            allowed = ", ".join(s.value for s in OrderStatus)
            return Failure(ValidationError(f"status must be one of: {allowed}"))

        action = OrderActionCommand(command.identity, command.order_id, command.message)
        if target is OrderStatus.CONFIRMED:
            return self.confirm(action)
        if target is OrderStatus.REJECTED:
            return self.reject(action)
        if target is OrderStatus.PROCESSING:
            return self.mark_processing(action)
        if target is OrderStatus.SHIPPED:
            return self.mark_shipped(
                ShipOrderCommand(
                    command.identity,
                    command.order_id,
                    tracking_number=command.tracking_number or "",
                    carrier=command.carrier or "",
                    estimated_delivery=command.estimated_delivery,
                )
            )
        if target is OrderStatus.DELIVERED:
            return self.mark_delivered(action)
        if target is OrderStatus.CANCELLED:
            return self.cancel(action)
        if target is OrderStatus.REFUNDED:
            if command.amount is None:
                return Failure(ValidationError("refund amount must be > 0"))
            return self.refund(
                RefundOrderCommand(
                    command.identity,
                    command.order_id,
                    amount=command.amount,
                    reason=command.reason or command.message or "",
                )
            )
        # pending: always rejected by the transition table
        return self._apply(command.identity, command.order_id, target)

    # ---- shared transition path --------------------------------------------

    def _apply(
        self,
        identity: Identity | None,
        order_id: str,
        target: OrderStatus,
        change: Change = _unchanged,
        owner_may_act: bool = False,
    ) -> Result[Order, StorefrontError]:
        authenticated = (
            require_identity(identity) if owner_may_act else require_admin(identity)
        )
        if isinstance(authenticated, Failure):
            return authenticated
        actor = authenticated.unwrap()

        found = parse_order_id(order_id).bind(self.deps.orders.get)
        if isinstance(found, Failure):
            return found
        order = found.unwrap()

        if not actor.is_admin:
            if not actor.owns(order.customer_id):
                return Failure(
                    AuthorizationError("Not authorized to access this resource")
                )
            if order.status is not OrderStatus.PENDING:
                return Failure(
                    AuthorizationError("Only pending orders can be cancelled by their owner")
                )

        if not can_transition(order.status, target):
            return Failure(
                InvalidStatusTransition(
                    message=f"order {order.order_number} cannot move to {target}",
                    current=order.status.value,
                    target=target.value,
                )
            )

        now = self.deps.clock()
        moved = replace(order, status=target, updated_at=now)
        return (
            change(moved, actor, now)
            .bind(self.deps.orders.update)
            .map(lambda updated: self._publish(order.status, updated, actor))
        )

    def _publish(self, previous: OrderStatus, order: Order, actor: Identity) -> Order:
        published = self.deps.events.publish(
            OrderStatusChanged(
                order_id=order.order_id,
                order_number=order.order_number,
                previous=previous,
                current=order.status,
                changed_by=actor.user_id,
            )
        )
        if isinstance(published, Failure):
            logger.warning(
                "order %s moved to %s but event not published: %s",
                order.order_number,
                order.status,
                published.failure(),
            )
        logger.info(
            "order %s: %s -> %s by %s",
            order.order_number,
            previous,
            order.status,
            actor.user_id.value,
        )
        return order


def _with_admin_message(message: str | None) -> Change:
    def attach(order: Order, _: Identity, __: datetime) -> Result[Order, StorefrontError]:
        return Success(replace(order, admin_message=message or ""))

    return attach
