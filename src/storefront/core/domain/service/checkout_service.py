from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import datetime
from decimal import Decimal
from typing import Callable, Sequence, Tuple

from returns.pipeline import flow
from returns.pointfree import bind, map_
from returns.result import Failure, Result, Success

from storefront.core.domain.model.errors import StorefrontError, ValidationError
from storefront.core.domain.model.identity import Identity
from storefront.core.domain.model.money import Money, now_local
from storefront.core.domain.model.order import (
    Coupon,
    FulfillmentMethod,
    LineItem,
    Order,
    OrderId,
    PaymentInfo,
    PaymentMethod,
    Totals,
)
from storefront.core.domain.service.auth_gate import require_identity
from storefront.core.domain.service.order_numbers import (
    DEFAULT_PREFIX,
    allocate_order_number,
)
from storefront.core.domain.service.pricing import PricingPolicy, compute_totals
from storefront.core.domain.service.validation import (
    GIFT_MESSAGE_MAX,
    NOTES_MAX,
    blank,
    to_decimal,
    validate_length,
    validate_lines,
)
from storefront.core.ports.inbound.checkout import (
    CheckoutCommand,
    CheckoutLine,
    CheckoutReceipt,
    CheckoutUseCase,
    QuoteCommand,
)
from storefront.core.ports.outbound.carts import CartStorage
from storefront.core.ports.outbound.coupons import CouponRepository
from storefront.core.ports.outbound.events import EventPublisher, OrderPlaced
from storefront.core.ports.outbound.orders import OrderRepository

logger = logging.getLogger("storefront.checkout")

CONFIRMATION_MESSAGE = "Order sent for admin approval."


@dataclass(frozen=True)
class CheckoutDeps:
    orders: OrderRepository
    coupons: CouponRepository
    carts: CartStorage
    events: EventPublisher
    pricing: PricingPolicy = PricingPolicy()
    order_prefix: str = DEFAULT_PREFIX
    clock: Callable[[], datetime] = now_local


@dataclass(frozen=True)
class CheckoutContext:
    command: CheckoutCommand
    identity: Identity
    coupon: Coupon | None = None


@dataclass(frozen=True)
class CheckoutService(CheckoutUseCase):
    deps: CheckoutDeps

    def checkout(
        self, command: CheckoutCommand
    ) -> Result[CheckoutReceipt, StorefrontError]:
        # not idempotent: resubmitting the same cart places another order
        return flow(
            command,
            _authenticate,
            bind(self._resolve_lines),
            bind(_validate_command),
            bind(self._resolve_coupon),
            bind(self._build_order),
            bind(self._persist),
            bind(self._publish),
            bind(self._clear_cart),
            map_(_to_receipt),
        )

    def quote(self, command: QuoteCommand) -> Result[Totals, StorefrontError]:
        checked = validate_lines(command.lines)
        if isinstance(checked, Failure):
            return checked

        discount = to_decimal(command.discount)
        if discount is None or discount < 0:
            return Failure(ValidationError("discount must be >= 0"))

        coupon: Result[Coupon | None, StorefrontError] = Success(
            Coupon(code="", discount=Money.of(discount, self.deps.pricing.currency))
            if discount
            else None
        )
        if command.coupon_code is not None:
            coupon = self.deps.coupons.get(command.coupon_code.strip())

        items = _line_items(command.lines, self.deps.pricing.currency)
        return coupon.map(lambda c: compute_totals(items, c, self.deps.pricing))

    # ---- side effects ------------------------------------------------------

    def _resolve_lines(
        self, ctx: CheckoutContext
    ) -> Result[CheckoutContext, StorefrontError]:
        if ctx.command.lines is not None:
            return Success(ctx)
        return self.deps.carts.load(ctx.identity.user_id).map(
            lambda cart: replace(
                ctx,
                command=replace(
                    ctx.command,
                    lines=tuple(
                        CheckoutLine(
                            product_id=ln.product_id,
                            name=ln.name,
                            unit_price=ln.unit_price.amount,
                            quantity=ln.quantity,
                        )
                        for ln in cart.lines
                    ),
                ),
            )
        )

    def _resolve_coupon(
        self, ctx: CheckoutContext
    ) -> Result[CheckoutContext, StorefrontError]:
        code = ctx.command.coupon_code
        if code is None:
            return Success(ctx)
        return self.deps.coupons.get(code.strip()).map(
            lambda coupon: CheckoutContext(ctx.command, ctx.identity, coupon)
        )

    def _build_order(self, ctx: CheckoutContext) -> Result[Order, StorefrontError]:
        cmd = ctx.command
        created_at = self.deps.clock()
        items = _line_items(cmd.lines, self.deps.pricing.currency)
        method = FulfillmentMethod(cmd.method)

        address: str | None = None
        if method is FulfillmentMethod.DELIVERY:
            address = (
                cmd.address.strip()
                if not blank(cmd.address)
                else cmd.shipping_address.one_line()  # type: ignore[union-attr]
            )

        def assemble(order_number: str) -> Order:
            return Order(
                order_id=OrderId.new(),
                order_number=order_number,
                customer_id=ctx.identity.user_id,
                items=items,
                fulfillment_method=method,
                totals=compute_totals(items, ctx.coupon, self.deps.pricing),
                created_at=created_at,
                updated_at=created_at,
                address=address,
                shipping_address=cmd.shipping_address,
                billing_address=cmd.billing_address,
                payment=PaymentInfo(method=PaymentMethod(cmd.payment_method)),
                coupon=ctx.coupon,
                notes=cmd.notes,
                is_gift=cmd.is_gift,
                gift_message=cmd.gift_message if cmd.is_gift else None,
            )

        return allocate_order_number(
            self.deps.orders, created_at, prefix=self.deps.order_prefix
        ).map(assemble)

    def _persist(self, order: Order) -> Result[Order, StorefrontError]:
        return self.deps.orders.save(order).map(lambda _: order)

    def _publish(self, order: Order) -> Result[Order, StorefrontError]:
        published = self.deps.events.publish(
            OrderPlaced(order.order_id, order.order_number, order.customer_id)
        )
        if isinstance(published, Failure):
            # order already stored; event delivery is best-effort
            logger.warning(
                "order %s placed but event not published: %s",
                order.order_number,
                published.failure(),
            )
        logger.info(
            "order %s placed by %s total=%s",
            order.order_number,
            order.customer_id.value,
            order.totals.total_price,
        )
        return Success(order)

    def _clear_cart(self, order: Order) -> Result[Order, StorefrontError]:
        cleared = self.deps.carts.clear(order.customer_id)
        if isinstance(cleared, Failure):
            logger.warning(
                "order %s placed but cart not cleared: %s",
                order.order_number,
                cleared.failure(),
            )
        return Success(order)


# ---- pure helpers ----------------------------------------------------------


def _authenticate(cmd: CheckoutCommand) -> Result[CheckoutContext, StorefrontError]:
    return require_identity(cmd.identity).map(
        lambda identity: CheckoutContext(command=cmd, identity=identity)
    )


def _validate_command(
    ctx: CheckoutContext,
) -> Result[CheckoutContext, StorefrontError]:
    cmd = ctx.command
    if cmd.method not in {m.value for m in FulfillmentMethod}:
        return Failure(ValidationError("Checkout method must be pickup or delivery"))
    if not cmd.lines:
        return Failure(ValidationError("Cart is empty"))
    if (
        cmd.method == FulfillmentMethod.DELIVERY
        and blank(cmd.address)
        and cmd.shipping_address is None
    ):
        return Failure(
            ValidationError("Delivery address required for delivery method")
        )
    if cmd.payment_method not in {m.value for m in PaymentMethod}:
        return Failure(
            ValidationError(
                "Payment method must be one of: stripe, paypal, cash_on_delivery"
            )
        )
    if cmd.coupon_code is not None and blank(cmd.coupon_code):
        return Failure(ValidationError("coupon_code must be non-empty when provided"))

    return (
        validate_lines(cmd.lines)
        .bind(lambda _: validate_length(cmd.notes, "Notes", NOTES_MAX))
        .bind(lambda _: validate_length(cmd.gift_message, "Gift message", GIFT_MESSAGE_MAX))
        .map(lambda _: ctx)
    )


def _line_items(
    lines: Sequence[CheckoutLine], currency: str
) -> Tuple[LineItem, ...]:
    return tuple(
        LineItem(
            product_id=ln.product_id.strip(),
            name=ln.name,
            unit_price=Money.of(Decimal(str(ln.unit_price)), currency),
            quantity=ln.quantity,
        )
        for ln in lines
    )


def _to_receipt(order: Order) -> CheckoutReceipt:
    return CheckoutReceipt(
        order_id=order.order_id,
        order_number=order.order_number,
        customer_id=order.customer_id,
        status=order.status,
        totals=order.totals,
        message=CONFIRMATION_MESSAGE,
    )
