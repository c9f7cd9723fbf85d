from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Protocol

from returns.result import Result

from storefront.core.domain.model.errors import StorefrontError
from storefront.core.domain.model.identity import Identity
from storefront.core.domain.model.order import Order


@dataclass(frozen=True)
class OrderActionCommand:
    identity: Identity | None
    order_id: str  # UUID string
    message: str | None = None


@dataclass(frozen=True)
class ShipOrderCommand:
    identity: Identity | None
    order_id: str
    tracking_number: str
    carrier: str
    estimated_delivery: datetime | None = None


@dataclass(frozen=True)
class RefundOrderCommand:
    identity: Identity | None
    order_id: str
    amount: Decimal
    reason: str


@dataclass(frozen=True)
class StatusUpdateCommand:
    identity: Identity | None
    order_id: str
    status: str
    message: str | None = None
    tracking_number: str | None = None
    carrier: str | None = None
    estimated_delivery: datetime | None = None
    amount: Decimal | None = None
    reason: str | None = None


class OrderLifecycleUseCase(Protocol):
    def confirm(self, command: OrderActionCommand) -> Result[Order, StorefrontError]: ...

    def reject(self, command: OrderActionCommand) -> Result[Order, StorefrontError]: ...

    def mark_processing(
        self, command: OrderActionCommand
    ) -> Result[Order, StorefrontError]: ...

    def mark_shipped(self, command: ShipOrderCommand) -> Result[Order, StorefrontError]: ...

    def mark_delivered(
        self, command: OrderActionCommand
    ) -> Result[Order, StorefrontError]: ...

    def cancel(self, command: OrderActionCommand) -> Result[Order, StorefrontError]: ...

    def refund(self, command: RefundOrderCommand) -> Result[Order, StorefrontError]: ...

    def update_status(
        self, command: StatusUpdateCommand
    ) -> Result[Order, StorefrontError]: ...
