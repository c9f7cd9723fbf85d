from __future__ import annotations

import logging
from dataclasses import dataclass, field

from returns.result import Failure, Result, Success

from storefront.core.domain.model.errors import PublishError, StorefrontError
from storefront.core.ports.outbound.events import (
    EventPublisher,
    OrderEvent,
    OrderPlaced,
    OrderStatusChanged,
)


@dataclass
class LoggingEventPublisher(EventPublisher):
    fail: bool = False
    logger: logging.Logger = field(
        default_factory=lambda: logging.getLogger("storefront.events")
    )

    def publish(self, event: OrderEvent) -> Result[None, StorefrontError]:
        if self.fail:
            return Failure(PublishError(message="publisher is down"))
        if isinstance(event, OrderPlaced):
            self.logger.info(
                "[event] order_placed: %s %s customer=%s",
                event.order_id.value,
                event.order_number,
                event.customer_id.value,
            )
        elif isinstance(event, OrderStatusChanged):
            self.logger.info(
                "[event] order_status_changed: %s %s %s -> %s by=%s",
                event.order_id.value,
                event.order_number,
                event.previous,
                event.current,
                event.changed_by.value,
            )
        return Success(None)
