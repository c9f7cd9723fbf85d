from __future__ import annotations

from datetime import datetime

from returns.result import Result

from storefront.core.domain.model.errors import StorefrontError
from storefront.core.ports.outbound.orders import OrderRepository

DEFAULT_PREFIX = "GOPG"


def start_of_day(ts: datetime) -> datetime:
    return ts.replace(hour=0, minute=0, second=0, microsecond=0)


def format_order_number(prefix: str, created_at: datetime, sequence: int) -> str:
    return f"{prefix}{created_at:%y%m%d}{sequence:04d}"


def allocate_order_number(
    orders: OrderRepository, created_at: datetime, prefix: str = DEFAULT_PREFIX
) -> Result[str, StorefrontError]:
    """
    Sequence = orders created since local midnight + 1. Count-then-increment
    is not atomic; the repository rejects a duplicate number on save.
    """
    return orders.count_created_since(start_of_day(created_at)).map(
        lambda count: format_order_number(prefix, created_at, count + 1)
    )
