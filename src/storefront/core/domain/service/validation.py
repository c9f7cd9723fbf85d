from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Sequence
from uuid import UUID

from returns.result import Failure, Result, Success

from storefront.core.domain.model.errors import (
    OrderNotFound,
    StorefrontError,
    ValidationError,
)
from storefront.core.domain.model.order import OrderId
from storefront.core.ports.inbound.checkout import CheckoutLine

NOTES_MAX = 500
GIFT_MESSAGE_MAX = 200


def parse_order_id(raw: str) -> Result[OrderId, StorefrontError]:
    try:
        return Success(OrderId(UUID(raw)))
    except (AttributeError, TypeError, ValueError):
        return Failure(OrderNotFound(message="Order not found", order_id=str(raw)))


def validate_page(
    page: int, limit: int, max_limit: int
) -> Result[tuple[int, int], StorefrontError]:
    if page < 1:
        return Failure(ValidationError("Page must be a positive integer"))
    if limit < 1 or limit > max_limit:
        return Failure(ValidationError(f"Limit must be between 1 and {max_limit}"))
    return Success((page, limit))


def validate_lines(
    lines: Sequence[CheckoutLine],
) -> Result[Sequence[CheckoutLine], StorefrontError]:
    if not lines:
        return Failure(ValidationError("Cart is empty"))
    for i, ln in enumerate(lines):
        if not ln.product_id.strip():
            return Failure(ValidationError(f"cart[{i}].id is required"))
        if not ln.name.strip():
            return Failure(ValidationError(f"cart[{i}].name is required"))
        if ln.quantity < 1:
            return Failure(ValidationError(f"cart[{i}].quantity must be >= 1"))
        price = to_decimal(ln.unit_price)
        if price is None or price < 0:
            return Failure(ValidationError(f"cart[{i}].price must be >= 0"))
    return Success(lines)


def validate_length(
    value: str | None, field: str, limit: int
) -> Result[str | None, StorefrontError]:
    if value is not None and len(value) > limit:
        return Failure(ValidationError(f"{field} cannot exceed {limit} characters"))
    return Success(value)


def to_decimal(value: object) -> Decimal | None:
    try:
        dec = Decimal(str(value))
    except InvalidOperation:
        return None
    return dec if dec.is_finite() else None


def blank(value: str | None) -> bool:
    return value is None or not value.strip()
