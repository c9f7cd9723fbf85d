from __future__ import annotations

from dataclasses import dataclass


@dataclass(eq=False)
class StorefrontError(Exception):
    message: str

    def __str__(self) -> str:
        return self.message


@dataclass(eq=False)
class ValidationError(StorefrontError):
    pass


@dataclass(eq=False)
class InvalidStatusTransition(ValidationError):
    current: str
    target: str

    def __str__(self) -> str:
        return f"invalid_transition: {self.current} -> {self.target} ({self.message})"


@dataclass(eq=False)
class AuthError(StorefrontError):
    pass


@dataclass(eq=False)
class AuthorizationError(StorefrontError):
    pass


@dataclass(eq=False)
class NotFoundError(StorefrontError):
    pass


@dataclass(eq=False)
class OrderNotFound(NotFoundError):
    order_id: str

    def __str__(self) -> str:
        return f"order_not_found: {self.order_id} ({self.message})"


@dataclass(eq=False)
class ProductNotFound(NotFoundError):
    product_id: str

    def __str__(self) -> str:
        return f"product_not_found: {self.product_id} ({self.message})"


@dataclass(eq=False)
class CouponNotFound(NotFoundError):
    code: str

    def __str__(self) -> str:
        return f"coupon_not_found: {self.code} ({self.message})"


@dataclass(eq=False)
class PersistenceError(StorefrontError):
    pass


@dataclass(eq=False)
class PublishError(PersistenceError):
    pass
