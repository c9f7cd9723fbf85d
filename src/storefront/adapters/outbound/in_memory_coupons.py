from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict

from returns.result import Failure, Result, Success

from storefront.core.domain.model.errors import CouponNotFound, StorefrontError
from storefront.core.domain.model.order import Coupon
from storefront.core.ports.outbound.coupons import CouponRepository


@dataclass
class InMemoryCouponRepository(CouponRepository):
    coupons: Dict[str, Coupon] = field(default_factory=dict)

    def get(self, code: str) -> Result[Coupon, StorefrontError]:
        coupon = self.coupons.get(code.upper())
        if coupon is None:
            return Failure(CouponNotFound(message="Coupon not found", code=code))
        return Success(coupon)

    def add(self, coupon: Coupon) -> None:
        self.coupons[coupon.code.upper()] = coupon
