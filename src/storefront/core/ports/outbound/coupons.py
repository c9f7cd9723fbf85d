from __future__ import annotations

from typing import Protocol

from returns.result import Result

from storefront.core.domain.model.errors import StorefrontError
from storefront.core.domain.model.order import Coupon


class CouponRepository(Protocol):
    def get(self, code: str) -> Result[Coupon, StorefrontError]: ...
