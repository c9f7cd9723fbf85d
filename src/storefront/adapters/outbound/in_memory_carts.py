from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict

from returns.result import Result, Success

from storefront.core.domain.model.cart import Cart
from storefront.core.domain.model.errors import StorefrontError
from storefront.core.domain.model.identity import CustomerId
from storefront.core.ports.outbound.carts import CartStorage


@dataclass
class InMemoryCartStorage(CartStorage):
    """Server-side session store keyed by the owning identity."""

    _carts: Dict[str, Cart] = field(default_factory=dict)

    def load(self, owner: CustomerId) -> Result[Cart, StorefrontError]:
        return Success(self._carts.get(owner.value, Cart()))

    def save(self, owner: CustomerId, cart: Cart) -> Result[None, StorefrontError]:
        if cart.is_empty:
            self._carts.pop(owner.value, None)
        else:
            self._carts[owner.value] = cart
        return Success(None)

    def clear(self, owner: CustomerId) -> Result[None, StorefrontError]:
        self._carts.pop(owner.value, None)
        return Success(None)
