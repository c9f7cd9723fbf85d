from __future__ import annotations

from typing import Protocol

from returns.result import Result

from storefront.core.domain.model.cart import Cart
from storefront.core.domain.model.errors import StorefrontError
from storefront.core.domain.model.identity import CustomerId


class CartStorage(Protocol):
    """Where a cart lives between requests (session, cookie, local storage)."""

    def load(self, owner: CustomerId) -> Result[Cart, StorefrontError]:
        """An owner without a stored cart gets an empty one."""
        ...

    def save(self, owner: CustomerId, cart: Cart) -> Result[None, StorefrontError]: ...

    def clear(self, owner: CustomerId) -> Result[None, StorefrontError]: ...
