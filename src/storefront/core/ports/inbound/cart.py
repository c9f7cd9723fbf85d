from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from returns.result import Result

from storefront.core.domain.model.cart import Cart
from storefront.core.domain.model.errors import StorefrontError
from storefront.core.domain.model.identity import Identity


@dataclass(frozen=True)
class AddToCartCommand:
    identity: Identity | None
    product_id: str
    quantity: int = 1


@dataclass(frozen=True)
class ChangeQuantityCommand:
    identity: Identity | None
    product_id: str
    delta: int


class CartUseCase(Protocol):
    def view(self, identity: Identity | None) -> Result[Cart, StorefrontError]: ...

    def add(self, command: AddToCartCommand) -> Result[Cart, StorefrontError]: ...

    def change_quantity(
        self, command: ChangeQuantityCommand
    ) -> Result[Cart, StorefrontError]: ...

    def remove(
        self, identity: Identity | None, product_id: str
    ) -> Result[Cart, StorefrontError]: ...

    def clear(self, identity: Identity | None) -> Result[Cart, StorefrontError]: ...
