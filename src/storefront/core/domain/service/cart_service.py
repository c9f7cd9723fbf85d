from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from returns.result import Failure, Result, Success

from storefront.core.domain.model.cart import Cart
from storefront.core.domain.model.errors import (
    ProductNotFound,
    StorefrontError,
    ValidationError,
)
from storefront.core.domain.model.identity import Identity
from storefront.core.domain.model.product import Product, ProductId
from storefront.core.domain.service.auth_gate import require_identity
from storefront.core.ports.inbound.cart import (
    AddToCartCommand,
    CartUseCase,
    ChangeQuantityCommand,
)
from storefront.core.ports.outbound.carts import CartStorage
from storefront.core.ports.outbound.products import ProductRepository


@dataclass(frozen=True)
class CartDeps:
    carts: CartStorage
    products: ProductRepository


@dataclass(frozen=True)
class CartService(CartUseCase):
    deps: CartDeps

    def view(self, identity: Identity | None) -> Result[Cart, StorefrontError]:
        return require_identity(identity).bind(
            lambda ident: self.deps.carts.load(ident.user_id)
        )

    def add(self, command: AddToCartCommand) -> Result[Cart, StorefrontError]:
        if command.quantity < 1:
            return Failure(ValidationError("quantity must be >= 1"))

        def snapshot(product: Product) -> Callable[[Cart], Cart]:
            return lambda cart: cart.add(
                product.product_id.value,
                product.name,
                product.price,
                command.quantity,
            )

        return (
            require_identity(command.identity)
            .bind(lambda _: self.deps.products.get(ProductId(command.product_id)))
            .bind(_active)
            .bind(lambda product: self._mutate(command.identity, snapshot(product)))
        )

    def change_quantity(
        self, command: ChangeQuantityCommand
    ) -> Result[Cart, StorefrontError]:
        return self._mutate(
            command.identity,
            lambda cart: cart.set_quantity(command.product_id, command.delta),
        )

    def remove(
        self, identity: Identity | None, product_id: str
    ) -> Result[Cart, StorefrontError]:
        return self._mutate(identity, lambda cart: cart.remove(product_id))

    def clear(self, identity: Identity | None) -> Result[Cart, StorefrontError]:
        return require_identity(identity).bind(
            lambda ident: self.deps.carts.clear(ident.user_id).map(lambda _: Cart())
        )

    def _mutate(
        self, identity: Identity | None, change: Callable[[Cart], Cart]
    ) -> Result[Cart, StorefrontError]:
        authenticated = require_identity(identity)
        if isinstance(authenticated, Failure):
            return authenticated
        owner = authenticated.unwrap().user_id

        def store(cart: Cart) -> Result[Cart, StorefrontError]:
            updated = change(cart)
            return self.deps.carts.save(owner, updated).map(lambda _: updated)

        return self.deps.carts.load(owner).bind(store)


def _active(product: Product) -> Result[Product, StorefrontError]:
    if not product.is_active:
        return Failure(
            ProductNotFound("Product not found", product_id=product.product_id.value)
        )
    return Success(product)
