from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Mapping, Protocol, Sequence

from returns.result import Result

from storefront.core.domain.model.errors import StorefrontError
from storefront.core.domain.model.identity import Identity
from storefront.core.domain.model.product import Product


@dataclass(frozen=True)
class ListProductsQuery:
    page: int = 1
    limit: int = 12
    category: str | None = None
    brand: str | None = None
    min_price: Decimal | None = None
    max_price: Decimal | None = None
    search: str | None = None
    sort: str | None = None  # [-]price | [-]name | [-]createdAt | [-]rating


@dataclass(frozen=True)
class SearchProductsQuery:
    text: str
    page: int = 1
    limit: int = 12


@dataclass(frozen=True)
class ProductPage:
    items: Sequence[Product]
    total: int
    page: int
    limit: int

    @property
    def total_pages(self) -> int:
        return -(-self.total // self.limit) if self.limit else 0

    @property
    def has_next_page(self) -> bool:
        return self.page < self.total_pages

    @property
    def has_prev_page(self) -> bool:
        return self.page > 1


@dataclass(frozen=True)
class CreateProductCommand:
    identity: Identity | None
    name: str
    description: str
    category: str
    brand: str
    sku: str
    price: Decimal
    stock: int
    is_featured: bool = False


@dataclass(frozen=True)
class UpdateProductCommand:
    identity: Identity | None
    product_id: str
    name: str | None = None
    description: str | None = None
    category: str | None = None
    brand: str | None = None
    price: Decimal | None = None
    stock: int | None = None
    is_featured: bool | None = None


@dataclass(frozen=True)
class AddReviewCommand:
    identity: Identity | None
    product_id: str
    rating: int
    comment: str


@dataclass(frozen=True)
class CatalogStats:
    total_products: int
    active_products: int
    featured_products: int
    average_price: Decimal
    total_stock: int
    categories: Mapping[str, int]


class CatalogUseCase(Protocol):
    def list_products(
        self, query: ListProductsQuery
    ) -> Result[ProductPage, StorefrontError]: ...

    def get_product(self, product_id: str) -> Result[Product, StorefrontError]: ...

    def search(
        self, query: SearchProductsQuery
    ) -> Result[Sequence[Product], StorefrontError]: ...

    def featured(self, limit: int = 8) -> Result[Sequence[Product], StorefrontError]: ...

    def create_product(
        self, command: CreateProductCommand
    ) -> Result[Product, StorefrontError]: ...

    def update_product(
        self, command: UpdateProductCommand
    ) -> Result[Product, StorefrontError]: ...

    def deactivate_product(
        self, identity: Identity | None, product_id: str
    ) -> Result[Product, StorefrontError]: ...

    def add_review(self, command: AddReviewCommand) -> Result[Product, StorefrontError]: ...

    def stats(self, identity: Identity | None) -> Result[CatalogStats, StorefrontError]: ...
