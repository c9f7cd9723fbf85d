from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Protocol, Sequence

from returns.result import Result

from storefront.core.domain.model.errors import StorefrontError
from storefront.core.domain.model.product import Category, Product, ProductId


@dataclass(frozen=True)
class ProductFilter:
    category: Category | None = None
    brand: str | None = None
    min_price: Decimal | None = None
    max_price: Decimal | None = None
    search: str | None = None
    featured_only: bool = False


@dataclass(frozen=True)
class ProductSort:
    key: str = "created_at"  # price | name | created_at | rating
    descending: bool = True


class ProductRepository(Protocol):
    def save(self, product: Product) -> Result[ProductId, StorefrontError]: ...

    def get(self, product_id: ProductId) -> Result[Product, StorefrontError]: ...

    def update(self, product: Product) -> Result[Product, StorefrontError]: ...

    def find_by_sku(self, sku: str) -> Result[Product | None, StorefrontError]: ...

    def query(
        self, flt: ProductFilter, sort: ProductSort, offset: int, limit: int
    ) -> Result[tuple[Sequence[Product], int], StorefrontError]:
        """Active products only; returns (page, total matching)."""
        ...

    def search(
        self, text: str, offset: int, limit: int
    ) -> Result[Sequence[Product], StorefrontError]:
        """Active products ranked by relevance, best first."""
        ...

    def all(self) -> Result[Sequence[Product], StorefrontError]: ...
