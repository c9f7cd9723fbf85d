from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Sequence

from returns.result import Failure, Result, Success

from storefront.core.domain.model.errors import (
    PersistenceError,
    ProductNotFound,
    StorefrontError,
)
from storefront.core.domain.model.product import Product, ProductId
from storefront.core.ports.outbound.products import (
    ProductFilter,
    ProductRepository,
    ProductSort,
)

# relevance weights per field
NAME_WEIGHT = 3
BRAND_WEIGHT = 2
DESCRIPTION_WEIGHT = 1


@dataclass
class InMemoryProductRepository(ProductRepository):
    _store: Dict[str, Product] = field(default_factory=dict)

    def save(self, product: Product) -> Result[ProductId, StorefrontError]:
        key = product.product_id.value
        if key in self._store:
            return Failure(PersistenceError(message="product_id already exists"))
        if any(p.sku == product.sku for p in self._store.values()):
            return Failure(PersistenceError(message=f"sku {product.sku} already exists"))
        self._store[key] = product
        return Success(product.product_id)

    def get(self, product_id: ProductId) -> Result[Product, StorefrontError]:
        product = self._store.get(product_id.value)
        if product is None:
            return Failure(
                ProductNotFound(message="Product not found", product_id=product_id.value)
            )
        return Success(product)

    def update(self, product: Product) -> Result[Product, StorefrontError]:
        key = product.product_id.value
        if key not in self._store:
            return Failure(
                ProductNotFound(message="Product not found", product_id=key)
            )
        self._store[key] = product
        return Success(product)

    def find_by_sku(self, sku: str) -> Result[Product | None, StorefrontError]:
        for p in self._store.values():
            if p.sku == sku:
                return Success(p)
        return Success(None)

    def query(
        self, flt: ProductFilter, sort: ProductSort, offset: int, limit: int
    ) -> Result[tuple[Sequence[Product], int], StorefrontError]:
        products = [p for p in self._store.values() if p.is_active and _matches(p, flt)]
        products = sorted(products, key=_sort_key(sort.key), reverse=sort.descending)
        return Success((tuple(products[offset : offset + limit]), len(products)))

    def search(
        self, text: str, offset: int, limit: int
    ) -> Result[Sequence[Product], StorefrontError]:
        terms = _terms(text)
        scored = [(relevance(p, terms), p) for p in self._store.values() if p.is_active]
        ranked = sorted(
            ((score, p) for score, p in scored if score > 0),
            key=lambda pair: (pair[0], pair[1].created_at),
            reverse=True,
        )
        return Success(tuple(p for _, p in ranked[offset : offset + limit]))

    def all(self) -> Result[Sequence[Product], StorefrontError]:
        return Success(tuple(self._store.values()))


def relevance(product: Product, terms: Sequence[str]) -> int:
    name = product.name.lower()
    brand = product.brand.lower()
    description = product.description.lower()
    score = 0
    for term in terms:
        score += NAME_WEIGHT * name.count(term)
        score += BRAND_WEIGHT * brand.count(term)
        score += DESCRIPTION_WEIGHT * description.count(term)
    return score


def _terms(text: str) -> list[str]:
    return [t for t in text.lower().split() if t]


def _matches(p: Product, flt: ProductFilter) -> bool:
    if flt.featured_only and not p.is_featured:
        return False
    if flt.category is not None and p.category is not flt.category:
        return False
    if flt.brand is not None and flt.brand.lower() not in p.brand.lower():
        return False
    if flt.min_price is not None and p.price.amount < flt.min_price:
        return False
    if flt.max_price is not None and p.price.amount > flt.max_price:
        return False
    if flt.search is not None and relevance(p, _terms(flt.search)) == 0:
        return False
    return True


def _sort_key(key: str) -> Callable[[Product], Any]:
    if key == "price":
        return lambda p: p.price.amount
    if key == "name":
        return lambda p: p.name.lower()
    if key == "rating":
        return lambda p: p.ratings.average
    return lambda p: p.created_at
