from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, replace
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Callable, Sequence

from returns.result import Failure, Result, Success

from storefront.core.domain.model.errors import (
    ProductNotFound,
    StorefrontError,
    ValidationError,
)
from storefront.core.domain.model.identity import Identity
from storefront.core.domain.model.money import DEFAULT_CURRENCY, Money, now_utc
from storefront.core.domain.model.product import (
    Category,
    Product,
    ProductId,
    Review,
)
from storefront.core.domain.service.auth_gate import require_admin, require_identity
from storefront.core.domain.service.validation import blank, to_decimal, validate_page
from storefront.core.ports.inbound.catalog import (
    AddReviewCommand,
    CatalogStats,
    CatalogUseCase,
    CreateProductCommand,
    ListProductsQuery,
    ProductPage,
    SearchProductsQuery,
    UpdateProductCommand,
)
from storefront.core.ports.outbound.products import (
    ProductFilter,
    ProductRepository,
    ProductSort,
)

logger = logging.getLogger("storefront.catalog")

SORT_KEYS = {
    "price": "price",
    "name": "name",
    "createdAt": "created_at",
    "rating": "rating",
}


@dataclass(frozen=True)
class CatalogDeps:
    products: ProductRepository
    max_page_size: int = 50
    currency: str = DEFAULT_CURRENCY
    clock: Callable[[], datetime] = now_utc


@dataclass(frozen=True)
class CatalogService(CatalogUseCase):
    deps: CatalogDeps

    # ---- reads -------------------------------------------------------------

    def list_products(
        self, query: ListProductsQuery
    ) -> Result[ProductPage, StorefrontError]:
        checked = validate_page(query.page, query.limit, self.deps.max_page_size)
        if isinstance(checked, Failure):
            return checked

        flt = _to_filter(query)
        if isinstance(flt, Failure):
            return flt
        sort = parse_sort(query.sort)
        if isinstance(sort, Failure):
            return sort

        offset = (query.page - 1) * query.limit
        return self.deps.products.query(
            flt.unwrap(), sort.unwrap(), offset, query.limit
        ).map(
            lambda found: ProductPage(
                items=tuple(found[0]), total=found[1], page=query.page, limit=query.limit
            )
        )

    def get_product(self, product_id: str) -> Result[Product, StorefrontError]:
        return self.deps.products.get(ProductId(product_id))

    def search(
        self, query: SearchProductsQuery
    ) -> Result[Sequence[Product], StorefrontError]:
        if blank(query.text):
            return Failure(ValidationError("Search query is required"))
        checked = validate_page(query.page, query.limit, self.deps.max_page_size)
        if isinstance(checked, Failure):
            return checked
        offset = (query.page - 1) * query.limit
        return self.deps.products.search(query.text.strip(), offset, query.limit)

    def featured(self, limit: int = 8) -> Result[Sequence[Product], StorefrontError]:
        checked = validate_page(1, limit, self.deps.max_page_size)
        if isinstance(checked, Failure):
            return checked
        return self.deps.products.query(
            ProductFilter(featured_only=True), ProductSort(), 0, limit
        ).map(lambda found: tuple(found[0]))

    def stats(self, identity: Identity | None) -> Result[CatalogStats, StorefrontError]:
        return (
            require_admin(identity)
            .bind(lambda _: self.deps.products.all())
            .map(_summarize)
        )

    # ---- admin mutations ---------------------------------------------------

    def create_product(
        self, command: CreateProductCommand
    ) -> Result[Product, StorefrontError]:
        admin = require_admin(command.identity)
        if isinstance(admin, Failure):
            return admin

        checked = _validate_fields(
            name=command.name,
            description=command.description,
            category=command.category,
            price=command.price,
            stock=command.stock,
        )
        if isinstance(checked, Failure):
            return checked
        if blank(command.brand):
            return Failure(ValidationError("Brand is required"))
        if blank(command.sku):
            return Failure(ValidationError("SKU is required"))

        existing = self.deps.products.find_by_sku(command.sku.strip())
        if isinstance(existing, Failure):
            return existing
        if existing.unwrap() is not None:
            return Failure(ValidationError("Product with this SKU already exists"))

        product = Product(
            product_id=ProductId.new(),
            name=command.name.strip(),
            description=command.description.strip(),
            category=Category(command.category),
            brand=command.brand.strip(),
            sku=command.sku.strip(),
            price=Money.of(command.price, self.deps.currency),
            stock=command.stock,
            created_at=self.deps.clock(),
            is_featured=command.is_featured,
        )
        logger.info("product %s (%s) created", product.product_id.value, product.sku)
        return self.deps.products.save(product).map(lambda _: product)

    def update_product(
        self, command: UpdateProductCommand
    ) -> Result[Product, StorefrontError]:
        admin = require_admin(command.identity)
        if isinstance(admin, Failure):
            return admin

        checked = _validate_fields(
            name=command.name,
            description=command.description,
            category=command.category,
            price=command.price,
            stock=command.stock,
        )
        if isinstance(checked, Failure):
            return checked
        if command.brand is not None and blank(command.brand):
            return Failure(ValidationError("Brand is required"))

        def apply(product: Product) -> Product:
            changes: dict[str, object] = {}
            if command.name is not None:
                changes["name"] = command.name.strip()
            if command.description is not None:
                changes["description"] = command.description.strip()
            if command.category is not None:
                changes["category"] = Category(command.category)
            if command.brand is not None:
                changes["brand"] = command.brand.strip()
            if command.price is not None:
                changes["price"] = Money.of(command.price, self.deps.currency)
            if command.stock is not None:
                changes["stock"] = command.stock
            if command.is_featured is not None:
                changes["is_featured"] = command.is_featured
            return replace(product, **changes)

        return (
            self.deps.products.get(ProductId(command.product_id))
            .map(apply)
            .bind(self.deps.products.update)
        )

    def deactivate_product(
        self, identity: Identity | None, product_id: str
    ) -> Result[Product, StorefrontError]:
        # soft delete: the product stays addressable by id, but is never listed
        return (
            require_admin(identity)
            .bind(lambda _: self.deps.products.get(ProductId(product_id)))
            .map(lambda product: replace(product, is_active=False))
            .bind(self.deps.products.update)
        )

    def add_review(self, command: AddReviewCommand) -> Result[Product, StorefrontError]:
        authenticated = require_identity(command.identity)
        if isinstance(authenticated, Failure):
            return authenticated
        reviewer = authenticated.unwrap()

        if not 1 <= command.rating <= 5:
            return Failure(ValidationError("Rating must be between 1 and 5"))
        comment = (command.comment or "").strip()
        if not 10 <= len(comment) <= 500:
            return Failure(
                ValidationError("Comment must be between 10 and 500 characters")
            )

        def review(product: Product) -> Result[Product, StorefrontError]:
            if not product.is_active:
                return Failure(
                    ProductNotFound("Product not found", product_id=command.product_id)
                )
            if product.has_review_by(reviewer.user_id):
                return Failure(
                    ValidationError("You have already reviewed this product")
                )
            return Success(
                product.with_review(
                    Review(reviewer.user_id, command.rating, comment, self.deps.clock())
                )
            )

        return (
            self.deps.products.get(ProductId(command.product_id))
            .bind(review)
            .bind(self.deps.products.update)
        )


# ---- pure helpers ----------------------------------------------------------


def parse_sort(raw: str | None) -> Result[ProductSort, StorefrontError]:
    if raw is None or not raw.strip():
        return Success(ProductSort())
    raw = raw.strip()
    descending = raw.startswith("-")
    key = SORT_KEYS.get(raw.lstrip("-"))
    if key is None:
        allowed = ", ".join(f"{k}, -{k}" for k in SORT_KEYS)
        return Failure(ValidationError(f"sort must be one of: {allowed}"))
    return Success(ProductSort(key=key, descending=descending))


def _to_filter(query: ListProductsQuery) -> Result[ProductFilter, StorefrontError]:
    category: Category | None = None
    if query.category is not None:
        try:
            category = Category(query.category)
        except ValueError:
            return Failure(ValidationError(f"Invalid category: {query.category}"))
    for bound in (query.min_price, query.max_price):
        if bound is not None and bound < 0:
            return Failure(ValidationError("price bounds must be >= 0"))
    return Success(
        ProductFilter(
            category=category,
            brand=query.brand.strip() if not blank(query.brand) else None,
            min_price=query.min_price,
            max_price=query.max_price,
            search=query.search.strip() if not blank(query.search) else None,
        )
    )


def _validate_fields(
    name: str | None,
    description: str | None,
    category: str | None,
    price: Decimal | None,
    stock: int | None,
) -> Result[None, StorefrontError]:
    if name is not None and not 3 <= len(name.strip()) <= 100:
        return Failure(
            ValidationError("Product name must be between 3 and 100 characters")
        )
    if description is not None and not 10 <= len(description.strip()) <= 2000:
        return Failure(
            ValidationError("Description must be between 10 and 2000 characters")
        )
    if category is not None and category not in {c.value for c in Category}:
        return Failure(ValidationError("Invalid category"))
    if price is not None:
        dec = to_decimal(price)
        if dec is None or dec < 0:
            return Failure(ValidationError("Price must be a positive number"))
    if stock is not None and stock < 0:
        return Failure(ValidationError("Stock must be a non-negative integer"))
    return Success(None)


def _summarize(products: Sequence[Product]) -> CatalogStats:
    prices = [p.price.amount for p in products]
    average = (
        (sum(prices, Decimal("0")) / Decimal(len(prices))).quantize(
            Decimal("0.01"), rounding=ROUND_HALF_UP
        )
        if prices
        else Decimal("0.00")
    )
    categories = Counter(p.category.value for p in products)
    return CatalogStats(
        total_products=len(products),
        active_products=sum(1 for p in products if p.is_active),
        featured_products=sum(1 for p in products if p.is_featured),
        average_price=average,
        total_stock=sum(p.stock for p in products),
        categories=dict(categories.most_common()),
    )
