from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from enum import StrEnum
from typing import Tuple
from uuid import uuid4

from storefront.core.domain.model.identity import CustomerId
from storefront.core.domain.model.money import Money

LOW_STOCK_THRESHOLD = 5


class Category(StrEnum):
    PHONES = "phones"
    TABLETS = "tablets"
    ACCESSORIES = "accessories"
    LAPTOPS = "laptops"
    SMARTWATCHES = "smartwatches"
    OTHER = "other"


@dataclass(frozen=True)
class ProductId:
    value: str

    @staticmethod
    def new() -> "ProductId":
        return ProductId(uuid4().hex)


@dataclass(frozen=True)
class Review:
    user_id: CustomerId
    rating: int
    comment: str
    created_at: datetime


@dataclass(frozen=True)
class Ratings:
    average: Decimal = Decimal("0")
    count: int = 0


@dataclass(frozen=True)
class Product:
    product_id: ProductId
    name: str
    description: str
    category: Category
    brand: str
    sku: str
    price: Money
    stock: int
    created_at: datetime
    is_active: bool = True
    is_featured: bool = False
    reviews: Tuple[Review, ...] = field(default_factory=tuple)
    ratings: Ratings = field(default_factory=Ratings)

    @property
    def stock_status(self) -> str:
        if self.stock == 0:
            return "out-of-stock"
        if self.stock <= LOW_STOCK_THRESHOLD:
            return "low-stock"
        return "in-stock"

    def with_review(self, review: Review) -> "Product":
        reviews = self.reviews + (review,)
        return replace(self, reviews=reviews, ratings=average_rating(reviews))

    def has_review_by(self, user_id: CustomerId) -> bool:
        return any(r.user_id.value == user_id.value for r in self.reviews)


def average_rating(reviews: Tuple[Review, ...]) -> Ratings:
    if not reviews:
        return Ratings()
    avg = Decimal(sum(r.rating for r in reviews)) / Decimal(len(reviews))
    return Ratings(
        average=avg.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP),
        count=len(reviews),
    )
