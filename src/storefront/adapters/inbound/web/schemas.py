from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from storefront.core.domain.model.cart import Cart
from storefront.core.domain.model.order import Address, Order
from storefront.core.domain.model.product import Product
from storefront.core.ports.inbound.catalog import CatalogStats, ProductPage
from storefront.core.ports.inbound.checkout import CheckoutLine
from storefront.core.ports.inbound.list_orders import OrderPage, OrderStats


class ApiModel(BaseModel):
    """camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---- requests ---------------------------------------------------------------


class CartLineIn(ApiModel):
    id: str | int = Field(examples=["1"])
    name: str = Field(examples=["Premium Smartphone"])
    price: Decimal = Field(examples=["999.00"])
    quantity: int = Field(examples=[1])

    def to_line(self) -> CheckoutLine:
        return CheckoutLine(
            product_id=str(self.id),
            name=self.name,
            unit_price=self.price,
            quantity=self.quantity,
        )


class AddressIn(ApiModel):
    first_name: str = Field(min_length=1)
    last_name: str = Field(min_length=1)
    street: str = Field(min_length=1)
    city: str = Field(min_length=1)
    state: str = Field(min_length=1)
    zip_code: str = Field(min_length=1)
    email: str = ""
    phone: str = ""
    country: str = "USA"

    def to_domain(self) -> Address:
        return Address(**self.model_dump())


class CheckoutRequest(ApiModel):
    method: str = Field(examples=["delivery"])
    address: str | None = Field(None, examples=["12 Market Street, Accra"])
    cart: list[CartLineIn] | None = None
    shipping_address: AddressIn | None = None
    billing_address: AddressIn | None = None
    payment_method: str = "cash_on_delivery"
    coupon_code: str | None = None
    notes: str | None = None
    is_gift: bool = False
    gift_message: str | None = None


class AdminMessageIn(ApiModel):
    message: str | None = None


class ShipOrderIn(ApiModel):
    tracking_number: str = ""
    carrier: str = ""
    estimated_delivery: datetime | None = None


class RefundOrderIn(ApiModel):
    amount: Decimal
    reason: str = ""


class StatusUpdateIn(ApiModel):
    status: str
    message: str | None = None
    tracking_number: str | None = None
    carrier: str | None = None
    estimated_delivery: datetime | None = None
    amount: Decimal | None = None
    reason: str | None = None


class ProductIn(ApiModel):
    name: str
    description: str
    category: str
    brand: str
    sku: str
    price: Decimal
    stock: int
    is_featured: bool = False


class ProductPatchIn(ApiModel):
    name: str | None = None
    description: str | None = None
    category: str | None = None
    brand: str | None = None
    price: Decimal | None = None
    stock: int | None = None
    is_featured: bool | None = None


class ReviewIn(ApiModel):
    rating: int
    comment: str


class AddToCartIn(ApiModel):
    product_id: str | int
    quantity: int = 1


class ChangeQuantityIn(ApiModel):
    delta: int


# ---- responses --------------------------------------------------------------


class LineItemOut(ApiModel):
    id: str
    name: str
    price: str
    quantity: int
    subtotal: str


class AddressOut(ApiModel):
    first_name: str
    last_name: str
    street: str
    city: str
    state: str
    zip_code: str
    email: str
    phone: str
    country: str


class ShippingOut(ApiModel):
    tracking_number: str
    carrier: str
    shipped_at: datetime
    estimated_delivery: datetime | None
    delivered_at: datetime | None


class RefundOut(ApiModel):
    amount: str
    reason: str
    processed_at: datetime
    processed_by: str


class OrderOut(ApiModel):
    id: str
    order_number: str
    user: str
    method: str
    address: str | None
    shipping_address: AddressOut | None
    billing_address: AddressOut | None
    cart: list[LineItemOut]
    payment_method: str
    payment_status: str
    coupon_code: str | None
    items_price: str
    discount: str
    tax_price: str
    shipping_price: str
    total_price: str
    currency: str
    status: str
    admin_message: str | None
    cancellation_reason: str | None
    notes: str | None
    is_gift: bool
    gift_message: str | None
    shipping_info: ShippingOut | None
    refund_info: RefundOut | None
    total_items: int
    created_at: datetime
    updated_at: datetime


class CheckoutResponse(ApiModel):
    success: bool = True
    message: str
    order_id: str
    order_number: str
    status: str
    items_price: str
    discount: str
    tax_price: str
    shipping_price: str
    total_price: str


class OrdersResponse(ApiModel):
    success: bool = True
    count: int
    total: int
    page: int
    limit: int
    orders: list[OrderOut]


class OrderResponse(ApiModel):
    success: bool = True
    order: OrderOut


class OrderActionResponse(ApiModel):
    success: bool = True
    message: str
    order: OrderOut


class OrderStatsOut(ApiModel):
    total_orders: int
    total_revenue: str
    average_order_value: str


class OrderStatsResponse(ApiModel):
    success: bool = True
    data: OrderStatsOut


class RatingsOut(ApiModel):
    average: str
    count: int


class ReviewOut(ApiModel):
    user: str
    rating: int
    comment: str
    created_at: datetime


class ProductOut(ApiModel):
    id: str
    name: str
    description: str
    category: str
    brand: str
    sku: str
    price: str
    stock: int
    stock_status: str
    is_active: bool
    is_featured: bool
    ratings: RatingsOut
    reviews: list[ReviewOut]
    created_at: datetime


class PaginationOut(ApiModel):
    current_page: int
    total_pages: int
    has_next_page: bool
    has_prev_page: bool
    next_page: int | None
    prev_page: int | None


class ProductListResponse(ApiModel):
    success: bool = True
    count: int
    total: int
    pagination: PaginationOut
    data: list[ProductOut]


class ProductsResponse(ApiModel):
    success: bool = True
    count: int
    data: list[ProductOut]


class ProductResponse(ApiModel):
    success: bool = True
    message: str | None = None
    data: ProductOut


class CatalogStatsOut(ApiModel):
    total_products: int
    active_products: int
    featured_products: int
    average_price: str
    total_stock: int
    categories: dict[str, int]


class CatalogStatsResponse(ApiModel):
    success: bool = True
    data: CatalogStatsOut


class CartResponse(ApiModel):
    success: bool = True
    items: list[LineItemOut]
    item_count: int
    total: str


class ErrorResponse(ApiModel):
    success: bool = False
    type: str
    message: str
    details: list[dict[str, Any]] | None = None


# ---- mapping helpers --------------------------------------------------------


def address_out(address: Address | None) -> AddressOut | None:
    if address is None:
        return None
    return AddressOut(
        first_name=address.first_name,
        last_name=address.last_name,
        street=address.street,
        city=address.city,
        state=address.state,
        zip_code=address.zip_code,
        email=address.email,
        phone=address.phone,
        country=address.country,
    )


def order_out(order: Order) -> OrderOut:
    totals = order.totals
    shipping = order.shipping
    refund = order.refund
    return OrderOut(
        id=str(order.order_id.value),
        order_number=order.order_number,
        user=order.customer_id.value,
        method=order.fulfillment_method.value,
        address=order.address,
        shipping_address=address_out(order.shipping_address),
        billing_address=address_out(order.billing_address),
        cart=[
            LineItemOut(
                id=it.product_id,
                name=it.name,
                price=str(it.unit_price),
                quantity=it.quantity,
                subtotal=str(it.subtotal()),
            )
            for it in order.items
        ],
        payment_method=order.payment.method.value,
        payment_status=order.payment.status.value,
        coupon_code=order.coupon.code if order.coupon else None,
        items_price=str(totals.items_price),
        discount=str(totals.discount),
        tax_price=str(totals.tax_price),
        shipping_price=str(totals.shipping_price),
        total_price=str(totals.total_price),
        currency=totals.total_price.currency,
        status=order.status.value,
        admin_message=order.admin_message,
        cancellation_reason=order.cancellation_reason,
        notes=order.notes,
        is_gift=order.is_gift,
        gift_message=order.gift_message,
        shipping_info=(
            ShippingOut(
                tracking_number=shipping.tracking_number,
                carrier=shipping.carrier,
                shipped_at=shipping.shipped_at,
                estimated_delivery=shipping.estimated_delivery,
                delivered_at=shipping.delivered_at,
            )
            if shipping
            else None
        ),
        refund_info=(
            RefundOut(
                amount=str(refund.amount),
                reason=refund.reason,
                processed_at=refund.processed_at,
                processed_by=refund.processed_by.value,
            )
            if refund
            else None
        ),
        total_items=order.item_count,
        created_at=order.created_at,
        updated_at=order.updated_at,
    )


def orders_response(page: OrderPage) -> OrdersResponse:
    return OrdersResponse(
        count=len(page.orders),
        total=page.total,
        page=page.page,
        limit=page.limit,
        orders=[order_out(o) for o in page.orders],
    )


def order_stats_out(stats: OrderStats) -> OrderStatsOut:
    return OrderStatsOut(
        total_orders=stats.total_orders,
        total_revenue=str(stats.total_revenue),
        average_order_value=str(stats.average_order_value),
    )


def product_out(product: Product) -> ProductOut:
    return ProductOut(
        id=product.product_id.value,
        name=product.name,
        description=product.description,
        category=product.category.value,
        brand=product.brand,
        sku=product.sku,
        price=str(product.price),
        stock=product.stock,
        stock_status=product.stock_status,
        is_active=product.is_active,
        is_featured=product.is_featured,
        ratings=RatingsOut(
            average=f"{product.ratings.average:.2f}", count=product.ratings.count
        ),
        reviews=[
            ReviewOut(
                user=r.user_id.value,
                rating=r.rating,
                comment=r.comment,
                created_at=r.created_at,
            )
            for r in product.reviews
        ],
        created_at=product.created_at,
    )


def product_list_response(page: ProductPage) -> ProductListResponse:
    return ProductListResponse(
        count=len(page.items),
        total=page.total,
        pagination=PaginationOut(
            current_page=page.page,
            total_pages=page.total_pages,
            has_next_page=page.has_next_page,
            has_prev_page=page.has_prev_page,
            next_page=page.page + 1 if page.has_next_page else None,
            prev_page=page.page - 1 if page.has_prev_page else None,
        ),
        data=[product_out(p) for p in page.items],
    )


def catalog_stats_out(stats: CatalogStats) -> CatalogStatsOut:
    return CatalogStatsOut(
        total_products=stats.total_products,
        active_products=stats.active_products,
        featured_products=stats.featured_products,
        average_price=f"{stats.average_price:.2f}",
        total_stock=stats.total_stock,
        categories=dict(stats.categories),
    )


def cart_response(cart: Cart) -> CartResponse:
    return CartResponse(
        items=[
            LineItemOut(
                id=ln.product_id,
                name=ln.name,
                price=str(ln.unit_price),
                quantity=ln.quantity,
                subtotal=str(ln.subtotal()),
            )
            for ln in cart.lines
        ],
        item_count=cart.item_count,
        total=str(cart.total()),
    )
