from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Callable

from storefront.adapters.outbound.in_memory_carts import InMemoryCartStorage
from storefront.adapters.outbound.in_memory_coupons import InMemoryCouponRepository
from storefront.adapters.outbound.in_memory_identities import InMemoryIdentityDirectory
from storefront.adapters.outbound.in_memory_orders import InMemoryOrderRepository
from storefront.adapters.outbound.in_memory_products import InMemoryProductRepository
from storefront.adapters.outbound.logging_events import LoggingEventPublisher
from storefront.config import Settings
from storefront.core.domain.model.identity import CustomerId, Identity, Role
from storefront.core.domain.model.money import Money, now_local
from storefront.core.domain.model.order import Coupon
from storefront.core.domain.model.product import Category, Product, ProductId
from storefront.core.domain.service.auth_gate import AuthGate
from storefront.core.domain.service.cart_service import CartDeps, CartService
from storefront.core.domain.service.catalog_service import CatalogDeps, CatalogService
from storefront.core.domain.service.checkout_service import (
    CheckoutDeps,
    CheckoutService,
)
from storefront.core.domain.service.order_lifecycle_service import (
    OrderLifecycleDeps,
    OrderLifecycleService,
)
from storefront.core.domain.service.order_queries_service import (
    OrderQueriesDeps,
    OrderQueriesService,
)
from storefront.core.domain.service.pricing import PricingPolicy


@dataclass(frozen=True)
class UseCases:
    checkout: CheckoutService
    lifecycle: OrderLifecycleService
    orders: OrderQueriesService
    catalog: CatalogService
    cart: CartService
    auth: AuthGate


@dataclass(frozen=True)
class Stores:
    orders: InMemoryOrderRepository
    products: InMemoryProductRepository
    carts: InMemoryCartStorage
    coupons: InMemoryCouponRepository
    identities: InMemoryIdentityDirectory
    events: LoggingEventPublisher


def build_stores() -> Stores:
    return Stores(
        orders=InMemoryOrderRepository(),
        products=InMemoryProductRepository(),
        carts=InMemoryCartStorage(),
        coupons=InMemoryCouponRepository(),
        identities=InMemoryIdentityDirectory(),
        events=LoggingEventPublisher(),
    )


def build_usecases(
    settings: Settings | None = None,
    stores: Stores | None = None,
    clock: Callable[[], datetime] = now_local,
) -> UseCases:
    settings = settings or Settings()
    stores = stores or build_stores()
    if settings.seed_demo_data:
        seed_demo_data(stores, settings, clock)

    pricing = PricingPolicy(
        tax_rate=settings.tax_rate,
        free_shipping_threshold=settings.free_shipping_threshold,
        flat_shipping=settings.flat_shipping,
        currency=settings.currency,
    )

    checkout = CheckoutService(
        CheckoutDeps(
            orders=stores.orders,
            coupons=stores.coupons,
            carts=stores.carts,
            events=stores.events,
            pricing=pricing,
            order_prefix=settings.order_prefix,
            clock=clock,
        )
    )
    lifecycle = OrderLifecycleService(
        OrderLifecycleDeps(orders=stores.orders, events=stores.events, clock=clock)
    )
    orders = OrderQueriesService(
        OrderQueriesDeps(
            orders=stores.orders,
            max_page_size=settings.max_page_size,
            currency=settings.currency,
        )
    )
    catalog = CatalogService(
        CatalogDeps(
            products=stores.products,
            max_page_size=settings.max_page_size,
            currency=settings.currency,
            clock=clock,
        )
    )
    cart = CartService(CartDeps(carts=stores.carts, products=stores.products))

    return UseCases(
        checkout=checkout,
        lifecycle=lifecycle,
        orders=orders,
        catalog=catalog,
        cart=cart,
        auth=AuthGate(stores.identities),
    )


def seed_demo_data(
    stores: Stores, settings: Settings, clock: Callable[[], datetime] = now_local
) -> None:
    stores.identities.register(
        settings.admin_token,
        Identity(CustomerId("admin-1"), "admin@example.com", "Store Admin", Role.ADMIN),
    )
    stores.identities.register(
        settings.customer_token,
        Identity(CustomerId("user-1"), "demo@example.com", "Demo User", Role.CUSTOMER),
    )
    stores.coupons.add(
        Coupon(code="WELCOME10", discount=Money.of("10.00", settings.currency))
    )

    created = clock()
    demo = (
        ("1", "Premium Smartphone", "Latest flagship smartphone with cutting-edge features",
         Category.PHONES, "Nova", "PHN-001", "999.00", 10, True),
        ("2", "High-Performance Tablet", "Perfect for work and entertainment on the go",
         Category.TABLETS, "Slate", "TAB-001", "699.00", 15, True),
        ("3", "Wireless Earbuds", "Crystal clear sound with noise cancellation",
         Category.ACCESSORIES, "Pulse", "ACC-001", "199.00", 25, True),
        ("4", "Budget-Friendly Phone", "Great value for money with essential features",
         Category.PHONES, "Nova", "PHN-002", "299.00", 20, False),
    )
    for pid, name, description, category, brand, sku, price, stock, featured in demo:
        stores.products.save(
            Product(
                product_id=ProductId(pid),
                name=name,
                description=description,
                category=category,
                brand=brand,
                sku=sku,
                price=Money.of(Decimal(price), settings.currency),
                stock=stock,
                created_at=created,
                is_featured=featured,
            )
        )
