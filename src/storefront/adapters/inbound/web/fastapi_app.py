from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any, Callable

from fastapi import Depends, FastAPI, Header, Query, Request, Response
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from returns.result import Result, Success

from storefront.adapters.inbound.web.schemas import (
    AddToCartIn,
    AdminMessageIn,
    CartResponse,
    CatalogStatsResponse,
    ChangeQuantityIn,
    CheckoutRequest,
    CheckoutResponse,
    ErrorResponse,
    OrderActionResponse,
    OrderResponse,
    OrdersResponse,
    OrderStatsResponse,
    ProductIn,
    ProductListResponse,
    ProductPatchIn,
    ProductResponse,
    ProductsResponse,
    RefundOrderIn,
    ReviewIn,
    ShipOrderIn,
    StatusUpdateIn,
    cart_response,
    catalog_stats_out,
    order_out,
    order_stats_out,
    orders_response,
    product_list_response,
    product_out,
)
from storefront.bootstrap import UseCases
from storefront.core.domain.model.errors import (
    AuthError,
    AuthorizationError,
    InvalidStatusTransition,
    NotFoundError,
    PersistenceError,
    PublishError,
    StorefrontError,
    ValidationError,
)
from storefront.core.domain.model.identity import Identity
from storefront.core.domain.model.order import Order
from storefront.core.ports.inbound.cart import AddToCartCommand, ChangeQuantityCommand
from storefront.core.ports.inbound.catalog import (
    AddReviewCommand,
    CreateProductCommand,
    ListProductsQuery,
    SearchProductsQuery,
    UpdateProductCommand,
)
from storefront.core.ports.inbound.checkout import CheckoutCommand
from storefront.core.ports.inbound.list_orders import GetOrderQuery, ListOrdersQuery
from storefront.core.ports.inbound.order_lifecycle import (
    OrderActionCommand,
    RefundOrderCommand,
    ShipOrderCommand,
    StatusUpdateCommand,
)

logger = logging.getLogger("storefront.web")

ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    code: {"model": ErrorResponse} for code in (400, 401, 403, 404, 409, 500, 503)
}


def _map_error_to_http(err: StorefrontError) -> tuple[int, ErrorResponse]:
    body = ErrorResponse(type=type(err).__name__, message=str(err))

    # before ValidationError: it is a subclass
    if isinstance(err, InvalidStatusTransition):
        return 409, body

    if isinstance(err, ValidationError):
        return 400, body

    if isinstance(err, AuthError):
        return 401, body

    if isinstance(err, AuthorizationError):
        return 403, body

    if isinstance(err, NotFoundError):
        return 404, body

    if isinstance(err, PublishError):
        return 503, body

    if isinstance(err, PersistenceError):
        return 500, body

    return 500, body


def _unwrap(result: Result[Any, StorefrontError]) -> Any:
    if isinstance(result, Success):
        return result.unwrap()
    raise result.failure()


def create_app(usecases: UseCases) -> FastAPI:
    app = FastAPI(title="storefront")

    # --- exception handlers --------------------------------------------------

    @app.exception_handler(StorefrontError)
    async def handle_domain_error(_: Request, exc: StorefrontError) -> JSONResponse:
        status, body = _map_error_to_http(exc)
        if status >= 500:
            logger.error("request failed: %s: %s", type(exc).__name__, exc)
        return JSONResponse(
            status_code=status, content=body.model_dump(exclude_none=True)
        )

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(
        _: Request, exc: RequestValidationError
    ) -> JSONResponse:
        body = ErrorResponse(
            type="RequestValidationError",
            message="invalid request",
            details=jsonable_encoder(exc.errors()),
        )
        return JSONResponse(status_code=400, content=body.model_dump())

    @app.exception_handler(Exception)
    async def handle_unexpected(_: Request, exc: Exception) -> JSONResponse:
        logger.exception("unhandled error")
        body = ErrorResponse(type=type(exc).__name__, message="internal server error")
        return JSONResponse(
            status_code=500, content=body.model_dump(exclude_none=True)
        )

    # --- identity ------------------------------------------------------------

    def current_identity(
        authorization: str | None = Header(None),
    ) -> Identity | None:
        # No header: the use case decides whether the route is protected.
        if authorization is None:
            return None
        return _unwrap(usecases.auth.authenticate(authorization))

    def order_action(
        result: Result[Order, StorefrontError], message: str
    ) -> OrderActionResponse:
        return OrderActionResponse(message=message, order=order_out(_unwrap(result)))

    # --- routes: health ------------------------------------------------------

    @app.get("/health")
    def health() -> dict[str, str]:
        return {"status": "ok"}

    # --- routes: catalog -----------------------------------------------------

    @app.get(
        "/products",
        response_model=ProductListResponse,
        responses=ERROR_RESPONSES,
    )
    def list_products(
        page: int = Query(1),
        limit: int = Query(12),
        category: str | None = Query(None),
        brand: str | None = Query(None),
        min_price: Decimal | None = Query(None, alias="minPrice"),
        max_price: Decimal | None = Query(None, alias="maxPrice"),
        search: str | None = Query(None),
        sort: str | None = Query(None),
    ) -> Any:
        result = usecases.catalog.list_products(
            ListProductsQuery(
                page=page,
                limit=limit,
                category=category,
                brand=brand,
                min_price=min_price,
                max_price=max_price,
                search=search,
                sort=sort,
            )
        )
        return product_list_response(_unwrap(result))

    @app.get("/products/search", response_model=ProductsResponse, responses=ERROR_RESPONSES)
    def search_products(
        q: str = Query(""),
        page: int = Query(1),
        limit: int = Query(12),
    ) -> Any:
        items = _unwrap(
            usecases.catalog.search(SearchProductsQuery(text=q, page=page, limit=limit))
        )
        return ProductsResponse(count=len(items), data=[product_out(p) for p in items])

    @app.get("/products/featured", response_model=ProductsResponse, responses=ERROR_RESPONSES)
    def featured_products(limit: int = Query(8, ge=1, le=50)) -> Any:
        items = _unwrap(usecases.catalog.featured(limit))
        return ProductsResponse(count=len(items), data=[product_out(p) for p in items])

    @app.get(
        "/products/category/{category}",
        response_model=ProductListResponse,
        responses=ERROR_RESPONSES,
    )
    def products_by_category(
        category: str,
        page: int = Query(1),
        limit: int = Query(12),
        sort: str | None = Query(None),
    ) -> Any:
        result = usecases.catalog.list_products(
            ListProductsQuery(page=page, limit=limit, category=category, sort=sort)
        )
        return product_list_response(_unwrap(result))

    @app.get("/products/stats", response_model=CatalogStatsResponse, responses=ERROR_RESPONSES)
    def catalog_stats(identity: Identity | None = Depends(current_identity)) -> Any:
        stats = _unwrap(usecases.catalog.stats(identity))
        return CatalogStatsResponse(data=catalog_stats_out(stats))

    @app.get("/products/{product_id}", response_model=ProductResponse, responses=ERROR_RESPONSES)
    def get_product(product_id: str) -> Any:
        product = _unwrap(usecases.catalog.get_product(product_id))
        return ProductResponse(data=product_out(product))

    @app.post(
        "/products",
        response_model=ProductResponse,
        status_code=201,
        responses=ERROR_RESPONSES,
    )
    def create_product(
        req: ProductIn,
        response: Response,
        identity: Identity | None = Depends(current_identity),
    ) -> Any:
        product = _unwrap(
            usecases.catalog.create_product(
                CreateProductCommand(identity=identity, **req.model_dump())
            )
        )
        response.headers["Location"] = f"/products/{product.product_id.value}"
        return ProductResponse(
            message="Product created successfully", data=product_out(product)
        )

    @app.put("/products/{product_id}", response_model=ProductResponse, responses=ERROR_RESPONSES)
    def update_product(
        product_id: str,
        req: ProductPatchIn,
        identity: Identity | None = Depends(current_identity),
    ) -> Any:
        product = _unwrap(
            usecases.catalog.update_product(
                UpdateProductCommand(
                    identity=identity, product_id=product_id, **req.model_dump()
                )
            )
        )
        return ProductResponse(
            message="Product updated successfully", data=product_out(product)
        )

    @app.delete(
        "/products/{product_id}", response_model=ProductResponse, responses=ERROR_RESPONSES
    )
    def delete_product(
        product_id: str, identity: Identity | None = Depends(current_identity)
    ) -> Any:
        product = _unwrap(usecases.catalog.deactivate_product(identity, product_id))
        return ProductResponse(
            message="Product deleted successfully", data=product_out(product)
        )

    @app.post(
        "/products/{product_id}/reviews",
        response_model=ProductResponse,
        status_code=201,
        responses=ERROR_RESPONSES,
    )
    def add_review(
        product_id: str,
        req: ReviewIn,
        identity: Identity | None = Depends(current_identity),
    ) -> Any:
        product = _unwrap(
            usecases.catalog.add_review(
                AddReviewCommand(
                    identity=identity,
                    product_id=product_id,
                    rating=req.rating,
                    comment=req.comment,
                )
            )
        )
        return ProductResponse(
            message="Review added successfully", data=product_out(product)
        )

    # --- routes: cart --------------------------------------------------------

    @app.get("/cart", response_model=CartResponse, responses=ERROR_RESPONSES)
    def view_cart(identity: Identity | None = Depends(current_identity)) -> Any:
        return cart_response(_unwrap(usecases.cart.view(identity)))

    @app.post("/cart/items", response_model=CartResponse, responses=ERROR_RESPONSES)
    def add_to_cart(
        req: AddToCartIn, identity: Identity | None = Depends(current_identity)
    ) -> Any:
        cart = _unwrap(
            usecases.cart.add(
                AddToCartCommand(
                    identity=identity,
                    product_id=str(req.product_id),
                    quantity=req.quantity,
                )
            )
        )
        return cart_response(cart)

    @app.patch("/cart/items/{product_id}", response_model=CartResponse, responses=ERROR_RESPONSES)
    def change_quantity(
        product_id: str,
        req: ChangeQuantityIn,
        identity: Identity | None = Depends(current_identity),
    ) -> Any:
        cart = _unwrap(
            usecases.cart.change_quantity(
                ChangeQuantityCommand(
                    identity=identity, product_id=product_id, delta=req.delta
                )
            )
        )
        return cart_response(cart)

    @app.delete("/cart/items/{product_id}", response_model=CartResponse, responses=ERROR_RESPONSES)
    def remove_from_cart(
        product_id: str, identity: Identity | None = Depends(current_identity)
    ) -> Any:
        return cart_response(_unwrap(usecases.cart.remove(identity, product_id)))

    @app.delete("/cart", response_model=CartResponse, responses=ERROR_RESPONSES)
    def clear_cart(identity: Identity | None = Depends(current_identity)) -> Any:
        return cart_response(_unwrap(usecases.cart.clear(identity)))

    # --- routes: checkout ----------------------------------------------------

    @app.post(
        "/checkout",
        response_model=CheckoutResponse,
        status_code=201,
        responses=ERROR_RESPONSES,
    )
    def checkout(
        req: CheckoutRequest,
        response: Response,
        identity: Identity | None = Depends(current_identity),
    ) -> Any:
        cmd = CheckoutCommand(
            identity=identity,
            method=req.method,
            lines=(
                tuple(ln.to_line() for ln in req.cart) if req.cart is not None else None
            ),
            address=req.address,
            shipping_address=(
                req.shipping_address.to_domain() if req.shipping_address else None
            ),
            billing_address=(
                req.billing_address.to_domain() if req.billing_address else None
            ),
            payment_method=req.payment_method,
            coupon_code=req.coupon_code,
            notes=req.notes,
            is_gift=req.is_gift,
            gift_message=req.gift_message,
        )

        receipt = _unwrap(usecases.checkout.checkout(cmd))
        order_id = str(receipt.order_id.value)
        response.headers["Location"] = f"/orders/{order_id}"
        totals = receipt.totals
        return CheckoutResponse(
            message=receipt.message,
            order_id=order_id,
            order_number=receipt.order_number,
            status=receipt.status.value,
            items_price=str(totals.items_price),
            discount=str(totals.discount),
            tax_price=str(totals.tax_price),
            shipping_price=str(totals.shipping_price),
            total_price=str(totals.total_price),
        )

    # --- routes: orders ------------------------------------------------------

    @app.get("/my-orders", response_model=OrdersResponse, responses=ERROR_RESPONSES)
    def my_orders(
        page: int = Query(1),
        limit: int = Query(10),
        identity: Identity | None = Depends(current_identity),
    ) -> Any:
        result = usecases.orders.my_orders(
            ListOrdersQuery(identity=identity, page=page, limit=limit)
        )
        return orders_response(_unwrap(result))

    @app.get("/orders/{order_id}", response_model=OrderResponse, responses=ERROR_RESPONSES)
    def get_order(
        order_id: str, identity: Identity | None = Depends(current_identity)
    ) -> Any:
        order = _unwrap(
            usecases.orders.get_order(GetOrderQuery(identity=identity, order_id=order_id))
        )
        return OrderResponse(order=order_out(order))

    @app.put(
        "/orders/{order_id}/status",
        response_model=OrderActionResponse,
        responses=ERROR_RESPONSES,
    )
    def update_order_status(
        order_id: str,
        req: StatusUpdateIn,
        identity: Identity | None = Depends(current_identity),
    ) -> Any:
        result = usecases.lifecycle.update_status(
            StatusUpdateCommand(identity=identity, order_id=order_id, **req.model_dump())
        )
        return order_action(result, f"Order status updated to {req.status}")

    @app.post(
        "/orders/{order_id}/cancel",
        response_model=OrderActionResponse,
        responses=ERROR_RESPONSES,
    )
    def cancel_order(
        order_id: str,
        req: AdminMessageIn | None = None,
        identity: Identity | None = Depends(current_identity),
    ) -> Any:
        reason = req.message if req else None
        result = usecases.lifecycle.cancel(
            OrderActionCommand(identity=identity, order_id=order_id, message=reason)
        )
        return order_action(result, "Order cancelled")

    # --- routes: admin review ------------------------------------------------

    @app.get("/admin/orders", response_model=OrdersResponse, responses=ERROR_RESPONSES)
    def list_all_orders(
        page: int = Query(1),
        limit: int = Query(20),
        status: str | None = Query(None),
        identity: Identity | None = Depends(current_identity),
    ) -> Any:
        result = usecases.orders.list_all(
            ListOrdersQuery(identity=identity, page=page, limit=limit, status=status)
        )
        return orders_response(_unwrap(result))

    @app.get(
        "/admin/orders/stats", response_model=OrderStatsResponse, responses=ERROR_RESPONSES
    )
    def order_stats(identity: Identity | None = Depends(current_identity)) -> Any:
        stats = _unwrap(usecases.orders.stats(identity))
        return OrderStatsResponse(data=order_stats_out(stats))

    def simple_action(
        action: Callable[[OrderActionCommand], Result[Order, StorefrontError]],
        message: str,
    ) -> Callable[..., Any]:
        def endpoint(
            order_id: str,
            req: AdminMessageIn | None = None,
            identity: Identity | None = Depends(current_identity),
        ) -> Any:
            cmd = OrderActionCommand(
                identity=identity,
                order_id=order_id,
                message=req.message if req else None,
            )
            return order_action(action(cmd), message)

        return endpoint

    for path, action, message in (
        ("confirm", usecases.lifecycle.confirm, "Order confirmed"),
        ("reject", usecases.lifecycle.reject, "Order rejected"),
        ("process", usecases.lifecycle.mark_processing, "Order is now processing"),
        ("deliver", usecases.lifecycle.mark_delivered, "Order delivered"),
    ):
        app.add_api_route(
            f"/admin/orders/{{order_id}}/{path}",
            simple_action(action, message),
            methods=["POST"],
            response_model=OrderActionResponse,
            responses=ERROR_RESPONSES,
            name=f"{path}_order",
        )

    @app.post(
        "/admin/orders/{order_id}/ship",
        response_model=OrderActionResponse,
        responses=ERROR_RESPONSES,
    )
    def ship_order(
        order_id: str,
        req: ShipOrderIn,
        identity: Identity | None = Depends(current_identity),
    ) -> Any:
        result = usecases.lifecycle.mark_shipped(
            ShipOrderCommand(
                identity=identity,
                order_id=order_id,
                tracking_number=req.tracking_number,
                carrier=req.carrier,
                estimated_delivery=req.estimated_delivery,
            )
        )
        return order_action(result, "Order shipped")

    @app.post(
        "/admin/orders/{order_id}/refund",
        response_model=OrderActionResponse,
        responses=ERROR_RESPONSES,
    )
    def refund_order(
        order_id: str,
        req: RefundOrderIn,
        identity: Identity | None = Depends(current_identity),
    ) -> Any:
        result = usecases.lifecycle.refund(
            RefundOrderCommand(
                identity=identity,
                order_id=order_id,
                amount=req.amount,
                reason=req.reason,
            )
        )
        return order_action(result, "Order refunded")

    return app
