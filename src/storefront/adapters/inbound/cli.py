from __future__ import annotations

import json
from decimal import Decimal
from typing import Any

from returns.result import Success

from storefront.core.ports.inbound.checkout import (
    CheckoutLine,
    CheckoutUseCase,
    QuoteCommand,
)


def run_quote_cli(usecase: CheckoutUseCase, raw: str) -> int:
    """
    raw: JSON string.
    Example:
      {"cart":[{"id":"1","name":"Widget","price":"10.00","quantity":3}],
       "discount":"5.00"}
    """
    try:
        payload = json.loads(raw)
        cmd = _parse_command(payload)
    except Exception as e:  # noqa: BLE001
        print(f"invalid_input: {e}")
        return 2

    result = usecase.quote(cmd)

    if isinstance(result, Success):
        totals = result.unwrap()
        print(
            "[ok]",
            {
                "itemsPrice": str(totals.items_price),
                "discount": str(totals.discount),
                "taxPrice": str(totals.tax_price),
                "shippingPrice": str(totals.shipping_price),
                "totalPrice": str(totals.total_price),
                "currency": totals.total_price.currency,
            },
        )
        return 0

    err = result.failure()
    print("[ng]", str(err))
    return 1


def _parse_command(payload: dict[str, Any]) -> QuoteCommand:
    lines = [
        CheckoutLine(
            product_id=str(x["id"]),
            name=str(x["name"]),
            unit_price=Decimal(str(x["price"])),
            quantity=int(x["quantity"]),
        )
        for x in payload.get("cart", [])
    ]
    coupon_code = payload.get("couponCode")
    return QuoteCommand(
        lines=lines,
        discount=Decimal(str(payload.get("discount", "0"))),
        coupon_code=str(coupon_code) if coupon_code is not None else None,
    )
