from __future__ import annotations

import os
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Mapping

PREFIX = "STOREFRONT_"


@dataclass(frozen=True)
class Settings:
    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "INFO"
    order_prefix: str = "GOPG"
    currency: str = "USD"
    tax_rate: Decimal = Decimal("0.085")
    free_shipping_threshold: Decimal = Decimal("50.00")
    flat_shipping: Decimal = Decimal("5.99")
    max_page_size: int = 50
    seed_demo_data: bool = True
    admin_token: str = "admin-demo-token"
    customer_token: str = "customer-demo-token"

    @staticmethod
    def from_env(environ: Mapping[str, str] | None = None) -> "Settings":
        env = os.environ if environ is None else environ
        defaults = Settings()

        def get(name: str, default: str) -> str:
            return env.get(PREFIX + name, default)

        return Settings(
            host=get("HOST", defaults.host),
            port=_int(get("PORT", str(defaults.port)), "PORT"),
            log_level=get("LOG_LEVEL", defaults.log_level).upper(),
            order_prefix=get("ORDER_PREFIX", defaults.order_prefix),
            currency=get("CURRENCY", defaults.currency).upper(),
            tax_rate=_decimal(get("TAX_RATE", str(defaults.tax_rate)), "TAX_RATE"),
            free_shipping_threshold=_decimal(
                get("FREE_SHIPPING_THRESHOLD", str(defaults.free_shipping_threshold)),
                "FREE_SHIPPING_THRESHOLD",
            ),
            flat_shipping=_decimal(
                get("FLAT_SHIPPING", str(defaults.flat_shipping)), "FLAT_SHIPPING"
            ),
            max_page_size=_int(
                get("MAX_PAGE_SIZE", str(defaults.max_page_size)), "MAX_PAGE_SIZE"
            ),
            seed_demo_data=_bool(get("SEED_DEMO_DATA", "true")),
            admin_token=get("ADMIN_TOKEN", defaults.admin_token),
            customer_token=get("CUSTOMER_TOKEN", defaults.customer_token),
        )


def _int(raw: str, name: str) -> int:
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{PREFIX}{name} must be an integer, got {raw!r}") from None


def _decimal(raw: str, name: str) -> Decimal:
    try:
        return Decimal(raw)
    except InvalidOperation:
        raise ValueError(f"{PREFIX}{name} must be a decimal, got {raw!r}") from None


def _bool(raw: str) -> bool:
    return raw.strip().lower() in {"1", "true", "yes", "on"}
