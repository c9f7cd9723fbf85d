"""Pytest fixtures for storefront tests."""

from dataclasses import replace
from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from storefront.adapters.inbound.web.fastapi_app import create_app
from storefront.adapters.outbound.logging_events import LoggingEventPublisher
from storefront.bootstrap import build_stores, build_usecases
from storefront.config import Settings
from storefront.core.domain.model.identity import CustomerId, Identity, Role
from storefront.core.ports.inbound.checkout import CheckoutCommand, CheckoutLine

ADMIN_TOKEN = "admin-test-token"
CUSTOMER_TOKEN = "customer-test-token"
OTHER_TOKEN = "other-test-token"


class FixedClock:
    """Callable clock that only moves when told to."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture
def clock():
    return FixedClock(datetime(2025, 6, 3, 10, 30, tzinfo=timezone.utc))


@pytest.fixture
def settings():
    return Settings(admin_token=ADMIN_TOKEN, customer_token=CUSTOMER_TOKEN)


@pytest.fixture
def stores():
    return build_stores()


@pytest.fixture
def admin():
    return Identity(CustomerId("admin-1"), "admin@example.com", "Store Admin", Role.ADMIN)


@pytest.fixture
def customer():
    return Identity(CustomerId("user-1"), "demo@example.com", "Demo User")


@pytest.fixture
def other_customer():
    return Identity(CustomerId("user-2"), "other@example.com", "Other User")


@pytest.fixture
def usecases(settings, stores, clock, other_customer):
    built = build_usecases(settings, stores, clock)
    stores.identities.register(OTHER_TOKEN, other_customer)
    return built


@pytest.fixture
def failing_usecases(settings, stores, clock):
    """Use cases whose event publisher always fails."""
    broken = replace(stores, events=LoggingEventPublisher(fail=True))
    return build_usecases(settings, broken, clock)


@pytest.fixture
def client(usecases):
    return TestClient(create_app(usecases))


@pytest.fixture
def admin_headers():
    return {"Authorization": f"Bearer {ADMIN_TOKEN}"}


@pytest.fixture
def customer_headers():
    return {"Authorization": f"Bearer {CUSTOMER_TOKEN}"}


@pytest.fixture
def other_headers():
    return {"Authorization": f"Bearer {OTHER_TOKEN}"}


def line(product_id="1", name="Widget", price="10.00", quantity=1):
    return CheckoutLine(
        product_id=product_id,
        name=name,
        unit_price=Decimal(price),
        quantity=quantity,
    )


def checkout_command(identity, *, method="pickup", lines=None, **kwargs):
    return CheckoutCommand(
        identity=identity,
        method=method,
        lines=lines if lines is not None else (line(price="10.00", quantity=3),),
        **kwargs,
    )


@pytest.fixture
def place_order(usecases):
    """Place an order through the checkout use case and return the receipt."""

    def _place(identity, **kwargs):
        return usecases.checkout.checkout(checkout_command(identity, **kwargs)).unwrap()

    return _place
