"""Tests for bearer authentication and role checks."""

import pytest

from conftest import ADMIN_TOKEN, CUSTOMER_TOKEN
from storefront.core.domain.model.errors import AuthError, AuthorizationError
from storefront.core.domain.model.identity import CustomerId
from storefront.core.domain.service.auth_gate import (
    bearer_token,
    require_admin,
    require_identity,
    require_owner_or_admin,
)


class TestBearerToken:
    @pytest.mark.parametrize(
        "header, token",
        [
            ("Bearer abc", "abc"),
            ("bearer abc", "abc"),
            ("  Bearer   abc  ", "abc"),
            ("Basic abc", None),
            ("Bearer", None),
            ("Bearer   ", None),
            ("", None),
            (None, None),
        ],
    )
    def test_parsing(self, header, token):
        assert bearer_token(header) == token


class TestAuthenticate:
    def test_known_tokens(self, usecases):
        admin = usecases.auth.authenticate(f"Bearer {ADMIN_TOKEN}").unwrap()
        customer = usecases.auth.authenticate(f"Bearer {CUSTOMER_TOKEN}").unwrap()
        assert admin.is_admin
        assert not customer.is_admin

    @pytest.mark.parametrize("header", [None, "Bearer unknown", f"Token {ADMIN_TOKEN}"])
    def test_rejected(self, usecases, header):
        err = usecases.auth.authenticate(header).failure()
        assert isinstance(err, AuthError)
        assert str(err) == "Not authorized to access this route"

    def test_revoked_token(self, usecases, stores):
        stores.identities.revoke(CUSTOMER_TOKEN)
        assert isinstance(
            usecases.auth.authenticate(f"Bearer {CUSTOMER_TOKEN}").failure(), AuthError
        )


class TestRoleChecks:
    def test_require_identity(self, customer):
        assert require_identity(customer).unwrap() == customer
        assert str(require_identity(None).failure()) == "Authentication required"

    def test_require_admin(self, admin, customer):
        assert require_admin(admin).unwrap() == admin
        err = require_admin(customer).failure()
        assert isinstance(err, AuthorizationError)
        assert str(err) == "User role customer is not authorized to access this route"
        assert isinstance(require_admin(None).failure(), AuthError)

    def test_owner_or_admin(self, admin, customer, other_customer):
        owner = CustomerId("user-1")
        assert require_owner_or_admin(customer, owner).unwrap() == customer
        assert require_owner_or_admin(admin, owner).unwrap() == admin
        assert isinstance(
            require_owner_or_admin(other_customer, owner).failure(), AuthorizationError
        )
