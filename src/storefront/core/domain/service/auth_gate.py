"""Resolves bearer credentials to identities and answers role questions.

Every protected use case goes through the checks below instead of comparing
role strings itself.
"""

from __future__ import annotations

from dataclasses import dataclass

from returns.result import Failure, Result, Success

from storefront.core.domain.model.errors import (
    AuthError,
    AuthorizationError,
    StorefrontError,
)
from storefront.core.domain.model.identity import CustomerId, Identity
from storefront.core.ports.outbound.identities import IdentityDirectory

BEARER = "bearer"


@dataclass(frozen=True)
class AuthGate:
    directory: IdentityDirectory

    def authenticate(
        self, authorization: str | None
    ) -> Result[Identity, StorefrontError]:
        token = bearer_token(authorization)
        if token is None:
            return Failure(AuthError("Not authorized to access this route"))
        return self.directory.resolve(token)


def bearer_token(authorization: str | None) -> str | None:
    if not authorization:
        return None
    scheme, _, token = authorization.strip().partition(" ")
    if scheme.lower() != BEARER or not token.strip():
        return None
    return token.strip()


def require_identity(identity: Identity | None) -> Result[Identity, StorefrontError]:
    if identity is None:
        return Failure(AuthError("Authentication required"))
    return Success(identity)


def require_admin(identity: Identity | None) -> Result[Identity, StorefrontError]:
    return require_identity(identity).bind(_admin_only)


def require_owner_or_admin(
    identity: Identity | None, owner_id: CustomerId
) -> Result[Identity, StorefrontError]:
    def check(ident: Identity) -> Result[Identity, StorefrontError]:
        if ident.is_admin or ident.owns(owner_id):
            return Success(ident)
        return Failure(AuthorizationError("Not authorized to access this resource"))

    return require_identity(identity).bind(check)


def _admin_only(identity: Identity) -> Result[Identity, StorefrontError]:
    if not identity.is_admin:
        return Failure(
            AuthorizationError(
                f"User role {identity.role} is not authorized to access this route"
            )
        )
    return Success(identity)
