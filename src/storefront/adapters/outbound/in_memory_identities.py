from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict

from returns.result import Failure, Result, Success

from storefront.core.domain.model.errors import AuthError, StorefrontError
from storefront.core.domain.model.identity import Identity
from storefront.core.ports.outbound.identities import IdentityDirectory


@dataclass
class InMemoryIdentityDirectory(IdentityDirectory):
    """Opaque bearer tokens issued out of band, mapped to identities."""

    _by_token: Dict[str, Identity] = field(default_factory=dict)

    def resolve(self, token: str) -> Result[Identity, StorefrontError]:
        identity = self._by_token.get(token)
        if identity is None:
            return Failure(AuthError(message="Not authorized to access this route"))
        return Success(identity)

    def register(self, token: str, identity: Identity) -> None:
        self._by_token[token] = identity

    def revoke(self, token: str) -> None:
        self._by_token.pop(token, None)
