from __future__ import annotations

from typing import Protocol

from returns.result import Result

from storefront.core.domain.model.errors import StorefrontError
from storefront.core.domain.model.identity import Identity


class IdentityDirectory(Protocol):
    def resolve(self, token: str) -> Result[Identity, StorefrontError]:
        """Unknown or revoked tokens fail with AuthError."""
        ...
