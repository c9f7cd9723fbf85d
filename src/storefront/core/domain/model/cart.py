"""Client-held shopping cart.

A cart keeps one line per distinct product, in the order products were first
added. The unit price is a snapshot taken when the product was added and is
never refreshed from the catalog afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Tuple

from storefront.core.domain.model.money import DEFAULT_CURRENCY, Money, fold_money


@dataclass(frozen=True)
class CartLine:
    product_id: str
    name: str
    unit_price: Money
    quantity: int

    def subtotal(self) -> Money:
        return self.unit_price * self.quantity


@dataclass(frozen=True)
class Cart:
    lines: Tuple[CartLine, ...] = field(default_factory=tuple)
    currency: str = DEFAULT_CURRENCY

    @property
    def is_empty(self) -> bool:
        return not self.lines

    @property
    def item_count(self) -> int:
        return sum(ln.quantity for ln in self.lines)

    def total(self) -> Money:
        return fold_money((ln.subtotal() for ln in self.lines), currency=self.currency)

    def find(self, product_id: str) -> CartLine | None:
        for ln in self.lines:
            if ln.product_id == product_id:
                return ln
        return None

    def add(self, product_id: str, name: str, unit_price: Money, qty: int = 1) -> "Cart":
        if qty < 1:
            raise ValueError("quantity must be >= 1")
        existing = self.find(product_id)
        if existing is None:
            line = CartLine(product_id, name, unit_price, qty)
            return replace(self, lines=self.lines + (line,))
        # merged line keeps the original snapshot
        return self._replace_line(
            product_id, replace(existing, quantity=existing.quantity + qty)
        )

    def set_quantity(self, product_id: str, delta: int) -> "Cart":
        existing = self.find(product_id)
        if existing is None:
            return self
        quantity = existing.quantity + delta
        if quantity <= 0:
            return self.remove(product_id)
        return self._replace_line(product_id, replace(existing, quantity=quantity))

    def remove(self, product_id: str) -> "Cart":
        return replace(
            self, lines=tuple(ln for ln in self.lines if ln.product_id != product_id)
        )

    def clear(self) -> "Cart":
        return replace(self, lines=())

    def _replace_line(self, product_id: str, line: CartLine) -> "Cart":
        return replace(
            self,
            lines=tuple(line if ln.product_id == product_id else ln for ln in self.lines),
        )
