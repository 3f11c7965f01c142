"""Client-held cart.

A cart is an ordered list of lines, one per variant. It lives in client
storage (the session cookie for the web app) and is written back after
every mutation. Nothing here talks to the platform; the cart only reaches
it as a line-item list at checkout.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Tuple

from shopfront.app.common.money import format_money
from shopfront.app.common.storage import KeyValueStore
from shopfront.app.models import Variant

logger = logging.getLogger(__name__)

CART_KEY = "cart"
MIN_QUANTITY = 1
MAX_QUANTITY = 99
DEFAULT_CURRENCY = "USD"


def clamp_quantity(quantity: int) -> int:
    return max(MIN_QUANTITY, min(MAX_QUANTITY, int(quantity)))


@dataclass
class CartLine:
    variant_id: str
    unit_price_minor: int
    currency: str
    quantity: int
    attributes: List[Tuple[str, str]] = field(default_factory=list)
    title: Optional[str] = None
    product_title: Optional[str] = None
    image: Optional[str] = None

    @property
    def line_total_minor(self) -> int:
        return self.unit_price_minor * self.quantity

    @classmethod
    def from_variant(cls, variant: Variant, quantity: int) -> "CartLine":
        return cls(
            variant_id=variant.id,
            unit_price_minor=variant.price_minor,
            currency=variant.currency_code,
            quantity=quantity,
            attributes=list(variant.selected_options),
            title=variant.title,
            product_title=variant.product_title,
            image=variant.image,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "variant_id": self.variant_id,
            "unit_price_minor": self.unit_price_minor,
            "currency": self.currency,
            "quantity": self.quantity,
            "attributes": [[name, value] for name, value in self.attributes],
            "title": self.title,
            "product_title": self.product_title,
            "image": self.image,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CartLine":
        return cls(
            variant_id=str(data["variant_id"]),
            unit_price_minor=int(data["unit_price_minor"]),
            currency=str(data["currency"]),
            quantity=clamp_quantity(data["quantity"]),
            attributes=[(str(n), str(v)) for n, v in data.get("attributes") or []],
            title=data.get("title"),
            product_title=data.get("product_title"),
            image=data.get("image"),
        )


class CartState:
    """Lines keyed by variant id, in insertion order.

    Quantities stay within [1, 99]; driving a line to zero removes it. When
    a store is attached, every mutation is persisted to it and a failed
    write raises StorageError.
    """

    def __init__(self, lines: List[CartLine] | None = None, store: KeyValueStore | None = None,
                 default_currency: str = DEFAULT_CURRENCY):
        self.lines: List[CartLine] = []
        self.store = store
        self.default_currency = default_currency
        for line in lines or []:
            self._merge(line)

    # --- Loading / saving ---
    @classmethod
    def load(cls, store: KeyValueStore, default_currency: str = DEFAULT_CURRENCY) -> "CartState":
        raw = store.get(CART_KEY) or []
        lines = []
        try:
            for item in raw:
                lines.append(CartLine.from_dict(item))
        except (KeyError, TypeError, ValueError):
            logger.warning("Discarding unreadable cart from client storage")
            lines = []
        return cls(lines, store=store, default_currency=default_currency)

    def save(self) -> None:
        if self.store is not None:
            self.store.set(CART_KEY, self.to_list())

    def to_list(self) -> List[Dict[str, Any]]:
        return [line.to_dict() for line in self.lines]

    # --- Queries ---
    def __iter__(self) -> Iterator[CartLine]:
        return iter(self.lines)

    def __len__(self) -> int:
        return len(self.lines)

    def get(self, variant_id: str) -> Optional[CartLine]:
        for line in self.lines:
            if line.variant_id == variant_id:
                return line
        return None

    @property
    def currency_code(self) -> str:
        # mixed-currency carts are not reconciled: the first line decides
        return self.lines[0].currency if self.lines else self.default_currency

    def total_minor(self) -> int:
        return sum(line.line_total_minor for line in self.lines)

    def total_price(self) -> str:
        return format_money(self.total_minor(), self.currency_code)

    def total_items(self) -> int:
        return sum(line.quantity for line in self.lines)

    def line_items(self) -> List[Dict[str, Any]]:
        """The checkout payload: [{variant_id, quantity}, ...]."""
        return [{"variant_id": line.variant_id, "quantity": line.quantity} for line in self.lines]

    # --- Mutations ---
    def _merge(self, line: CartLine) -> None:
        existing = self.get(line.variant_id)
        if existing is None:
            self.lines.append(line)
        else:
            existing.quantity = clamp_quantity(existing.quantity + line.quantity)

    def add_line(self, variant: Variant, quantity: int = 1) -> None:
        if quantity <= 0:
            return
        self._merge(CartLine.from_variant(variant, clamp_quantity(quantity)))
        self.save()

    def remove_line(self, variant_id: str) -> None:
        before = len(self.lines)
        self.lines = [line for line in self.lines if line.variant_id != variant_id]
        if len(self.lines) != before:
            self.save()

    def set_quantity(self, variant_id: str, quantity: int) -> None:
        if quantity <= 0:
            self.remove_line(variant_id)
            return
        line = self.get(variant_id)
        if line is None:
            return
        line.quantity = clamp_quantity(quantity)
        self.save()

    def clear(self) -> None:
        self.lines = []
        self.save()

    def summary(self) -> Dict[str, Any]:
        return {
            "total_items": self.total_items(),
            "total_minor": self.total_minor(),
            "currency_code": self.currency_code,
            "total_price": self.total_price(),
        }
