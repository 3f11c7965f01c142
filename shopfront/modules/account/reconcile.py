"""Find an order from the identifier carried in an account URL.

The platform has no fetch-by-id for customer orders with a customer token,
and the id that reaches us is not always in the same form as the id in
the data (full global id, global id with a query suffix, or a bare
number). So we scan one page of the customer's orders with three
fallbacks, first match wins:

1. exact: the raw or normalized identifier equals the order id
2. numeric_suffix: trailing digits of both sides are equal
3. order_number: digits after "Order/" equal the order number

This is a workaround, not a contract. When more than one order satisfies
the winning strategy the match is flagged as ambiguous.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence

from shopfront.app.models import Order

logger = logging.getLogger(__name__)

NUMERIC_SUFFIX_RE = re.compile(r"(\d+)(?:\?|$)")
ORDER_NUMBER_RE = re.compile(r"Order/(\d+)")

EXACT = "exact"
NUMERIC_SUFFIX = "numeric_suffix"
ORDER_NUMBER = "order_number"


@dataclass
class OrderMatch:
    order: Order
    strategy: str
    ambiguous: bool = False
    candidates: int = 1

    def to_dict(self) -> dict:
        return {"strategy": self.strategy, "ambiguous": self.ambiguous, "candidates": self.candidates}


def normalize_order_id(identifier: str) -> str:
    return identifier.split("?", 1)[0].strip()


def numeric_suffix(value: str) -> Optional[str]:
    m = NUMERIC_SUFFIX_RE.search(value)
    return m.group(1) if m else None


def order_number_from(value: str) -> Optional[int]:
    m = ORDER_NUMBER_RE.search(value)
    return int(m.group(1)) if m else None


def _first(orders: Sequence[Order], strategy: str, predicate: Callable[[Order], bool]) -> Optional[OrderMatch]:
    hits: List[Order] = [o for o in orders if predicate(o)]
    if not hits:
        return None
    match = OrderMatch(order=hits[0], strategy=strategy, ambiguous=len(hits) > 1, candidates=len(hits))
    if match.ambiguous:
        logger.warning(
            "Ambiguous order lookup: %d orders match by %s, using %s",
            len(hits), strategy, hits[0].id,
        )
    return match


def reconcile_order(identifier: str, orders: Sequence[Order]) -> Optional[OrderMatch]:
    """Return the order `identifier` refers to, or None if none matches."""
    normalized = normalize_order_id(identifier)

    match = _first(orders, EXACT, lambda o: o.id == identifier or o.id == normalized)
    if match:
        return match

    wanted_suffix = numeric_suffix(normalized)
    if wanted_suffix is not None:
        match = _first(orders, NUMERIC_SUFFIX, lambda o: numeric_suffix(o.id) == wanted_suffix)
        if match:
            return match

    wanted_number = order_number_from(normalized)
    if wanted_number is not None:
        match = _first(orders, ORDER_NUMBER, lambda o: o.order_number == wanted_number)
        if match:
            return match

    logger.info("Order not found among %d candidates", len(orders))
    return None
