from __future__ import annotations

import logging
from typing import Any, Dict, List

from flask import Blueprint, request

from shopfront.app.common.auth import resolve_credential
from shopfront.app.common.errors import abort_json
from shopfront.app.common.validation import get_quantity
from shopfront.app.extensions import storefront
from shopfront.app.models import Checkout
from shopfront.modules.cart.routes import load_cart

logger = logging.getLogger(__name__)

bp = Blueprint("checkout", __name__)

CUSTOMER_INFO_FIELDS = ["email", "first_name", "last_name", "address1", "address2", "city", "province", "zip", "country", "phone"]
DEFAULT_COUNTRY = "US"


def validate_line_items(raw: Any) -> List[Dict[str, Any]]:
    if not raw or not isinstance(raw, list):
        abort_json(400, "empty_cart", "Cart is empty. Please add items to your cart.")

    lines = []
    for item in raw:
        if not isinstance(item, dict) or not item.get("variant_id") or "quantity" not in item:
            abort_json(400, "validation_error", "Invalid line item structure. Each item must have variant_id and quantity.")
        qty = get_quantity(item)
        if qty < 1:
            abort_json(400, "validation_error", "Line item quantity must be at least 1")
        lines.append({"variant_id": str(item["variant_id"]), "quantity": qty})
    return lines


def clean_customer_info(raw: Any) -> Dict[str, Any] | None:
    if not raw:
        return None
    if not isinstance(raw, dict):
        abort_json(400, "validation_error", "customer_info must be an object")
    info = {k: str(raw[k]).strip() for k in CUSTOMER_INFO_FIELDS if raw.get(k)}
    info.setdefault("country", DEFAULT_COUNTRY)
    return info


def start_checkout(lines: List[Dict[str, Any]], customer_info: Dict[str, Any] | None) -> Checkout:
    token = resolve_credential(required=False)
    checkout = storefront.api.create_cart(lines, customer_info, customer_token=token)
    logger.info("Checkout %s created with %d line(s)", checkout.id, len(lines))
    return checkout


@bp.post("/checkout/create")
def create_checkout():
    """POST /api/checkout/create - Hand the cart off to hosted checkout.

    Request JSON:
      {"line_items": [{"variant_id": "...", "quantity": 2}], "customer_info": {...}}

    Without `line_items` the session cart is used.
    """
    data = request.get_json(silent=True)
    if data is not None and not isinstance(data, dict):
        abort_json(400, "invalid_json", "Malformed JSON body")
    data = data or {}

    raw_lines = data["line_items"] if "line_items" in data else load_cart().line_items()
    lines = validate_line_items(raw_lines)
    checkout = start_checkout(lines, clean_customer_info(data.get("customer_info")))
    return {"success": True, "checkout": checkout.to_dict()}, 200
