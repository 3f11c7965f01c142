from __future__ import annotations

import logging

from flask import Blueprint, current_app, g, request

from shopfront.app.common.auth import token_required
from shopfront.app.common.errors import abort_json
from shopfront.app.common.validation import get_json, require_fields
from shopfront.app.extensions import storefront
from shopfront.modules.account.reconcile import normalize_order_id, reconcile_order

logger = logging.getLogger(__name__)

bp = Blueprint("account", __name__)

ADDRESS_REQUIRED = ["first_name", "last_name", "address1", "city", "zip", "country"]


def _require_known_address(address_id: str) -> None:
    known = {a.id for a in storefront.api.get_addresses(g.access_token)}
    if address_id not in known:
        abort_json(404, "not_found", "Address not found")


# --- Addresses ---
@bp.get("/account/addresses")
@token_required
def list_addresses():
    addresses = storefront.api.get_addresses(g.access_token)
    return {"success": True, "addresses": [a.to_dict() for a in addresses]}, 200


@bp.post("/account/addresses")
@token_required
def create_address():
    data = get_json()
    require_fields(data, ADDRESS_REQUIRED)

    address = storefront.api.create_address(g.access_token, data)
    return {"success": True, "address": address.to_dict()}, 201


@bp.put("/account/addresses")
@token_required
def update_address():
    data = get_json()
    address_id = str(data.get("id") or "").strip()
    if not address_id:
        abort_json(400, "validation_error", "Address ID is required")
    require_fields(data, ADDRESS_REQUIRED)

    _require_known_address(address_id)
    fields = {k: v for k, v in data.items() if k != "id"}
    address = storefront.api.update_address(g.access_token, address_id, fields)
    return {"success": True, "address": address.to_dict()}, 200


@bp.delete("/account/addresses")
@token_required
def delete_address():
    address_id = (request.args.get("id") or "").strip()
    if not address_id:
        abort_json(400, "validation_error", "Address ID is required")

    _require_known_address(address_id)
    storefront.api.delete_address(g.access_token, address_id)
    return {"success": True, "message": "Address deleted successfully"}, 200


# --- Orders ---
@bp.get("/account/orders")
@token_required
def list_orders():
    first = current_app.config.get("ORDERS_PAGE_SIZE", 50)
    orders = storefront.api.get_orders(g.access_token, first)
    return {"orders": [o.to_dict() for o in orders]}, 200


@bp.get("/account/orders/<path:order_id>")
@token_required
def get_order(order_id: str):
    """GET /api/account/orders/<id> - One order, matched against the latest page."""
    wanted = normalize_order_id(order_id)
    if not wanted:
        abort_json(400, "validation_error", "Order ID is required")

    first = current_app.config.get("ORDER_LOOKUP_PAGE_SIZE", 250)
    candidates = storefront.api.get_order_details(g.access_token, first)
    match = reconcile_order(order_id, candidates)
    if match is None:
        abort_json(404, "not_found", "Order not found", {"order_id": wanted})

    return {"order": match.order.to_dict(), "match": match.to_dict()}, 200
