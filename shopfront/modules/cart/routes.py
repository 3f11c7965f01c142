from __future__ import annotations

from flask import Blueprint, current_app

from shopfront.app.common.auth import client_store
from shopfront.app.common.errors import abort_json
from shopfront.app.common.validation import get_json, get_quantity, require_fields
from shopfront.app.extensions import storefront
from shopfront.modules.cart.state import CartState, MAX_QUANTITY

bp = Blueprint("cart", __name__)


def load_cart() -> CartState:
    return CartState.load(client_store(), current_app.config.get("DEFAULT_CURRENCY", "USD"))


def cart_response(cart: CartState) -> dict:
    return {
        "items": [
            {
                **line.to_dict(),
                "line_total_minor": line.line_total_minor,
            }
            for line in cart
        ],
        "summary": cart.summary(),
    }


@bp.get("/cart")
def get_cart():
    return cart_response(load_cart()), 200


@bp.post("/cart/items")
def add_to_cart():
    data = get_json()
    require_fields(data, ["variant_id"])
    qty = get_quantity(data) if "quantity" in data else 1
    if qty < 1:
        abort_json(400, "validation_error", "Quantity must be at least 1")

    variant = storefront.api.get_variant(str(data["variant_id"]))
    if variant is None:
        abort_json(404, "not_found", "Product variant not found")
    if not variant.available_for_sale:
        abort_json(409, "conflict", "This option is sold out")

    cart = load_cart()
    cart.add_line(variant, min(qty, MAX_QUANTITY))
    return cart_response(cart), 201


@bp.route("/cart/items/<path:variant_id>", methods=["PUT", "PATCH"])
def update_cart_item(variant_id: str):
    """Replace a line's quantity; 0 or less removes it, over 99 is clamped."""
    data = get_json()
    require_fields(data, ["quantity"])
    qty = get_quantity(data)

    cart = load_cart()
    if cart.get(variant_id) is None:
        abort_json(404, "not_found", "Cart item not found")
    cart.set_quantity(variant_id, qty)
    return cart_response(cart), 200


@bp.delete("/cart/items/<path:variant_id>")
def delete_cart_item(variant_id: str):
    cart = load_cart()
    if cart.get(variant_id) is None:
        return {"message": "no_op"}, 200
    cart.remove_line(variant_id)
    return cart_response(cart), 200


@bp.delete("/cart")
def clear_cart():
    cart = load_cart()
    cart.clear()
    return cart_response(cart), 200
