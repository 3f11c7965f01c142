from __future__ import annotations

import logging

from typing import Optional

from flask import Blueprint, current_app, request

from shopfront.app.common.errors import abort_json
from shopfront.app.extensions import storefront
from shopfront.app.models import Product
from shopfront.shopify.errors import ShopifyError

logger = logging.getLogger(__name__)

bp = Blueprint("catalog", __name__)


@bp.get("/products")
def list_products():
    """GET /api/products - Catalog listing.

    Query params:
      - limit (capped at PRODUCTS_PAGE_SIZE)
    """
    page_size = current_app.config.get("PRODUCTS_PAGE_SIZE", 50)
    try:
        limit = min(int(request.args.get("limit", page_size)), page_size)
    except ValueError:
        abort_json(400, "validation_error", "limit must be an integer")
    if limit < 1:
        abort_json(400, "validation_error", "limit must be positive")

    products = storefront.api.get_products(limit)
    return {"items": [p.to_dict() for p in products], "count": len(products)}, 200


def find_product(identifier: str) -> Optional[Product]:
    """Resolve a product link: handle, 1-based listing position, or global id.

    Positions are only stable for the first PRODUCTS_PAGE_SIZE products.
    """
    api = storefront.api
    if identifier.startswith("gid://"):
        return api.get_product_by_id(identifier)

    product = api.get_product_by_handle(identifier)
    if product is None and identifier.isdigit() and int(identifier) > 0:
        position = int(identifier)
        listing = api.get_products(current_app.config.get("PRODUCTS_PAGE_SIZE", 50))
        product = next((p for p in listing if p.numeric_id == position), None)
    return product


@bp.get("/products/<path:identifier>")
def get_product(identifier: str):
    """GET /api/products/<handle|position|gid> - Product with all variants."""
    product = find_product(identifier)
    if product is None:
        abort_json(404, "not_found", "Product not found")
    return product.to_dict(), 200


@bp.get("/shop")
def shop():
    """GET /api/shop - Store name and logo, with a configured fallback name."""
    logo = current_app.config.get("STORE_LOGO_URL")
    try:
        info = storefront.api.get_shop()
    except ShopifyError as e:
        logger.warning("Shop info unavailable, using STORE_NAME: %s", e.message)
        return {"name": current_app.config.get("STORE_NAME", "Store"), "logo": logo}, 200

    return {"name": info.name, "description": info.description, "logo": logo}, 200
