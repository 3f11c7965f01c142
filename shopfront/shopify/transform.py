"""Flatten Storefront API edge/node payloads into view models.

Every entity has one flattening function. Shape problems (a missing key, a
null where an object was queried, a non-numeric amount) are raised as
MalformedResponse here, so nothing downstream sees half-built data.
"""

from __future__ import annotations

import functools
from typing import Any, Callable, Dict, List, Optional, TypeVar

from shopfront.app.common.money import format_amount, to_minor
from shopfront.app.models import (
    AccessToken,
    Address,
    Checkout,
    Customer,
    Order,
    OrderDetail,
    OrderLine,
    Product,
    ShopInfo,
    Variant,
    parse_timestamp,
)
from shopfront.shopify.errors import MalformedResponse

T = TypeVar("T")

PLACEHOLDER_IMAGE = "/static/placeholder.svg"


def boundary(entity: str) -> Callable[[Callable[..., T]], Callable[..., T]]:
    def decorator(fn: Callable[..., T]) -> Callable[..., T]:
        @functools.wraps(fn)
        def wrapper(*args, **kwargs) -> T:
            try:
                return fn(*args, **kwargs)
            except MalformedResponse:
                raise
            except (KeyError, TypeError, ValueError, AttributeError) as e:
                raise MalformedResponse(f"Unexpected {entity} payload from the store") from e

        return wrapper

    return decorator


@boundary("connection")
def nodes(connection: Optional[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """[edge.node for edge in connection.edges]; a null connection is empty."""
    if connection is None:
        return []
    return [edge["node"] for edge in connection["edges"]]


def _image_url(image: Optional[Dict[str, Any]]) -> Optional[str]:
    return image["url"] if image else None


@boundary("variant")
def flatten_variant(node: Dict[str, Any]) -> Variant:
    price = node["price"]
    currency = price["currencyCode"]
    compare_at = node.get("compareAtPrice")
    product = node.get("product") or {}
    return Variant(
        id=node["id"],
        title=node["title"],
        sku=node.get("sku"),
        price=format_amount(price["amount"], currency),
        price_minor=to_minor(price["amount"], currency),
        currency_code=currency,
        compare_at_price=format_amount(compare_at["amount"], compare_at["currencyCode"]) if compare_at else None,
        available_for_sale=bool(node.get("availableForSale")),
        quantity_available=node.get("quantityAvailable"),
        selected_options=[(o["name"], o["value"]) for o in node.get("selectedOptions") or []],
        image=_image_url(node.get("image")),
        weight=node.get("weight"),
        weight_unit=node.get("weightUnit"),
        product_title=product.get("title"),
    )


@boundary("product")
def flatten_product(node: Dict[str, Any], index: int = 0) -> Product:
    min_price = node["priceRange"]["minVariantPrice"]
    currency = min_price["currencyCode"]
    images = [img["url"] for img in nodes(node.get("images"))]
    variants = [flatten_variant(v) for v in nodes(node.get("variants"))]
    for v in variants:
        v.product_title = node["title"]

    # first paragraph is the teaser, the whole text is the long form
    description = node.get("description") or "No description available."
    parts = description.split("\n\n")

    return Product(
        id=node["id"],
        numeric_id=index + 1,
        handle=node["handle"],
        name=node["title"],
        price=format_amount(min_price["amount"], currency),
        currency_code=currency,
        description=parts[0] or description,
        long_description=description,
        image=images[0] if images else PLACEHOLDER_IMAGE,
        images=images,
        in_stock=any(v.available_for_sale for v in variants),
        variants=variants,
    )


@boundary("customer")
def flatten_customer(node: Dict[str, Any]) -> Customer:
    return Customer(
        id=node["id"],
        email=node["email"],
        first_name=node.get("firstName"),
        last_name=node.get("lastName"),
        phone=node.get("phone"),
        accepts_marketing=bool(node.get("acceptsMarketing")),
    )


@boundary("access token")
def flatten_access_token(node: Dict[str, Any]) -> AccessToken:
    return AccessToken(access_token=node["accessToken"], expires_at=parse_timestamp(node["expiresAt"]))


@boundary("address")
def flatten_address(node: Dict[str, Any], default_id: Optional[str] = None) -> Address:
    return Address(
        id=node["id"],
        address1=node.get("address1"),
        address2=node.get("address2"),
        city=node.get("city"),
        province=node.get("province"),
        zip=node.get("zip"),
        country=node.get("country"),
        first_name=node.get("firstName"),
        last_name=node.get("lastName"),
        phone=node.get("phone"),
        is_default=default_id is not None and node["id"] == default_id,
    )


@boundary("order line")
def flatten_order_line(node: Dict[str, Any]) -> OrderLine:
    # originalTotalPrice is already the line total
    total = node["originalTotalPrice"]
    variant = node.get("variant") or {}
    return OrderLine(
        title=node["title"],
        quantity=int(node["quantity"]),
        price=total["amount"],
        currency_code=total["currencyCode"],
        image=_image_url(variant.get("image")),
        variant_title=variant.get("title"),
    )


def _order_fields(node: Dict[str, Any]) -> Dict[str, Any]:
    total = node["totalPrice"]
    return dict(
        id=node["id"],
        name=node["name"],
        order_number=int(node["orderNumber"]),
        created_at=node["processedAt"],
        total_price=total["amount"],
        currency_code=total["currencyCode"],
        fulfillment_status=node.get("fulfillmentStatus"),
        financial_status=node.get("financialStatus"),
        line_items=[flatten_order_line(li) for li in nodes(node.get("lineItems"))],
    )


@boundary("order")
def flatten_order(node: Dict[str, Any]) -> Order:
    return Order(**_order_fields(node))


def _amount(money: Optional[Dict[str, Any]]) -> Optional[str]:
    return money["amount"] if money else None


def _mailing_address(node: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    if node is None:
        return None
    keys = ("firstName", "lastName", "address1", "address2", "city", "province", "zip", "country", "phone")
    snake = ("first_name", "last_name", "address1", "address2", "city", "province", "zip", "country", "phone")
    return {s: node.get(k) for k, s in zip(keys, snake)}


@boundary("order")
def flatten_order_detail(node: Dict[str, Any]) -> OrderDetail:
    return OrderDetail(
        **_order_fields(node),
        subtotal_price=_amount(node.get("subtotalPrice")),
        total_tax=_amount(node.get("totalTax")),
        total_shipping_price=_amount(node.get("totalShippingPrice")),
        shipping_address=_mailing_address(node.get("shippingAddress")),
        billing_address=_mailing_address(node.get("billingAddress")),
    )


@boundary("checkout")
def flatten_checkout(node: Dict[str, Any]) -> Checkout:
    total = node["cost"]["totalAmount"]
    return Checkout(
        id=node["id"],
        web_url=node["checkoutUrl"],
        total_amount=total["amount"],
        currency_code=total["currencyCode"],
        total_quantity=int(node.get("totalQuantity") or 0),
    )


@boundary("shop")
def flatten_shop(node: Dict[str, Any]) -> ShopInfo:
    domain = node.get("primaryDomain") or {}
    return ShopInfo(name=node["name"], description=node.get("description"), primary_domain=domain.get("url"))
