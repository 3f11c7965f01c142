from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from shopfront.app.models import AccessToken, Address, Checkout, Customer, Order, OrderDetail, Product, ShopInfo, Variant
from shopfront.shopify import queries
from shopfront.shopify import transform
from shopfront.shopify.client import GraphQLClient
from shopfront.shopify.errors import AuthenticationError, MalformedResponse, UserError

logger = logging.getLogger(__name__)

ADDRESS_FIELDS = {
    "first_name": "firstName",
    "last_name": "lastName",
    "address1": "address1",
    "address2": "address2",
    "city": "city",
    "province": "province",
    "zip": "zip",
    "country": "country",
    "phone": "phone",
}

# customer_info key -> cart attribute key carried into checkout
CHECKOUT_ATTRIBUTES = [
    ("first_name", "_customer_first_name"),
    ("last_name", "_customer_last_name"),
    ("address1", "_shipping_address1"),
    ("address2", "_shipping_address2"),
    ("city", "_shipping_city"),
    ("province", "_shipping_province"),
    ("zip", "_shipping_zip"),
    ("country", "_shipping_country"),
    ("phone", "_customer_phone"),
]


def _payload(data: Dict[str, Any], key: str) -> Dict[str, Any]:
    value = data.get(key)
    if not isinstance(value, dict):
        raise MalformedResponse(f"Storefront API response has no {key}")
    return value


def _describe_user_error(err: Dict[str, Any]) -> str:
    code = err.get("code")
    if code == "TAKEN":
        return "This email is already registered. Please use a different email or try logging in."
    if code == "INVALID":
        field = ", ".join(err.get("field") or []) or "input"
        return f"Invalid {field}: {err.get('message')}"
    return err.get("message") or f"Error: {code}"


def _check_user_errors(errors: List[Dict[str, Any]] | None, fallback: str, sep: str = ", ") -> None:
    if errors:
        message = sep.join(_describe_user_error(e) for e in errors)
        raise UserError(message or fallback, errors)


def mailing_address_input(address: Dict[str, Any]) -> Dict[str, Any]:
    # blank optional fields go up as null, not ""
    return {camel: (address.get(snake) or None) for snake, camel in ADDRESS_FIELDS.items()}


class StorefrontAPI:
    """Operations against the Storefront API, returning view models."""

    def __init__(self, client: GraphQLClient, variants_first: int = 250):
        self.client = client
        self.variants_first = variants_first

    # --- Catalog ---
    def get_products(self, first: int = 50) -> List[Product]:
        data = self.client.execute(
            queries.PRODUCTS_QUERY, {"first": first, "variantsFirst": self.variants_first}, "getProducts"
        )
        products = _payload(data, "products")
        return [transform.flatten_product(node, i) for i, node in enumerate(transform.nodes(products))]

    def get_product_by_handle(self, handle: str) -> Optional[Product]:
        data = self.client.execute(
            queries.PRODUCT_QUERY, {"handle": handle, "variantsFirst": self.variants_first}, "getProduct"
        )
        node = data.get("product")
        return transform.flatten_product(node) if node else None

    def get_product_by_id(self, product_id: str) -> Optional[Product]:
        data = self.client.execute(
            queries.PRODUCT_BY_ID_QUERY, {"id": product_id, "variantsFirst": self.variants_first}, "getProductById"
        )
        node = data.get("product")
        return transform.flatten_product(node) if node else None

    def get_variant(self, variant_id: str) -> Optional[Variant]:
        data = self.client.execute(queries.VARIANT_QUERY, {"id": variant_id}, "getVariant")
        node = data.get("node")
        # node() resolves any global id; anything without a price isn't a variant
        if not node or "price" not in node:
            return None
        return transform.flatten_variant(node)

    def get_shop(self) -> ShopInfo:
        data = self.client.execute(queries.SHOP_QUERY, None, "getShop")
        return transform.flatten_shop(_payload(data, "shop"))

    # --- Customers ---
    def create_customer(
        self,
        first_name: str,
        last_name: str,
        email: str,
        password: str,
        phone: str | None = None,
        accepts_marketing: bool = False,
    ) -> Customer:
        data = self.client.execute(
            queries.CUSTOMER_CREATE_MUTATION,
            {
                "input": {
                    "firstName": first_name,
                    "lastName": last_name,
                    "email": email,
                    "password": password,
                    "phone": phone or None,
                    "acceptsMarketing": bool(accepts_marketing),
                }
            },
            "customerCreate",
        )
        result = _payload(data, "customerCreate")
        errors = result.get("customerUserErrors")
        if errors:
            logger.warning("customerCreate rejected: %s", [e.get("code") for e in errors])
        _check_user_errors(errors, "Failed to create customer", sep=" ")
        if not result.get("customer"):
            raise UserError("Failed to create customer")
        return transform.flatten_customer(result["customer"])

    def create_access_token(self, email: str, password: str) -> AccessToken:
        data = self.client.execute(
            queries.CUSTOMER_ACCESS_TOKEN_CREATE_MUTATION,
            {"input": {"email": email, "password": password}},
            "customerAccessTokenCreate",
        )
        result = _payload(data, "customerAccessTokenCreate")
        errors = result.get("customerUserErrors") or []
        if errors:
            first = errors[0]
            if first.get("code") == "UNIDENTIFIED_CUSTOMER" or not first.get("message"):
                raise AuthenticationError("Invalid email or password")
            raise AuthenticationError(first["message"])
        if not result.get("customerAccessToken"):
            raise AuthenticationError("Failed to create access token")
        return transform.flatten_access_token(result["customerAccessToken"])

    def delete_access_token(self, token: str) -> None:
        data = self.client.execute(
            queries.CUSTOMER_ACCESS_TOKEN_DELETE_MUTATION,
            {"customerAccessToken": token},
            "customerAccessTokenDelete",
        )
        result = _payload(data, "customerAccessTokenDelete")
        errors = result.get("userErrors") or []
        if errors:
            raise AuthenticationError(errors[0].get("message") or "Failed to delete access token")

    def get_customer(self, token: str) -> Optional[Customer]:
        data = self.client.execute(queries.CUSTOMER_QUERY, {"customerAccessToken": token}, "getCustomer")
        node = data.get("customer")
        return transform.flatten_customer(node) if node else None

    def _customer_node(self, data: Dict[str, Any]) -> Dict[str, Any]:
        # a null customer means the platform didn't accept the token
        node = data.get("customer")
        if not node:
            raise AuthenticationError("Invalid or expired access token")
        return node

    # --- Orders ---
    def get_orders(self, token: str, first: int = 10) -> List[Order]:
        data = self.client.execute(
            queries.CUSTOMER_ORDERS_QUERY, {"customerAccessToken": token, "first": first}, "getCustomerOrders"
        )
        customer = self._customer_node(data)
        return [transform.flatten_order(node) for node in transform.nodes(customer.get("orders"))]

    def get_order_details(self, token: str, first: int = 250) -> List[OrderDetail]:
        """One page of orders with full detail; the candidates for reconciliation."""
        data = self.client.execute(
            queries.CUSTOMER_ORDER_DETAILS_QUERY,
            {"customerAccessToken": token, "first": first},
            "getCustomerOrderDetails",
        )
        customer = self._customer_node(data)
        return [transform.flatten_order_detail(node) for node in transform.nodes(customer.get("orders"))]

    # --- Addresses ---
    def get_addresses(self, token: str) -> List[Address]:
        data = self.client.execute(
            queries.CUSTOMER_ADDRESSES_QUERY, {"customerAccessToken": token}, "getCustomerAddresses"
        )
        customer = self._customer_node(data)
        default_id = (customer.get("defaultAddress") or {}).get("id")
        return [transform.flatten_address(node, default_id) for node in transform.nodes(customer.get("addresses"))]

    def create_address(self, token: str, address: Dict[str, Any]) -> Address:
        data = self.client.execute(
            queries.CUSTOMER_ADDRESS_CREATE_MUTATION,
            {"customerAccessToken": token, "address": mailing_address_input(address)},
            "customerAddressCreate",
        )
        result = _payload(data, "customerAddressCreate")
        _check_user_errors(result.get("customerUserErrors"), "Failed to create address")
        if not result.get("customerAddress"):
            raise UserError("Failed to create address")
        return transform.flatten_address(result["customerAddress"])

    def update_address(self, token: str, address_id: str, address: Dict[str, Any]) -> Address:
        data = self.client.execute(
            queries.CUSTOMER_ADDRESS_UPDATE_MUTATION,
            {"customerAccessToken": token, "id": address_id, "address": mailing_address_input(address)},
            "customerAddressUpdate",
        )
        result = _payload(data, "customerAddressUpdate")
        _check_user_errors(result.get("customerUserErrors"), "Failed to update address")
        if not result.get("customerAddress"):
            raise UserError("Failed to update address")
        return transform.flatten_address(result["customerAddress"])

    def delete_address(self, token: str, address_id: str) -> Optional[str]:
        data = self.client.execute(
            queries.CUSTOMER_ADDRESS_DELETE_MUTATION,
            {"customerAccessToken": token, "id": address_id},
            "customerAddressDelete",
        )
        result = _payload(data, "customerAddressDelete")
        _check_user_errors(result.get("customerUserErrors"), "Failed to delete address")
        return result.get("deletedCustomerAddressId")

    # --- Checkout ---
    def create_cart(
        self,
        lines: List[Dict[str, Any]],
        customer_info: Dict[str, Any] | None = None,
        customer_token: str | None = None,
    ) -> Checkout:
        if not lines:
            raise UserError("Cannot create cart with empty items")

        cart_input: Dict[str, Any] = {
            "lines": [{"merchandiseId": line["variant_id"], "quantity": int(line["quantity"])} for line in lines]
        }

        info = customer_info or {}
        buyer: Dict[str, Any] = {}
        if info.get("email"):
            buyer["email"] = info["email"]
        if customer_token:
            buyer["customerAccessToken"] = customer_token
        if buyer:
            cart_input["buyerIdentity"] = buyer

        attributes = [{"key": attr, "value": str(info[key])} for key, attr in CHECKOUT_ATTRIBUTES if info.get(key)]
        if attributes:
            cart_input["attributes"] = attributes

        data = self.client.execute(queries.CART_CREATE_MUTATION, {"input": cart_input}, "cartCreate")
        result = _payload(data, "cartCreate")
        errors = result.get("userErrors") or []
        if errors:
            logger.warning("cartCreate rejected %d line(s)", len(errors))
            message = " ".join(e.get("message") or f"Error in {', '.join(e.get('field') or []) or 'input'}" for e in errors)
            raise UserError(message or "Failed to create cart", errors)
        if not result.get("cart"):
            raise UserError("Failed to create cart")
        return transform.flatten_checkout(result["cart"])
