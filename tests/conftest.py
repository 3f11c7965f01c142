import os
import sys
from datetime import datetime, timedelta, timezone

import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from shopfront.app.common.money import format_amount, to_minor
from shopfront.app.config import Config
from shopfront.app.factory import create_app
from shopfront.app.models import (
    AccessToken,
    Address,
    Checkout,
    Customer,
    OrderDetail,
    OrderLine,
    Product,
    ShopInfo,
    Variant,
)
from shopfront.shopify.errors import AuthenticationError, UpstreamError, UserError


class TestConfig(Config):
    __test__ = False

    TESTING = True
    SECRET_KEY = "test-secret"
    SHOPIFY_STORE_DOMAIN = "test-shop.myshopify.com"
    SHOPIFY_STOREFRONT_ACCESS_TOKEN = "storefront-token"
    STORE_NAME = "Test Store"
    STORE_LOGO_URL = None
    DEFAULT_CURRENCY = "USD"


def make_variant(variant_id="gid://shopify/ProductVariant/1", price="10.00", currency="USD",
                 title="Default Title", available=True, product_title="Gift Box"):
    return Variant(
        id=variant_id,
        title=title,
        price=format_amount(price, currency),
        price_minor=to_minor(price, currency),
        currency_code=currency,
        available_for_sale=available,
        selected_options=[("Size", title)],
        product_title=product_title,
    )


def make_order(order_id, number, total="25.00"):
    return OrderDetail(
        id=order_id,
        name=f"#{number}",
        order_number=number,
        created_at="2026-01-15T10:00:00Z",
        total_price=total,
        currency_code="USD",
        fulfillment_status="FULFILLED",
        financial_status="PAID",
        line_items=[OrderLine(title="Gift Box", quantity=1, price=total, currency_code="USD")],
        subtotal_price=total,
        total_tax="0.0",
        total_shipping_price="0.0",
    )


class FakeStorefront:
    """In-memory stand-in for StorefrontAPI used by route tests."""

    def __init__(self):
        small = make_variant("gid://shopify/ProductVariant/1", "10.00", title="Small")
        large = make_variant("gid://shopify/ProductVariant/2", "15.50", title="Large")
        sold_out = make_variant("gid://shopify/ProductVariant/3", "99.00", title="Huge", available=False)
        self.variants = {v.id: v for v in (small, large, sold_out)}
        self.products = [
            Product(
                id="gid://shopify/Product/10",
                numeric_id=1,
                handle="gift-box",
                name="Gift Box",
                price="$10.00",
                currency_code="USD",
                description="A sturdy box.",
                long_description="A sturdy box.\n\nMade of card.",
                image="https://cdn.example.com/box.jpg",
                images=["https://cdn.example.com/box.jpg"],
                in_stock=True,
                variants=[small, large, sold_out],
            )
        ]
        self.shop = ShopInfo(name="Boxed Goods")
        self.shop_error = None
        self.accounts = {}
        self.tokens = {}
        self.orders = [
            make_order("gid://shopify/Order/5550001", 1001),
            make_order("gid://shopify/Order/5550002", 1002),
        ]
        self.addresses = {}
        self.carts = []
        self.deleted_tokens = []
        self._seq = 0

    def _next(self):
        self._seq += 1
        return self._seq

    # --- Catalog ---
    def get_products(self, first=50):
        return self.products[:first]

    def get_product_by_handle(self, handle):
        return next((p for p in self.products if p.handle == handle), None)

    def get_product_by_id(self, product_id):
        return next((p for p in self.products if p.id == product_id), None)

    def get_variant(self, variant_id):
        return self.variants.get(variant_id)

    def get_shop(self):
        if self.shop_error:
            raise self.shop_error
        return self.shop

    # --- Customers ---
    def create_customer(self, first_name, last_name, email, password, phone=None, accepts_marketing=False):
        if email in self.accounts:
            raise UserError(
                "This email is already registered. Please use a different email or try logging in.",
                [{"code": "TAKEN", "field": ["input", "email"], "message": "Email has already been taken"}],
            )
        customer = Customer(
            id=f"gid://shopify/Customer/{self._next()}",
            email=email,
            first_name=first_name,
            last_name=last_name,
            phone=phone,
        )
        self.accounts[email] = (password, customer)
        return customer

    def create_access_token(self, email, password):
        account = self.accounts.get(email)
        if account is None or account[0] != password:
            raise AuthenticationError("Invalid email or password")
        token = f"customer-token-{self._next()}"
        self.tokens[token] = account[1]
        return AccessToken(access_token=token, expires_at=datetime.now(timezone.utc) + timedelta(days=30))

    def delete_access_token(self, token):
        if token not in self.tokens:
            raise AuthenticationError("Access token does not exist")
        self.deleted_tokens.append(token)
        del self.tokens[token]

    def get_customer(self, token):
        return self.tokens.get(token)

    def _require(self, token):
        if token not in self.tokens:
            raise AuthenticationError("Invalid or expired access token")

    # --- Orders ---
    def get_orders(self, token, first=10):
        self._require(token)
        return self.orders[:first]

    def get_order_details(self, token, first=250):
        self._require(token)
        return self.orders[:first]

    # --- Addresses ---
    def get_addresses(self, token):
        self._require(token)
        return list(self.addresses.get(token, []))

    def create_address(self, token, address):
        self._require(token)
        created = Address(
            id=f"gid://shopify/MailingAddress/{self._next()}?model_name=CustomerAddress",
            **{k: address.get(k) for k in ("address1", "address2", "city", "province", "zip", "country",
                                           "first_name", "last_name", "phone")},
        )
        self.addresses.setdefault(token, []).append(created)
        return created

    def update_address(self, token, address_id, address):
        self._require(token)
        for i, existing in enumerate(self.addresses.get(token, [])):
            if existing.id == address_id:
                updated = Address(id=address_id, **{k: address.get(k) for k in ("address1", "city", "zip", "country",
                                                                               "first_name", "last_name")})
                self.addresses[token][i] = updated
                return updated
        raise UserError("Address does not exist")

    def delete_address(self, token, address_id):
        self._require(token)
        self.addresses[token] = [a for a in self.addresses.get(token, []) if a.id != address_id]
        return address_id

    # --- Checkout ---
    def create_cart(self, lines, customer_info=None, customer_token=None):
        if not lines:
            raise UserError("Cannot create cart with empty items")
        unknown = [line["variant_id"] for line in lines if line["variant_id"] not in self.variants]
        if unknown:
            raise UserError("The merchandise with id %s does not exist." % unknown[0])
        self.carts.append({"lines": lines, "customer_info": customer_info, "customer_token": customer_token})
        total = sum(self.variants[line["variant_id"]].price_minor * line["quantity"] for line in lines)
        return Checkout(
            id=f"gid://shopify/Cart/c{len(self.carts)}",
            web_url=f"https://test-shop.myshopify.com/cart/c/c{len(self.carts)}",
            total_amount=f"{total / 100:.2f}",
            currency_code="USD",
            total_quantity=sum(line["quantity"] for line in lines),
        )


@pytest.fixture()
def fake():
    return FakeStorefront()


@pytest.fixture()
def app(fake):
    app = create_app(TestConfig)
    app.extensions["storefront"] = fake
    return app


@pytest.fixture()
def client(app):
    with app.test_client() as client:
        yield client


@pytest.fixture()
def customer(fake):
    """A registered customer: (email, password)."""
    fake.create_customer("Demo", "User", "user@example.com", "Password123!")
    return "user@example.com", "Password123!"


@pytest.fixture()
def auth_headers(client, customer):
    email, password = customer
    r = client.post("/api/auth/login", json={"email": email, "password": password})
    assert r.status_code == 200
    return {"X-Access-Token": r.json["access_token"], "X-Access-Token-Expires-At": r.json["expires_at"]}


@pytest.fixture()
def broken_upstream(fake):
    """Make every catalog call fail as if the network were down."""
    def fail(*args, **kwargs):
        raise UpstreamError("Could not reach the store. Please try again.")

    fake.get_products = fail
    fake.get_shop = fail
    return fake
