"""Flat view models built from Storefront API payloads.

Nothing here is stored server-side; the platform owns the records. These
are what the transformer produces and what routes and templates consume.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple


class ViewModel:
    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        for key, value in data.items():
            if isinstance(value, datetime):
                data[key] = value.isoformat()
        return data


@dataclass
class Variant(ViewModel):
    id: str
    title: str
    price: str  # formatted, e.g. "$10.00"
    price_minor: int
    currency_code: str
    sku: Optional[str] = None
    compare_at_price: Optional[str] = None
    available_for_sale: bool = True
    quantity_available: Optional[int] = None
    selected_options: List[Tuple[str, str]] = field(default_factory=list)
    image: Optional[str] = None
    weight: Optional[float] = None
    weight_unit: Optional[str] = None
    product_title: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["selected_options"] = [{"name": n, "value": v} for n, v in self.selected_options]
        return data


@dataclass
class Product(ViewModel):
    id: str
    numeric_id: int  # 1-based position in the listing, kept for old links
    handle: str
    name: str
    price: str
    currency_code: str
    description: str
    long_description: str
    image: str
    images: List[str] = field(default_factory=list)
    in_stock: bool = False
    variants: List[Variant] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["variants"] = [v.to_dict() for v in self.variants]
        return data


@dataclass
class Customer(ViewModel):
    id: str
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None
    accepts_marketing: bool = False

    def summary(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "email": self.email,
            "phone": self.phone,
        }


@dataclass
class AccessToken(ViewModel):
    access_token: str
    expires_at: datetime


@dataclass
class AuthSession:
    """A logged-in customer as held in client storage."""

    token: str
    expires_at: datetime
    customer: Dict[str, Any]

    def is_expired(self, now: datetime | None = None) -> bool:
        now = now or datetime.now(timezone.utc)
        return self.expires_at <= now

    def to_dict(self) -> Dict[str, Any]:
        return {"token": self.token, "expires_at": self.expires_at.isoformat(), "customer": self.customer}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AuthSession":
        return cls(
            token=data["token"],
            expires_at=parse_timestamp(data["expires_at"]),
            customer=dict(data.get("customer") or {}),
        )


@dataclass
class Address(ViewModel):
    id: str
    address1: Optional[str] = None
    address2: Optional[str] = None
    city: Optional[str] = None
    province: Optional[str] = None
    zip: Optional[str] = None
    country: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None
    is_default: bool = False


@dataclass
class OrderLine(ViewModel):
    title: str
    quantity: int
    price: str  # line total, platform decimal string
    currency_code: str
    image: Optional[str] = None
    variant_title: Optional[str] = None


@dataclass
class Order(ViewModel):
    id: str
    name: str
    order_number: int
    created_at: str
    total_price: str
    currency_code: str
    fulfillment_status: Optional[str] = None
    financial_status: Optional[str] = None
    line_items: List[OrderLine] = field(default_factory=list)


@dataclass
class OrderDetail(Order):
    subtotal_price: Optional[str] = None
    total_tax: Optional[str] = None
    total_shipping_price: Optional[str] = None
    shipping_address: Optional[Dict[str, Any]] = None
    billing_address: Optional[Dict[str, Any]] = None


@dataclass
class Checkout(ViewModel):
    id: str
    web_url: str
    total_amount: str
    currency_code: str
    total_quantity: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "web_url": self.web_url,
            "total_price": {"amount": self.total_amount, "currency_code": self.currency_code},
            "total_quantity": self.total_quantity,
        }


@dataclass
class ShopInfo(ViewModel):
    name: str
    description: Optional[str] = None
    primary_domain: Optional[str] = None


def parse_timestamp(value: str) -> datetime:
    """Parse the platform's ISO-8601 timestamps ("...Z" included)."""
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed
