import os

from dotenv import load_dotenv

load_dotenv()


class Config:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret")
    JSON_SORT_KEYS = False

    # Shopify Storefront API
    SHOPIFY_STORE_DOMAIN = os.getenv("SHOPIFY_STORE_DOMAIN", "")
    SHOPIFY_STOREFRONT_ACCESS_TOKEN = os.getenv("SHOPIFY_STOREFRONT_ACCESS_TOKEN", "")
    SHOPIFY_API_VERSION = os.getenv("SHOPIFY_API_VERSION", "2024-01")
    SHOPIFY_TIMEOUT = float(os.getenv("SHOPIFY_TIMEOUT", "10"))

    # Storefront presentation
    STORE_NAME = os.getenv("STORE_NAME", "Store")
    STORE_LOGO_URL = os.getenv("STORE_LOGO_URL") or None
    DEFAULT_CURRENCY = os.getenv("DEFAULT_CURRENCY", "USD")

    # Page sizes for upstream connections
    PRODUCTS_PAGE_SIZE = int(os.getenv("PRODUCTS_PAGE_SIZE", "50"))
    ORDERS_PAGE_SIZE = int(os.getenv("ORDERS_PAGE_SIZE", "50"))
    ORDER_LOOKUP_PAGE_SIZE = int(os.getenv("ORDER_LOOKUP_PAGE_SIZE", "250"))

    # Comma-separated list
    CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "").split(",") if o.strip()]

    # The session cookie is the only client-side store (cart + auth)
    SESSION_COOKIE_SAMESITE = "Lax"
    PERMANENT_SESSION_LIFETIME = int(os.getenv("SESSION_LIFETIME_SECONDS", str(365 * 24 * 3600)))
    SESSION_MAX_BYTES = int(os.getenv("SESSION_MAX_BYTES", "3800"))

    APP_HOST = os.getenv("APP_HOST", "0.0.0.0")
    APP_PORT = int(os.getenv("APP_PORT", "8080"))
