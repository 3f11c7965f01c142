from __future__ import annotations

from flask import Flask, current_app
from flask_cors import CORS

from shopfront.shopify.client import GraphQLClient
from shopfront.shopify.config import ShopConfig
from shopfront.shopify.storefront import StorefrontAPI


class Storefront:
    """Holds the per-app StorefrontAPI in `app.extensions["storefront"]`.

    Tests swap in a fake by assigning that key after `create_app`.
    """

    def __init__(self, app: Flask | None = None):
        if app is not None:
            self.init_app(app)

    def init_app(self, app: Flask) -> None:
        client = GraphQLClient(ShopConfig.from_mapping(app.config))
        app.extensions["storefront"] = StorefrontAPI(client)

    @property
    def api(self) -> StorefrontAPI:
        return current_app.extensions["storefront"]


# Singletons (initialized in app factory)
cors = CORS()
storefront = Storefront()
