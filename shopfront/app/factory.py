from __future__ import annotations

import logging
from datetime import timedelta

from flask import Flask, jsonify, render_template, request
from werkzeug.exceptions import HTTPException

from shopfront.app.api.register import register_api_blueprints
from shopfront.app.cli import cli_bp
from shopfront.app.common.auth import client_store, current_auth_session
from shopfront.app.common.errors import ApiError, error_payload
from shopfront.app.common.money import format_amount
from shopfront.app.common.request_context import current_request_id, init_request_id, mirror_request_id
from shopfront.app.common.storage import StorageError
from shopfront.app.config import Config
from shopfront.app.extensions import cors, storefront
from shopfront.app.ui import ui_bp
from shopfront.modules.cart.state import CartState
from shopfront.shopify.errors import ShopifyError


def _wants_json() -> bool:
    return request.path.startswith("/api")


def create_app(config_object: type[Config] = Config) -> Flask:
    app = Flask(__name__, instance_relative_config=True)
    app.config.from_object(config_object)
    app.permanent_session_lifetime = timedelta(seconds=app.config["PERMANENT_SESSION_LIFETIME"])

    # Basic logging
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s %(message)s")

    # Extensions
    storefront.init_app(app)
    cors.init_app(
        app,
        resources={r"/api/*": {"origins": app.config.get("CORS_ORIGINS") or "*"}},
        expose_headers=["X-Request-ID"],
    )

    # Request id
    @app.before_request
    def _before_request():
        init_request_id()

    app.after_request(mirror_request_id)

    # Health endpoint
    @app.get("/health")
    def health():
        return {"status": "ok"}, 200

    # Register API blueprints
    register_api_blueprints(app)

    # Pages
    app.register_blueprint(ui_bp)

    # CLI (flask cli shop-info)
    app.register_blueprint(cli_bp)

    app.add_template_filter(format_amount, "money")

    @app.context_processor
    def inject_nav():
        """Navbar data (customer + cart badge) for all templates."""
        store = client_store()
        auth = current_auth_session(store)
        cart = CartState.load(store, app.config.get("DEFAULT_CURRENCY", "USD"))
        return {
            "nav_customer": auth.customer if auth else None,
            "nav_cart_count": cart.total_items(),
            "store_name": app.config.get("STORE_NAME"),
            "store_logo": app.config.get("STORE_LOGO_URL"),
        }

    # Error handlers
    @app.errorhandler(ApiError)
    def handle_api_error(err: ApiError):
        return jsonify(err.to_dict(current_request_id())), err.status_code

    @app.errorhandler(ShopifyError)
    def handle_shopify_error(err: ShopifyError):
        if err.status_code >= 500:
            app.logger.error("Upstream failure on %s: %s", request.path, err.message)
        if _wants_json():
            return jsonify(error_payload(err.code, err.message, current_request_id())), err.status_code
        return render_template("error.html", message=err.message, status=err.status_code), err.status_code

    @app.errorhandler(StorageError)
    def handle_storage_error(err: StorageError):
        app.logger.error("Client storage write failed: %s", err)
        message = "Could not save your cart. Please remove some items and try again."
        if _wants_json():
            return jsonify(error_payload("storage_error", message, current_request_id())), 500
        return render_template("error.html", message=message, status=500), 500

    @app.errorhandler(HTTPException)
    def handle_http_exception(err: HTTPException):
        # Normalize Werkzeug errors into our JSON shape
        if _wants_json():
            payload = error_payload("http_error", err.description or err.name, current_request_id(), {"details": {"name": err.name}})
            return jsonify(payload), err.code or 500
        return render_template("error.html", message=err.description, status=err.code), err.code or 500

    @app.errorhandler(Exception)
    def handle_unexpected(err: Exception):
        app.logger.exception("Unhandled exception")
        if _wants_json():
            return jsonify(error_payload("internal_error", "Internal server error", current_request_id())), 500
        return render_template("error.html", message="Something went wrong.", status=500), 500

    return app
