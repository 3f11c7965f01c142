from flask import Flask

from shopfront.modules.account.routes import bp as account_bp
from shopfront.modules.auth.routes import bp as auth_bp
from shopfront.modules.cart.routes import bp as cart_bp
from shopfront.modules.catalog.routes import bp as catalog_bp
from shopfront.modules.checkout.routes import bp as checkout_bp
from shopfront.modules.contact.routes import bp as contact_bp


def register_api_blueprints(app: Flask) -> None:
    app.register_blueprint(auth_bp, url_prefix="/api")
    app.register_blueprint(account_bp, url_prefix="/api")
    app.register_blueprint(catalog_bp, url_prefix="/api")
    app.register_blueprint(cart_bp, url_prefix="/api")
    app.register_blueprint(checkout_bp, url_prefix="/api")
    app.register_blueprint(contact_bp, url_prefix="/api")

    # Root API document
    @app.get("/api")
    def api_index():
        return {
            "name": "Shopfront API",
            "version": "0.1.0",
            "endpoints": {
                "auth": ["/auth/register", "/auth/login", "/auth/logout", "/auth/me"],
                "account": ["/account/addresses", "/account/orders", "/account/orders/<id>"],
                "catalog": ["/products", "/products/<handle-or-id>", "/shop"],
                "cart": ["/cart", "/cart/items", "/cart/items/<variant_id>"],
                "checkout": ["/checkout/create"],
                "contact": ["/contact"],
            },
        }, 200
