"""Server-rendered storefront pages.

Forms post back here and redirect (post/redirect/get); the JSON API under
/api serves the same operations to scripts.
"""

from __future__ import annotations

import logging
from functools import wraps

from flask import Blueprint, abort, current_app, flash, g, redirect, render_template, request, url_for

from shopfront.app.common.auth import clear_auth_session, client_store, current_auth_session, save_auth_session
from shopfront.app.common.errors import ApiError
from shopfront.app.extensions import storefront
from shopfront.app.models import AuthSession
from shopfront.modules.account.reconcile import reconcile_order
from shopfront.modules.auth.routes import register_customer
from shopfront.modules.cart.routes import load_cart
from shopfront.modules.cart.state import clamp_quantity
from shopfront.modules.catalog.routes import find_product
from shopfront.modules.contact.routes import clean_submission, record_submission
from shopfront.shopify.errors import AuthenticationError, ShopifyError, UserError

logger = logging.getLogger(__name__)

ui_bp = Blueprint("ui", __name__)


def _form_quantity(default: int = 1) -> int:
    try:
        return int(request.form.get("quantity", default))
    except ValueError:
        return default


def customer_page(fn):
    """Require a live AuthSession; bounce to the login page otherwise."""

    @wraps(fn)
    def wrapper(*args, **kwargs):
        store = client_store()
        auth = current_auth_session(store)
        if auth is None:
            flash("Please log in to view your account.", "info")
            return redirect(url_for("ui.login_page", next=request.path))
        g.auth = auth
        try:
            return fn(*args, **kwargs)
        except AuthenticationError:
            clear_auth_session(store)
            flash("Your session has expired. Please log in again.", "info")
            return redirect(url_for("ui.login_page"))

    return wrapper


# --- Catalog ---
@ui_bp.get("/")
def home():
    products = storefront.api.get_products(current_app.config.get("PRODUCTS_PAGE_SIZE", 50))
    return render_template("products.html", products=products)


@ui_bp.get("/products/<path:identifier>")
def product_page(identifier: str):
    product = find_product(identifier)
    if product is None:
        abort(404)
    return render_template("product.html", product=product)


# --- Cart ---
@ui_bp.get("/cart")
def cart_page():
    return render_template("cart.html", cart=load_cart())


@ui_bp.post("/cart/add")
def cart_add():
    variant_id = (request.form.get("variant_id") or "").strip()
    quantity = _form_quantity()
    if not variant_id or quantity < 1:
        flash("Please choose an option and quantity.", "error")
        return redirect(request.referrer or url_for("ui.home"))

    variant = storefront.api.get_variant(variant_id)
    if variant is None or not variant.available_for_sale:
        flash("That option is not available.", "error")
        return redirect(request.referrer or url_for("ui.home"))

    load_cart().add_line(variant, clamp_quantity(quantity))
    flash(f"Added {variant.product_title or variant.title} to your cart.", "success")
    return redirect(url_for("ui.cart_page"))


@ui_bp.post("/cart/update")
def cart_update():
    variant_id = request.form.get("variant_id", "")
    # unreadable input keeps the line at 1; an explicit 0 removes it
    load_cart().set_quantity(variant_id, _form_quantity(default=1))
    return redirect(url_for("ui.cart_page"))


@ui_bp.post("/cart/remove")
def cart_remove():
    load_cart().remove_line(request.form.get("variant_id", ""))
    return redirect(url_for("ui.cart_page"))


@ui_bp.post("/cart/clear")
def cart_clear():
    load_cart().clear()
    return redirect(url_for("ui.cart_page"))


@ui_bp.post("/checkout")
def checkout():
    cart = load_cart()
    if not len(cart):
        flash("Your cart is empty.", "info")
        return redirect(url_for("ui.cart_page"))

    auth = current_auth_session()
    customer_info = None
    token = None
    if auth is not None:
        token = auth.token
        customer_info = {k: auth.customer.get(k) for k in ("email", "first_name", "last_name", "phone")}

    try:
        checkout = storefront.api.create_cart(cart.line_items(), customer_info, customer_token=token)
    except UserError as e:
        flash(e.message, "error")
        return redirect(url_for("ui.cart_page"))
    return redirect(checkout.web_url)


# --- Auth ---
@ui_bp.route("/login", methods=["GET", "POST"])
def login_page():
    if request.method == "GET":
        return render_template("login.html")

    email = (request.form.get("email") or "").strip().lower()
    password = request.form.get("password") or ""
    if not email or not password:
        flash("Email and password are required.", "error")
        return render_template("login.html", email=email), 400

    api = storefront.api
    try:
        token = api.create_access_token(email, password)
    except AuthenticationError as e:
        flash(e.message, "error")
        return render_template("login.html", email=email), 401

    customer = api.get_customer(token.access_token)
    if customer is None:
        flash("Failed to retrieve customer information.", "error")
        return render_template("login.html", email=email), 500

    save_auth_session(
        client_store(),
        AuthSession(token=token.access_token, expires_at=token.expires_at, customer=customer.summary()),
    )
    flash(f"Welcome back, {customer.first_name or customer.email}!", "success")
    target = request.args.get("next") or ""
    # only local paths
    if not target.startswith("/") or target.startswith("//"):
        target = url_for("ui.orders_page")
    return redirect(target)


@ui_bp.route("/signup", methods=["GET", "POST"])
def signup_page():
    if request.method == "GET":
        return render_template("signup.html", form={})

    form = request.form.to_dict()
    try:
        token, customer = register_customer(form)
    except (ApiError, UserError, AuthenticationError) as e:
        flash(e.message, "error")
        return render_template("signup.html", form=form), e.status_code

    save_auth_session(
        client_store(),
        AuthSession(token=token.access_token, expires_at=token.expires_at, customer=customer.summary()),
    )
    flash(f"Welcome, {customer.first_name or customer.email}!", "success")
    return redirect(url_for("ui.home"))


@ui_bp.post("/logout")
def logout():
    store = client_store()
    auth = current_auth_session(store)
    clear_auth_session(store)
    if auth is not None:
        try:
            storefront.api.delete_access_token(auth.token)
        except ShopifyError as e:
            # signed out locally either way
            logger.warning("Token revocation failed: %s", e.message)
    flash("You have been logged out.", "info")
    return redirect(url_for("ui.home"))


@ui_bp.route("/contact", methods=["GET", "POST"])
def contact_page():
    if request.method == "GET":
        return render_template("contact.html", form={})

    form = request.form.to_dict()
    try:
        submission = clean_submission(form)
    except ApiError as e:
        flash(e.message, "error")
        return render_template("contact.html", form=form), e.status_code

    record_submission(submission)
    flash("Thanks for reaching out. We'll get back to you soon.", "success")
    return redirect(url_for("ui.contact_page"))


# --- Account ---
@ui_bp.get("/account/orders")
@customer_page
def orders_page():
    orders = storefront.api.get_orders(g.auth.token, current_app.config.get("ORDERS_PAGE_SIZE", 50))
    return render_template("orders.html", orders=orders)


@ui_bp.get("/account/orders/<path:order_id>")
@customer_page
def order_page(order_id: str):
    candidates = storefront.api.get_order_details(g.auth.token, current_app.config.get("ORDER_LOOKUP_PAGE_SIZE", 250))
    match = reconcile_order(order_id, candidates)
    if match is None:
        abort(404)
    return render_template("order.html", order=match.order)
