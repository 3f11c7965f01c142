from __future__ import annotations

import logging
from typing import Tuple

from flask import Blueprint, g

from shopfront.app.common.auth import clear_auth_session, client_store, save_auth_session, token_required
from shopfront.app.common.errors import abort_json
from shopfront.app.common.validation import get_json, is_email, require_fields
from shopfront.app.extensions import storefront
from shopfront.app.models import AccessToken, AuthSession, Customer

logger = logging.getLogger(__name__)

bp = Blueprint("auth", __name__)

MIN_PASSWORD_LENGTH = 8


def _session_response(token: AccessToken, customer: Customer) -> dict:
    save_auth_session(
        client_store(),
        AuthSession(token=token.access_token, expires_at=token.expires_at, customer=customer.summary()),
    )
    return {
        "success": True,
        "access_token": token.access_token,
        "expires_at": token.expires_at.isoformat(),
        "customer": customer.summary(),
    }


def register_customer(data: dict) -> Tuple[AccessToken, Customer]:
    """Validate signup fields, create the customer and issue their token."""
    require_fields(data, ["first_name", "last_name", "email", "password"])

    email = str(data["email"]).strip().lower()
    password = str(data["password"])
    if not is_email(email):
        abort_json(400, "validation_error", "Invalid email")
    if len(password) < MIN_PASSWORD_LENGTH:
        abort_json(400, "validation_error", f"Password must be at least {MIN_PASSWORD_LENGTH} characters")

    api = storefront.api
    customer = api.create_customer(
        first_name=str(data["first_name"]).strip(),
        last_name=str(data["last_name"]).strip(),
        email=email,
        password=password,
        phone=data.get("phone") or None,
        accepts_marketing=bool(data.get("accepts_marketing", False)),
    )
    logger.info("Registered customer %s", customer.id)

    return api.create_access_token(email, password), customer


@bp.post("/auth/register")
def register():
    """POST /api/auth/register - Create a customer and sign them in."""
    token, customer = register_customer(get_json())
    return _session_response(token, customer), 201


@bp.post("/auth/login")
def login():
    """POST /api/auth/login - Exchange email/password for a customer token."""
    data = get_json()
    require_fields(data, ["email", "password"])

    api = storefront.api
    token = api.create_access_token(str(data["email"]).strip().lower(), str(data["password"]))
    customer = api.get_customer(token.access_token)
    if customer is None:
        abort_json(500, "upstream_error", "Failed to retrieve customer information")

    return _session_response(token, customer), 200


@bp.post("/auth/logout")
@token_required
def logout():
    """POST /api/auth/logout - Revoke the token and forget the session."""
    clear_auth_session(client_store())
    storefront.api.delete_access_token(g.access_token)
    return {"success": True, "message": "Logged out successfully"}, 200


@bp.get("/auth/me")
@token_required
def me():
    """GET /api/auth/me - Current customer."""
    customer = storefront.api.get_customer(g.access_token)
    if customer is None:
        clear_auth_session(client_store())
        abort_json(401, "unauthorized", "Invalid or expired access token")
    return {"customer": customer.summary()}, 200
