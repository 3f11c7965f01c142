"""Customer credentials.

The platform issues the customer access token; we never keep it server
side. API callers send it in `X-Access-Token` (plus, optionally, the
expiry they were given in `X-Access-Token-Expires-At`). Browser pages fall
back to the AuthSession held in the session cookie.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from functools import wraps
from typing import Any, Callable, Optional, TypeVar

from flask import current_app, g, request

from shopfront.app.common.errors import abort_json
from shopfront.app.common.storage import KeyValueStore, SessionStore
from shopfront.app.models import AuthSession, parse_timestamp

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])

TOKEN_HEADER = "X-Access-Token"
EXPIRES_HEADER = "X-Access-Token-Expires-At"
AUTH_KEY = "auth"


def client_store() -> SessionStore:
    return SessionStore(current_app.config.get("SESSION_MAX_BYTES", 3800))


def load_auth_session(store: KeyValueStore) -> Optional[AuthSession]:
    raw = store.get(AUTH_KEY)
    if not raw:
        return None
    try:
        return AuthSession.from_dict(raw)
    except (KeyError, TypeError, ValueError):
        logger.warning("Discarding unreadable auth session")
        store.delete(AUTH_KEY)
        return None


def save_auth_session(store: KeyValueStore, auth: AuthSession) -> None:
    store.set(AUTH_KEY, auth.to_dict())


def clear_auth_session(store: KeyValueStore) -> None:
    store.delete(AUTH_KEY)


def current_auth_session(store: KeyValueStore | None = None) -> Optional[AuthSession]:
    """The stored session if it is still valid; expired ones are dropped."""
    store = store or client_store()
    auth = load_auth_session(store)
    if auth is not None and auth.is_expired():
        clear_auth_session(store)
        return None
    return auth


def _expired() -> None:
    abort_json(401, "token_expired", "Your session has expired. Please log in again.")


def resolve_credential(required: bool = True) -> Optional[str]:
    token = (request.headers.get(TOKEN_HEADER) or "").strip()
    if token:
        expires_raw = (request.headers.get(EXPIRES_HEADER) or "").strip()
        if expires_raw:
            try:
                expires_at = parse_timestamp(expires_raw)
            except ValueError:
                abort_json(401, "unauthorized", "Invalid or expired access token")
            if expires_at <= datetime.now(timezone.utc):
                _expired()
        return token

    store = client_store()
    auth = load_auth_session(store)
    if auth is None:
        if required:
            abort_json(401, "unauthorized", "Unauthorized. Please log in.")
        return None
    if auth.is_expired():
        clear_auth_session(store)
        _expired()
    return auth.token


def token_required(fn: F) -> F:
    @wraps(fn)
    def wrapper(*args, **kwargs):
        g.access_token = resolve_credential()
        return fn(*args, **kwargs)

    return wrapper  # type: ignore
