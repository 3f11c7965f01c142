from __future__ import annotations

import re
from typing import Any, Dict, Iterable

from flask import request

from shopfront.app.common.errors import abort_json

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def get_json() -> Dict[str, Any]:
    if not request.is_json:
        abort_json(400, "invalid_json", "Request must be application/json")
    data = request.get_json(silent=True)
    if data is None or not isinstance(data, dict):
        abort_json(400, "invalid_json", "Malformed JSON body")
    return data


def require_fields(data: Dict[str, Any], fields: Iterable[str]) -> None:
    """Fail with 400 unless every field is present and non-blank."""
    missing = [f for f in fields if not is_non_empty(data.get(f))]
    if missing:
        abort_json(400, "validation_error", "Missing required fields", {"missing": missing})


def is_non_empty(value: Any) -> bool:
    if isinstance(value, str):
        return bool(value.strip())
    return value is not None


def is_email(value: str) -> bool:
    return bool(EMAIL_RE.match(value.strip()))


def get_quantity(data: Dict[str, Any], field: str = "quantity") -> int:
    raw = data.get(field)
    # bool is an int subclass; "true" is not a quantity
    if isinstance(raw, bool):
        abort_json(400, "validation_error", f"{field} must be an integer")
    try:
        return int(raw)
    except (TypeError, ValueError):
        abort_json(400, "validation_error", f"{field} must be an integer")
