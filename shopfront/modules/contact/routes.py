from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict

from flask import Blueprint, request

from shopfront.app.common.errors import abort_json
from shopfront.app.common.validation import is_email, is_non_empty

logger = logging.getLogger(__name__)

bp = Blueprint("contact", __name__)

FIELDS = ("name", "email", "subject", "message")


def clean_submission(body: Any) -> Dict[str, str]:
    if not isinstance(body, dict):
        abort_json(400, "invalid_json", "Invalid request body.")
    if not all(isinstance(body.get(f), str) and is_non_empty(body.get(f)) for f in FIELDS):
        abort_json(400, "validation_error", "Missing required fields.")
    if not is_email(body["email"]):
        abort_json(400, "validation_error", "Invalid email.")
    return {f: body[f].strip() for f in FIELDS}


def record_submission(submission: Dict[str, str]) -> None:
    """Submissions are only logged; there is no delivery integration."""
    entry = dict(submission, received_at=datetime.now(timezone.utc).isoformat())
    logger.info("[contact] %s", entry)


@bp.post("/contact")
def contact():
    """POST /api/contact - Accept a contact form submission."""
    record_submission(clean_submission(request.get_json(silent=True)))
    return {"ok": True}, 200
