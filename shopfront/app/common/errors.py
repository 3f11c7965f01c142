from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass
class ApiError(Exception):
    """Raise to return a consistent JSON error response."""

    status_code: int
    code: str
    message: str
    details: Optional[Dict[str, Any]] = None

    def to_dict(self, request_id: str | None = None) -> Dict[str, Any]:
        return error_payload(self.code, self.message, request_id, self.details)


def error_payload(
    code: str,
    message: str,
    request_id: str | None = None,
    details: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    # `error` stays a plain string so forms can show it as-is
    payload: Dict[str, Any] = {"error": message, "code": code, "request_id": request_id}
    if details:
        payload.update(details)
    return payload


def abort_json(status_code: int, code: str, message: str, details: Optional[Dict[str, Any]] = None) -> None:
    """Convenience wrapper."""
    raise ApiError(status_code=status_code, code=code, message=message, details=details)
