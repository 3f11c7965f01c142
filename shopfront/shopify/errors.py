from __future__ import annotations

from typing import Any, Dict, List, Optional


class ShopifyError(Exception):
    """Base for failures talking to the Storefront API.

    `status_code` is what the REST facade answers with.
    """

    status_code = 500
    code = "upstream_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class UpstreamError(ShopifyError):
    """Network, HTTP or GraphQL-level failure."""


class MalformedResponse(UpstreamError):
    """The payload did not have the shape we query for."""

    code = "malformed_response"


class UserError(ShopifyError):
    """The platform rejected the input (customerUserErrors / userErrors)."""

    status_code = 400
    code = "validation_error"

    def __init__(self, message: str, errors: Optional[List[Dict[str, Any]]] = None):
        super().__init__(message)
        self.errors = errors or []


class AuthenticationError(ShopifyError):
    """Bad credentials or a customer token the platform no longer accepts."""

    status_code = 401
    code = "unauthorized"
