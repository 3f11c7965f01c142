import logging

import requests
from requests import RequestException

from shopfront.shopify.config import ShopConfig
from shopfront.shopify.errors import MalformedResponse, UpstreamError

logger = logging.getLogger(__name__)

TOKEN_HEADER = "X-Shopify-Storefront-Access-Token"


class GraphQLClient:
    """POSTs GraphQL documents to the Storefront API.

    One attempt per call: no retry, caching or batching. Variables are never
    logged since they carry passwords and customer tokens.
    """

    def __init__(self, config: ShopConfig, http: requests.Session | None = None):
        self.config = config
        self.http = http or requests.Session()

    def execute(self, query: str, variables: dict | None = None, operation: str = "query") -> dict:
        if not self.config.configured:
            raise UpstreamError("Storefront API is not configured")

        logger.info("Storefront %s", operation)
        try:
            resp = self.http.post(
                self.config.endpoint,
                json={"query": query, "variables": variables or {}},
                headers={"Content-Type": "application/json", TOKEN_HEADER: self.config.access_token},
                timeout=self.config.timeout,
            )
        except RequestException as e:
            logger.error("Storefront %s failed: %s", operation, e.__class__.__name__)
            raise UpstreamError("Could not reach the store. Please try again.") from e

        if not resp.ok:
            logger.error("Storefront %s returned HTTP %s", operation, resp.status_code)
            raise UpstreamError(f"Storefront API error: {resp.status_code} {resp.reason}")

        try:
            body = resp.json()
        except ValueError as e:
            raise MalformedResponse("Storefront API returned invalid JSON") from e

        if not isinstance(body, dict):
            raise MalformedResponse("Storefront API returned an unexpected payload")

        errors = body.get("errors")
        if errors:
            messages = ", ".join(str(e.get("message", "unknown error")) for e in errors if isinstance(e, dict))
            logger.error("Storefront %s GraphQL errors: %s", operation, messages)
            raise UpstreamError(f"GraphQL errors: {messages or 'unknown error'}")

        data = body.get("data")
        if not isinstance(data, dict):
            raise MalformedResponse("Storefront API response has no data")
        return data
