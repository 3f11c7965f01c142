from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping


@dataclass(frozen=True)
class ShopConfig:
    store_domain: str
    access_token: str
    api_version: str = "2024-01"
    timeout: float = 10.0

    @property
    def configured(self) -> bool:
        return bool(self.store_domain and self.access_token)

    @property
    def endpoint(self) -> str:
        domain = self.store_domain.strip().rstrip("/")
        for prefix in ("https://", "http://"):
            if domain.startswith(prefix):
                domain = domain[len(prefix):]
        return f"https://{domain}/api/{self.api_version}/graphql.json"

    def __repr__(self) -> str:
        # never print the token
        return f"ShopConfig(store_domain={self.store_domain!r}, api_version={self.api_version!r})"

    @classmethod
    def from_mapping(cls, config: Mapping[str, Any]) -> "ShopConfig":
        return cls(
            store_domain=config.get("SHOPIFY_STORE_DOMAIN") or "",
            access_token=config.get("SHOPIFY_STOREFRONT_ACCESS_TOKEN") or "",
            api_version=config.get("SHOPIFY_API_VERSION") or "2024-01",
            timeout=float(config.get("SHOPIFY_TIMEOUT") or 10),
        )
