"""
Shopify credentials and endpoints.

Built once at startup (usually via ShopifyConfig.from_env after load_dotenv)
and handed to ShopifyClient. Instances are frozen.

Environment:
    SHOPIFY_SHOP_NAME         shop subdomain, domain or URL (required)
    SHOPIFY_PASSWORD          Admin API access token (required)
    SHOPIFY_API_VERSION       GraphQL version for the fulfillment flow
    SHOPIFY_REST_API_VERSION  REST version, also used by check_connection
"""

import os
from dataclasses import dataclass, field
from typing import Mapping, Optional, Tuple

from services.errors import ConfigError

DEFAULT_GRAPHQL_API_VERSION = "2024-10"
DEFAULT_REST_API_VERSION = "2023-10"


@dataclass(frozen=True)
class ShopifyConfig:
    shop_name: str
    access_token: str = field(repr=False)
    graphql_api_version: str = DEFAULT_GRAPHQL_API_VERSION
    rest_api_version: str = DEFAULT_REST_API_VERSION
    request_timeout: Tuple[int, int] = (10, 120)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ShopifyConfig":
        env = os.environ if environ is None else environ
        shop_name = env.get("SHOPIFY_SHOP_NAME")
        access_token = env.get("SHOPIFY_PASSWORD")

        missing = [
            name
            for name, value in (
                ("SHOPIFY_SHOP_NAME", shop_name),
                ("SHOPIFY_PASSWORD", access_token),
            )
            if not value
        ]
        if missing:
            raise ConfigError(
                f"Missing Shopify API credentials in environment variables: {', '.join(missing)}"
            )

        return cls(
            shop_name=shop_name,
            access_token=access_token,
            graphql_api_version=env.get("SHOPIFY_API_VERSION") or DEFAULT_GRAPHQL_API_VERSION,
            rest_api_version=env.get("SHOPIFY_REST_API_VERSION") or DEFAULT_REST_API_VERSION,
        )

    @property
    def shop_domain(self) -> str:
        # Allow a bare subdomain, a full domain or a URL
        name = self.shop_name.strip()
        if name.startswith("http://") or name.startswith("https://"):
            name = name.split("://", 1)[1]
        name = name.rstrip("/")
        if "." not in name:
            name = f"{name}.myshopify.com"
        return name

    def graphql_endpoint_for(self, api_version: str) -> str:
        return f"https://{self.shop_domain}/admin/api/{api_version}/graphql.json"

    @property
    def graphql_endpoint(self) -> str:
        return self.graphql_endpoint_for(self.graphql_api_version)

    @property
    def rest_endpoint(self) -> str:
        return f"https://{self.shop_domain}/admin/api/{self.rest_api_version}"

    def masked_token(self) -> str:
        token = self.access_token
        if len(token) <= 8:
            return "*" * len(token)
        return f"{token[:4]}...{token[-4:]}"
