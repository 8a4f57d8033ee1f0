#!/usr/bin/env python3
"""
Shopify Connection Check

Verifies the credentials in .env against the Admin GraphQL API and lists the
5 most recent orders, so there is an id at hand for fulfill_order.py.
Read-only.
"""

import sys
import logging
from pathlib import Path
from typing import Any, Dict, List

from dotenv import load_dotenv

from services.errors import ConfigError, GraphQLError, TransportError
from services.order_fulfillment import rest_id
from services.shopify_client import ShopifyClient
from services.shopify_config import ShopifyConfig


SHOP_QUERY = """
{
  shop {
    name
    id
    url
  }
}
"""

RECENT_ORDERS_QUERY = """
{
  orders(first: 5, sortKey: CREATED_AT, reverse: true) {
    edges {
      node {
        id
        name
        displayFulfillmentStatus
        createdAt
      }
    }
  }
}
"""

TROUBLESHOOTING_TIPS = [
    "1. Verify your SHOPIFY_SHOP_NAME in .env is correct (subdomain, myshopify.com domain or shop URL)",
    "2. Check that your SHOPIFY_PASSWORD (access token) is correct",
    "3. Ensure your app has the required permissions for GraphQL API access",
    "   (Specifically, you need orders and fulfillments access)",
]


def require_field(data: Dict[str, Any], name: str) -> Any:
    value = data.get(name)
    if value is None:
        logging.error("Shopify response has no '%s' field: %s", name, data)
        raise GraphQLError([{"message": f"Response has no '{name}' field"}])
    return value


def fetch_shop(client: ShopifyClient) -> Dict[str, Any]:
    return require_field(client.graphql(SHOP_QUERY), "shop")


def fetch_recent_orders(client: ShopifyClient) -> List[Dict[str, Any]]:
    orders = require_field(client.graphql(RECENT_ORDERS_QUERY), "orders")
    return [edge["node"] for edge in orders.get("edges", [])]


def print_recent_orders(orders: List[Dict[str, Any]]) -> None:
    if not orders:
        print("\nNo recent orders found.")
        return

    print("\nRecent orders you can use for testing:")
    for node in orders:
        print(f"- Order {node['name']} (ID: {rest_id(node['id'])}, Full ID: {node['id']})")
        print(f"  Status: {node.get('displayFulfillmentStatus')}, Created: {node.get('createdAt')}")
    print("\nYou can use either the numeric ID or the full GraphQL ID with fulfill_order.py.")


def print_failure(error: Exception) -> None:
    print("\n❌ Connection failed!")
    status = getattr(error, "status", None)
    if status is not None:
        print(f"Status: {status}")
    if isinstance(error, TransportError):
        print(f"Response data: {error.body}")
    else:
        print(f"Error message: {error}")

    print("\n🔍 Troubleshooting tips:")
    for tip in TROUBLESHOOTING_TIPS:
        print(tip)


def main() -> None:
    load_dotenv(Path(__file__).resolve().parents[1] / ".env")
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )

    try:
        config = ShopifyConfig.from_env()
    except ConfigError as e:
        logging.error(str(e))
        print("Please set SHOPIFY_SHOP_NAME and SHOPIFY_PASSWORD")
        sys.exit(1)

    # The connection check runs against the REST-era API version
    client = ShopifyClient(config, graphql_api_version=config.rest_api_version)

    print("Testing Shopify GraphQL API connection...")
    print(f"Shop: {config.shop_domain}")
    print(f"Token first/last 4 chars: {config.masked_token()}")

    try:
        shop = fetch_shop(client)
        print("\n✅ Connection successful!")
        print(f"Shop name: {shop['name']}")
        print(f"Shop ID: {shop['id']}")
        print(f"Shop URL: {shop['url']}")

        print_recent_orders(fetch_recent_orders(client))
    except (TransportError, GraphQLError) as e:
        print_failure(e)
        sys.exit(1)


if __name__ == "__main__":
    main()
