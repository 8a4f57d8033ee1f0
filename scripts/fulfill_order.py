#!/usr/bin/env python3
"""
Fulfill Order

Fulfills a single Shopify order and marks it as delivered.

- Uses Shopify Admin GraphQL (fulfillment flow) and REST (delivery event)
  with SHOPIFY_SHOP_NAME + SHOPIFY_PASSWORD
- Accepts a numeric order id or a full gid://shopify/Order/<id>
- Supports: --dry-run

Usage:
    fulfill-order <orderId> [--dry-run]
    python -m scripts.fulfill_order <orderId>
"""

import sys
import logging
import argparse
from pathlib import Path

from dotenv import load_dotenv

from services.errors import ConfigError, ShopifyFulfillmentError
from services.order_fulfillment import process_order
from services.shopify_client import ShopifyClient
from services.shopify_config import ShopifyConfig

USAGE = "Usage: fulfill-order <orderId>"


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description="Fulfill a Shopify order and mark it as delivered."
    )
    parser.add_argument("order_id", nargs="?", help="Numeric order id or gid://shopify/Order/<id>.")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Fetch the order and decide, without creating or marking anything.",
    )
    return parser.parse_args(argv)


def main(argv=None) -> None:
    # Ensure .env is loaded from the project root (one level above /scripts)
    load_dotenv(Path(__file__).resolve().parents[1] / ".env")
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )

    args = parse_args(argv)

    if not args.order_id:
        logging.error("Please provide an order ID")
        print(USAGE)
        sys.exit(1)

    try:
        config = ShopifyConfig.from_env()
    except ConfigError as e:
        logging.error(str(e))
        print("Please set SHOPIFY_SHOP_NAME and SHOPIFY_PASSWORD")
        sys.exit(1)

    client = ShopifyClient(config)

    try:
        outcome = process_order(client, args.order_id, dry_run=args.dry_run)
    except ShopifyFulfillmentError as e:
        logging.error("Failed to process order: %s", e)
        sys.exit(1)

    if outcome.dry_run:
        logging.info("Dry run complete for order %s, nothing was changed.", args.order_id)
        return

    logging.info(
        "Order %s has been successfully fulfilled and marked as delivered!",
        args.order_id,
    )


if __name__ == "__main__":
    main()
