"""
Single-order fulfillment

- Fetches an order via the Admin GraphQL API
- If the order already has a fulfillment, marks the first one as delivered
- Otherwise, if the order is fulfillable, creates a fulfillment from the
  first fulfillment order (quantity 1 per line item) and marks it delivered
- Otherwise fails with NotFulfillable

Calls are strictly sequential; any failure aborts the run without rollback.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

import requests

from services.errors import (
    DeliveryMarkFailed,
    FulfillmentCreateFailed,
    NotFulfillable,
    OrderNotFound,
    ShopifyFulfillmentError,
)
from services.shopify_client import ShopifyClient


ORDER_GID_PREFIX = "gid://shopify/Order/"


# ------------------------ GraphQL Queries ------------------------ #

GET_ORDER_QUERY = """
query GetOrder($id: ID!) {
  order(id: $id) {
    id
    name
    fulfillable
    fulfillments(first: 5) {
      id
      status
    }
    lineItems(first: 50) {
      edges {
        node {
          id
          quantity
          fulfillableQuantity
        }
      }
    }
    fulfillmentOrders(first: 5) {
      edges {
        node {
          id
          status
          lineItems(first: 50) {
            edges {
              node {
                id
              }
            }
          }
        }
      }
    }
  }
}
"""

FULFILLMENT_CREATE_MUTATION = """
mutation FulfillOrder($fulfillment: FulfillmentInput!) {
  fulfillmentCreate(fulfillment: $fulfillment) {
    fulfillment {
      id
      status
    }
    userErrors {
      field
      message
    }
  }
}
"""


# ------------------------ Types ------------------------ #

class FulfillmentState(Enum):
    FETCHING = "fetching"
    DECIDING = "deciding"
    ALREADY_FULFILLED = "already_fulfilled"
    CREATING_FULFILLMENT = "creating_fulfillment"
    MARKING_DELIVERED = "marking_delivered"
    DONE = "done"
    FAILED = "failed"


@dataclass
class FulfillmentLineItem:
    fulfillment_order_line_item_id: str
    quantity: int = 1


@dataclass
class FulfillmentOutcome:
    order_id: str
    order_name: Optional[str] = None
    fulfillment_id: Optional[str] = None
    created: bool = False
    dry_run: bool = False
    state: FulfillmentState = FulfillmentState.FETCHING
    transitions: List[FulfillmentState] = field(
        default_factory=lambda: [FulfillmentState.FETCHING]
    )

    def advance(self, state: FulfillmentState) -> None:
        logging.debug("Order %s: %s -> %s", self.order_id, self.state.value, state.value)
        self.state = state
        self.transitions.append(state)


# ------------------------ Id helpers ------------------------ #

def normalize_order_gid(order_id: str) -> str:
    """GraphQL requires the full id with prefix."""
    if "gid://" in order_id:
        return order_id
    return f"{ORDER_GID_PREFIX}{order_id}"


def rest_id(shopify_id: str) -> str:
    """Trailing path segment of a gid, i.e. the numeric id REST expects."""
    return shopify_id.split("/")[-1]


# ------------------------ Order shape helpers ------------------------ #

def fulfillment_order_nodes(order: Dict[str, Any]) -> List[Dict[str, Any]]:
    conn = order.get("fulfillmentOrders") or {}
    return [edge["node"] for edge in conn.get("edges", [])]


def fulfillment_order_line_item_ids(fulfillment_order: Dict[str, Any]) -> List[str]:
    conn = fulfillment_order.get("lineItems") or {}
    return [edge["node"]["id"] for edge in conn.get("edges", [])]


# ------------------------ API calls ------------------------ #

def get_order(client: ShopifyClient, order_id: str) -> Dict[str, Any]:
    logging.info("Getting details for order %s...", order_id)

    data = client.graphql(GET_ORDER_QUERY, {"id": normalize_order_gid(order_id)})
    order = data.get("order")
    if not order:
        logging.error("Order %s not found", order_id)
        raise OrderNotFound(order_id)

    logging.info("Found order %s (fulfillable=%s)", order.get("name"), order.get("fulfillable"))
    logging.debug("Order payload: %s", order)
    return order


def create_fulfillment(
    client: ShopifyClient,
    fulfillment_order_id: str,
    line_items: List[FulfillmentLineItem],
) -> str:
    variables = {
        "fulfillment": {
            "lineItemsByFulfillmentOrder": [
                {
                    "fulfillmentOrderId": fulfillment_order_id,
                    "fulfillmentOrderLineItems": [
                        {"id": li.fulfillment_order_line_item_id, "quantity": li.quantity}
                        for li in line_items
                    ],
                }
            ],
            "notifyCustomer": True,
        }
    }
    logging.info(
        "Creating fulfillment for %s with %d line item(s)...",
        fulfillment_order_id,
        len(line_items),
    )

    data = client.graphql(FULFILLMENT_CREATE_MUTATION, variables)
    result = data.get("fulfillmentCreate") or {}

    user_errors = result.get("userErrors") or []
    if user_errors:
        logging.error(
            "fulfillmentCreate returned user errors for %s: %s",
            fulfillment_order_id,
            user_errors,
        )
        raise FulfillmentCreateFailed(user_errors)

    fulfillment = result.get("fulfillment")
    if not fulfillment or not fulfillment.get("id"):
        logging.error(
            "fulfillmentCreate returned no fulfillment for %s: %s",
            fulfillment_order_id,
            result,
        )
        raise FulfillmentCreateFailed(
            [{"field": None, "message": "fulfillmentCreate returned no fulfillment"}]
        )

    fulfillment_id = fulfillment["id"]
    logging.info("Fulfillment created with ID: %s", fulfillment_id)
    return fulfillment_id


def mark_as_delivered(client: ShopifyClient, order_id: str, fulfillment_id: str) -> bool:
    order_num = rest_id(order_id)
    fulfillment_num = rest_id(fulfillment_id)
    logging.info(
        "Marking fulfillment %s for order %s as delivered...", fulfillment_num, order_num
    )

    path = f"orders/{order_num}/fulfillments/{fulfillment_num}/events.json"
    try:
        resp = client.rest_post(path, {"event": {"status": "delivered"}})
    except requests.RequestException as e:
        logging.error("Error marking as delivered: %s", e)
        raise DeliveryMarkFailed(None, str(e)) from e

    if not resp.ok:
        logging.error(
            "Error marking as delivered: status=%s response=%s",
            resp.status_code,
            resp.text[:500],
        )
        raise DeliveryMarkFailed(resp.status_code, resp.text[:500])

    logging.info("✅ Fulfillment %s for order %s has been marked as delivered!", fulfillment_id, order_id)
    return True


# ------------------------ Decision procedure ------------------------ #

def process_order(client: ShopifyClient, order_id: str, dry_run: bool = False) -> FulfillmentOutcome:
    """
    Run the fulfillment flow for one order id (numeric or gid).

    Only the first existing fulfillment and the first fulfillment order are
    ever considered. Line item quantity is always 1.
    """
    outcome = FulfillmentOutcome(order_id=order_id, dry_run=dry_run)

    try:
        order = get_order(client, order_id)
        outcome.order_name = order.get("name")
        order_gid = order["id"]

        outcome.advance(FulfillmentState.DECIDING)
        existing = order.get("fulfillments") or []

        if existing:
            outcome.advance(FulfillmentState.ALREADY_FULFILLED)
            outcome.fulfillment_id = existing[0]["id"]
            logging.info("Order %s already has fulfillment %s", order_id, outcome.fulfillment_id)

        elif order.get("fulfillable"):
            fo_nodes = fulfillment_order_nodes(order)
            if not fo_nodes:
                logging.error("Order %s is fulfillable but has no fulfillment orders", order_id)
                raise NotFulfillable(order_id)

            fulfillment_order = fo_nodes[0]
            line_items = [
                FulfillmentLineItem(fulfillment_order_line_item_id=li_id, quantity=1)
                for li_id in fulfillment_order_line_item_ids(fulfillment_order)
            ]

            outcome.advance(FulfillmentState.CREATING_FULFILLMENT)
            if dry_run:
                logging.info(
                    "Dry run: would create fulfillment for %s with %d line item(s).",
                    fulfillment_order["id"],
                    len(line_items),
                )
            else:
                outcome.fulfillment_id = create_fulfillment(
                    client, fulfillment_order["id"], line_items
                )
                outcome.created = True

        else:
            logging.error("Order %s is not fulfillable", order_id)
            raise NotFulfillable(order_id)

        outcome.advance(FulfillmentState.MARKING_DELIVERED)
        if dry_run:
            logging.info("Dry run: skipping delivery event for order %s.", order_id)
        else:
            mark_as_delivered(client, order_gid, outcome.fulfillment_id)

    except ShopifyFulfillmentError:
        outcome.advance(FulfillmentState.FAILED)
        raise

    outcome.advance(FulfillmentState.DONE)
    return outcome
