"""
Error taxonomy for the order-fulfillment flow.

Every failure the scripts can report derives from ShopifyFulfillmentError,
so the command-line entry points only need to catch one type.
"""

import json
from typing import Any, Dict, List, Optional


class ShopifyFulfillmentError(RuntimeError):
    pass


class ConfigError(ShopifyFulfillmentError):
    """Missing credentials or arguments. Raised before any network call."""


class TransportError(ShopifyFulfillmentError):
    def __init__(self, status: Optional[int], body: str) -> None:
        self.status = status
        self.body = body
        if status is None:
            super().__init__(f"Shopify request failed: {body}")
        else:
            super().__init__(f"Shopify request failed ({status}): {body}")


class GraphQLError(ShopifyFulfillmentError):
    def __init__(self, errors: List[Dict[str, Any]], status: Optional[int] = None) -> None:
        self.errors = errors
        self.status = status
        super().__init__(json.dumps(errors, indent=2))


class OrderNotFound(ShopifyFulfillmentError):
    def __init__(self, order_id: str) -> None:
        self.order_id = order_id
        super().__init__(f"Order {order_id} not found")


class NotFulfillable(ShopifyFulfillmentError):
    def __init__(self, order_id: str) -> None:
        self.order_id = order_id
        super().__init__(f"Order {order_id} is not fulfillable")


class FulfillmentCreateFailed(ShopifyFulfillmentError):
    def __init__(self, user_errors: List[Dict[str, Any]]) -> None:
        self.user_errors = user_errors
        super().__init__(
            f"Failed to create fulfillment: {json.dumps(user_errors, indent=2)}"
        )


class DeliveryMarkFailed(ShopifyFulfillmentError):
    def __init__(self, status: Optional[int], body: str) -> None:
        self.status = status
        self.body = body
        if status is None:
            super().__init__(f"Failed to mark fulfillment as delivered: {body}")
        else:
            super().__init__(
                f"Failed to mark fulfillment as delivered ({status}): {body}"
            )
