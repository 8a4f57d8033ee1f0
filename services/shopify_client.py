import logging
from typing import Any, Dict, Optional

import requests

from services.errors import GraphQLError, TransportError
from services.shopify_config import ShopifyConfig


class ShopifyClient:
    """
    Thin wrapper around a requests.Session for the Shopify Admin API.

    graphql() sends queries/mutations to the GraphQL endpoint for
    `graphql_api_version` (defaults to the config's fulfillment version).
    rest_post() targets the REST base of the config's REST version.
    """

    def __init__(
        self,
        config: ShopifyConfig,
        graphql_api_version: Optional[str] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.config = config
        self.graphql_url = config.graphql_endpoint_for(
            graphql_api_version or config.graphql_api_version
        )
        self.rest_url = config.rest_endpoint
        self.session = session or requests.Session()
        self.session.headers.update(
            {
                "X-Shopify-Access-Token": config.access_token,
                "Content-Type": "application/json",
            }
        )

    def graphql(self, query: str, variables: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        payload = {"query": query, "variables": variables or {}}
        try:
            resp = self.session.post(
                self.graphql_url, json=payload, timeout=self.config.request_timeout
            )
        except requests.RequestException as e:
            logging.error("GraphQL Error: %s", e)
            raise TransportError(None, str(e)) from e

        try:
            data = resp.json()
        except ValueError:
            logging.error(
                "Non-JSON response from Shopify (%s): %s", resp.status_code, resp.text[:500]
            )
            raise TransportError(resp.status_code, resp.text[:500])

        # API-level errors win over the HTTP status
        errors = data.get("errors") if isinstance(data, dict) else None
        if errors:
            logging.error("GraphQL error: status=%s errors=%s", resp.status_code, errors)
            raise GraphQLError(errors, status=resp.status_code)

        if not resp.ok or not isinstance(data, dict):
            logging.error("GraphQL Error (%s): %s", resp.status_code, resp.text[:500])
            raise TransportError(resp.status_code, resp.text[:500])

        return data.get("data") or {}

    def rest_post(self, path: str, payload: Dict[str, Any]) -> requests.Response:
        url = f"{self.rest_url}/{path.lstrip('/')}"
        logging.debug("REST POST %s payload=%s", url, payload)
        return self.session.post(
            url,
            json=payload,
            headers={"Cookie": "request_method=POST"},
            timeout=self.config.request_timeout,
        )
