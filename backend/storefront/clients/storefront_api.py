# Overview: HTTP client for the remote commerce API (products, orders).

"""
Remote commerce API client.

The storefront never owns orders or the catalog; it reads and writes them
through this client. Errors are mapped onto the storefront taxonomy:

- 404            -> NotFoundError
- 401 / 403      -> AuthorizationError
- other >= 400   -> TransportError (status_code set)
- network errors -> TransportError (status_code None)

There is no automatic retry; the customer resubmits.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx

from ..errors import AuthorizationError, NotFoundError, TransportError
from ..models import Order, Product, TrackingDetails, User


logger = logging.getLogger(__name__)


def _error_message(response: httpx.Response, fallback: str) -> str:
    try:
        data = response.json()
    except ValueError:
        return fallback
    if isinstance(data, dict):
        return data.get("message") or data.get("error") or fallback
    return fallback


class StorefrontAPI:
    """
    Thin wrapper over httpx.Client with bearer auth and error mapping.
    """

    def __init__(
        self,
        base_url: str,
        token: Optional[str] = None,
        timeout: float = 10.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.client = httpx.Client(timeout=timeout, transport=transport)

    @classmethod
    def from_config(
        cls,
        config,
        token: Optional[str] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> "StorefrontAPI":
        return cls(
            config["STOREFRONT_API_URL"],
            token=token,
            timeout=float(config.get("STOREFRONT_API_TIMEOUT", 10.0)),
            transport=transport,
        )

    def __enter__(self) -> "StorefrontAPI":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        self.client.close()

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def _request(self, method: str, path: str, **kwargs) -> Any:
        url = f"{self.base_url}{path}"
        try:
            response = self.client.request(method, url, headers=self._headers(), **kwargs)
        except httpx.HTTPError as exc:
            logger.warning("Request to %s %s failed: %s", method, url, exc)
            raise TransportError("Unable to reach the store. Please try again.") from exc

        if response.status_code == 404:
            raise NotFoundError(_error_message(response, "Not found"))
        if response.status_code in (401, 403):
            raise AuthorizationError(
                _error_message(response, "Not authorized"),
                status_code=response.status_code,
            )
        if response.status_code >= 400:
            raise TransportError(
                _error_message(response, "An error occurred"),
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as exc:
            raise TransportError(
                "Invalid response from the store", status_code=response.status_code
            ) from exc

    # ============ Auth ============

    def get_current_user(self) -> User:
        """The user the bearer token belongs to."""
        data = self._request("GET", "/auth/me")
        return User.from_dict(data.get("user") or data)

    # ============ Products ============

    def fetch_all_products(self) -> list[Product]:
        data = self._request("GET", "/products")
        return [Product.from_dict(p) for p in data.get("products", [])]

    def get_product(self, product_id: str) -> Product:
        data = self._request("GET", f"/products/{product_id}")
        return Product.from_dict(data["product"])

    def search_products(self, query: str) -> list[Product]:
        data = self._request("GET", "/products/search", params={"q": query})
        return [Product.from_dict(p) for p in data.get("products", [])]

    # ============ Orders ============

    def create_order(self, payload: dict) -> str:
        """Submit an order; the remote store re-prices it. Returns the order id."""
        data = self._request("POST", "/orders", json=payload)
        order = data.get("order") or {}
        order_id = order.get("orderId") or order.get("_id") or data.get("orderId")
        if not order_id:
            raise TransportError("Order created but no order id was returned")
        return str(order_id)

    def update_order_status(
        self,
        order_id: str,
        status: str,
        description: str,
        location: Optional[str] = None,
        tracking_details: Optional[TrackingDetails] = None,
    ) -> Order:
        body: Dict[str, Any] = {"status": status, "description": description}
        if location:
            body["location"] = location
        if tracking_details is not None:
            body["trackingDetails"] = tracking_details.to_dict()
        data = self._request("PUT", f"/orders/{order_id}/status", json=body)
        return Order.from_dict(data["order"])

    def track_order(self, order_id: str) -> Order:
        data = self._request("GET", f"/orders/{order_id}/track")
        return Order.from_dict(data["order"])

    def get_user_orders(self) -> list[Order]:
        data = self._request("GET", "/orders/my-orders")
        return [Order.from_dict(o) for o in data.get("orders", [])]

    def get_all_orders(self) -> list[Order]:
        data = self._request("GET", "/orders/all")
        return [Order.from_dict(o) for o in data.get("orders", [])]
