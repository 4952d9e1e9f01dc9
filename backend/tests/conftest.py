"""
Pytest fixtures for storefront tests.

Provides the Flask app and test client wired to an in-process fake of the
remote commerce API (httpx.MockTransport), plus product/order factories.
"""

import json
from datetime import datetime
from decimal import Decimal

import httpx
import pytest

from storefront import create_app
from storefront.clients.storefront_api import StorefrontAPI
from storefront.models import BulkDiscountTier, Order, OrderStatus, Product, StatusEntry


UPSTREAM_URL = "http://store.test/api"
ADMIN_TOKEN = "admin-token"
CUSTOMER_TOKEN = "customer-token"
USERS = {
    ADMIN_TOKEN: {"id": "u-admin", "email": "admin@illuminate.test", "name": "Admin", "isAdmin": True},
    CUSTOMER_TOKEN: {"id": "u-customer", "email": "asha@example.com", "name": "Asha Rao", "isAdmin": False},
}


class FakeStore:
    """
    Minimal stand-in for the remote commerce API.

    Products and orders are kept as wire dicts. Every request is recorded.
    Set `fail_with` to a status code to make every call fail.
    """

    def __init__(self):
        self.products: dict[str, dict] = {}
        self.orders: dict[str, dict] = {}
        self.requests: list[httpx.Request] = []
        self.fail_with: int | None = None
        self.next_order_number = 1001
        self.transport = httpx.MockTransport(self.handle)

    def add_product(self, **fields) -> dict:
        product = {"_id": fields.pop("id", f"p{len(self.products) + 1}"), "name": "Lamp", "price": 1000}
        product.update(fields)
        self.products[product["_id"]] = product
        return product

    def add_order(self, order_id: str = "ORD-1001", internal_id: str = "64f0c0ffee", **fields) -> dict:
        order = {
            "_id": internal_id,
            "user": "u-customer",
            "orderId": order_id,
            "items": [{"product": "p1", "productName": "Lamp", "quantity": 1}],
            "status": "Order Placed",
            "statusHistory": [
                {
                    "status": "Order Placed",
                    "description": "Your order has been placed successfully",
                    "date": "2025-03-01T10:00:00Z",
                }
            ],
        }
        order.update(fields)
        self.orders[order_id] = order
        return order

    def _find_order(self, key: str) -> dict | None:
        for order in self.orders.values():
            if key in (order.get("orderId"), order.get("_id")):
                return order
        return None

    def _token(self, request: httpx.Request) -> str | None:
        header = request.headers.get("Authorization", "")
        return header.split(" ", 1)[1] if header.startswith("Bearer ") else None

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.fail_with:
            return httpx.Response(self.fail_with, json={"message": "Upstream exploded"})

        parts = request.url.path.strip("/").split("/")[1:]  # drop "api"
        method = request.method

        if parts == ["products"] and method == "GET":
            return httpx.Response(200, json={"products": list(self.products.values())})
        if parts == ["products", "search"] and method == "GET":
            q = request.url.params.get("q", "").lower()
            hits = [p for p in self.products.values() if q in p["name"].lower()]
            return httpx.Response(200, json={"products": hits})
        if len(parts) == 2 and parts[0] == "products" and method == "GET":
            product = self.products.get(parts[1])
            if product is None:
                return httpx.Response(404, json={"message": "Product not found"})
            return httpx.Response(200, json={"product": product})

        if parts == ["auth", "me"] and method == "GET":
            user = USERS.get(self._token(request))
            if user is None:
                return httpx.Response(401, json={"message": "Not authorized"})
            return httpx.Response(200, json={"user": user})

        if parts == ["orders"] and method == "POST":
            token = self._token(request)
            if not token:
                return httpx.Response(401, json={"message": "Not authorized"})
            body = json.loads(request.content)
            order_id = f"ORD-{self.next_order_number}"
            self.next_order_number += 1
            order = self.add_order(
                order_id=order_id,
                internal_id=f"int-{order_id}",
                items=body["items"],
                user=USERS.get(token, {}).get("id"),
            )
            order["shippingAddress"] = body["shippingAddress"]
            order["paymentInfo"] = body["paymentInfo"]
            return httpx.Response(201, json={"success": True, "order": order})
        if parts == ["orders", "all"] and method == "GET":
            token = self._token(request)
            if not token:
                return httpx.Response(401, json={"message": "Not authorized"})
            if token != ADMIN_TOKEN:
                return httpx.Response(403, json={"message": "Admin access required"})
            return httpx.Response(200, json={"orders": list(self.orders.values())})
        if parts == ["orders", "my-orders"] and method == "GET":
            user = USERS.get(self._token(request))
            if user is None:
                return httpx.Response(401, json={"message": "Not authorized"})
            mine = [o for o in self.orders.values() if o.get("user") == user["id"]]
            return httpx.Response(200, json={"orders": mine})
        if len(parts) == 3 and parts[0] == "orders" and parts[2] == "track" and method == "GET":
            order = self._find_order(parts[1])
            if order is None:
                return httpx.Response(404, json={"message": "Order not found"})
            return httpx.Response(200, json={"order": order})
        if len(parts) == 3 and parts[0] == "orders" and parts[2] == "status" and method == "PUT":
            token = self._token(request)
            if not token:
                return httpx.Response(401, json={"message": "Not authorized"})
            if token != ADMIN_TOKEN:
                return httpx.Response(403, json={"message": "Admin access required"})
            order = self._find_order(parts[1])
            if order is None:
                return httpx.Response(404, json={"message": "Order not found"})
            body = json.loads(request.content)
            entry = {
                "status": body["status"],
                "description": body["description"],
                "date": "2025-03-02T09:30:00Z",
            }
            if body.get("location"):
                entry["location"] = body["location"]
            order["statusHistory"].append(entry)
            order["status"] = body["status"]
            if "trackingDetails" in body:
                order["trackingDetails"] = body["trackingDetails"]
            return httpx.Response(200, json={"order": order})

        return httpx.Response(404, json={"message": f"No route for {method} {request.url.path}"})


@pytest.fixture
def fake_store():
    return FakeStore()


@pytest.fixture
def app(fake_store):
    """Create application for testing."""
    app = create_app({
        "TESTING": True,
        "STOREFRONT_API_URL": UPSTREAM_URL,
        "STOREFRONT_API_TRANSPORT": fake_store.transport,
        "DEFAULT_TAX_PERCENT": "10",
        "ONLINE_PAYMENT_DISCOUNT": "50",
        "STRICT_STATUS_TRANSITIONS": False,
        "MERGE_TRACKING_DETAILS": False,
        "PAYMENT_KEY_ID": "rzp_test_key",
    })
    yield app


@pytest.fixture
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture
def api(fake_store):
    """StorefrontAPI talking to the fake store as the admin."""
    with StorefrontAPI(UPSTREAM_URL, token=ADMIN_TOKEN, transport=fake_store.transport) as client:
        yield client


def make_product(price="1000", discounted=None, tiers=(), tax=None, product_id="p1", name="Lamp") -> Product:
    return Product(
        id=product_id,
        name=name,
        base_price=Decimal(price),
        discounted_price=Decimal(discounted) if discounted is not None else None,
        bulk_discounts=tuple(
            BulkDiscountTier(min_quantity=m, discount_percent=Decimal(str(d))) for m, d in tiers
        ),
        tax_percent=Decimal(tax) if tax is not None else None,
    )


def make_order(status=OrderStatus.ORDER_PLACED, history=None) -> Order:
    if history is None:
        history = (
            StatusEntry(
                status=OrderStatus.ORDER_PLACED,
                description="Your order has been placed successfully",
                date=datetime(2025, 3, 1, 10, 0),
            ),
        )
    return Order(id="64f0c0ffee", order_id="ORD-1001", status=status, status_history=tuple(history))


def auth_headers(token: str) -> dict:
    """Helper to create Authorization headers."""
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def product_factory():
    return make_product


@pytest.fixture
def order_factory():
    return make_order
