# Overview: Resolves an order for tracking and turns lookup failures into customer messages.

from __future__ import annotations

from ..errors import AuthorizationError, NotFoundError, StorefrontError, ValidationError
from ..models import Order


NOT_FOUND_MESSAGE = "Invalid Order ID. Please check and try again."
RETRY_MESSAGE = "Failed to track order. Please try again."


def lookup_order(client, order_id: str) -> Order:
    """
    Fetch an order by its public order id or internal id.

    The remote store accepts either form on the track endpoint.

    Raises:
        ValidationError: blank id
        NotFoundError: no such order
        TransportError: network failure or server error
    """
    order_id = (order_id or "").strip()
    if not order_id:
        raise ValidationError("Please enter an order ID")
    return client.track_order(order_id)


def user_message(exc: StorefrontError) -> str:
    if isinstance(exc, NotFoundError):
        return NOT_FOUND_MESSAGE
    if isinstance(exc, (ValidationError, AuthorizationError)):
        return exc.message
    # TransportError and anything unexpected: customer just retries
    return RETRY_MESSAGE
