# Overview: Order status timeline; appends history entries and formats tracking views.

"""
Order timeline

================================================================================
An order carries an append-only status history. Every admin update appends
one entry and moves the current status to that entry's status:

    Order Placed -> Processing -> Shipped -> Out for Delivery -> Delivered
                 \\___________________________________________/
                                      |
                                  Cancelled

The admin panel has never enforced that ordering, so by default any known
status may follow any other. `strict=True` turns on forward-only checks:
- moving backwards is rejected
- repeating the current status is allowed (progress notes) unless terminal
- Cancelled is reachable from every non-terminal status
- nothing leaves Delivered or Cancelled

Tracking details are replaced wholesale on every update that supplies them;
a field the admin leaves blank is dropped. `merge_tracking=True` keeps the
previous value for fields not supplied instead.
================================================================================
"""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from typing import Optional

from ..errors import StatusTransitionError, ValidationError
from ..models import Order, OrderStatus, StatusEntry, TrackingDetails
from ..time_utils import format_display_date, to_utc_z, utcnow


FORWARD_SEQUENCE = (
    OrderStatus.ORDER_PLACED,
    OrderStatus.PROCESSING,
    OrderStatus.SHIPPED,
    OrderStatus.OUT_FOR_DELIVERY,
    OrderStatus.DELIVERED,
)

STATUS_TONES = {
    OrderStatus.ORDER_PLACED: "neutral",
    OrderStatus.PROCESSING: "pending",
    OrderStatus.SHIPPED: "info",
    OrderStatus.OUT_FOR_DELIVERY: "transit",
    OrderStatus.DELIVERED: "success",
    OrderStatus.CANCELLED: "danger",
}

PLACED_DESCRIPTION = "Your order has been placed successfully"


def can_transition(from_status: OrderStatus, to_status: OrderStatus) -> bool:
    """Forward-only rule used in strict mode."""
    if from_status.is_terminal:
        return False
    if to_status == OrderStatus.CANCELLED:
        return True
    return FORWARD_SEQUENCE.index(to_status) >= FORWARD_SEQUENCE.index(from_status)


def validate_status_update(new_status, description: Optional[str]) -> OrderStatus:
    if not isinstance(new_status, str) or not isinstance(description, str):
        raise ValidationError("status and description required")
    if not new_status.strip() or not description.strip():
        raise ValidationError("status and description required")
    return OrderStatus.parse(new_status)


def clean_location(location) -> Optional[str]:
    """Stripped location, None when blank."""
    if location is None:
        return None
    if not isinstance(location, str):
        raise ValidationError("location must be a string")
    return location.strip() or None


def _merge_tracking(
    previous: Optional[TrackingDetails], supplied: TrackingDetails
) -> TrackingDetails:
    if previous is None:
        return supplied
    return TrackingDetails(
        current_location=supplied.current_location or previous.current_location,
        estimated_delivery=supplied.estimated_delivery or previous.estimated_delivery,
        carrier=supplied.carrier or previous.carrier,
        tracking_number=supplied.tracking_number or previous.tracking_number,
    )


def append_status(
    order: Order,
    new_status,
    description: str,
    location: Optional[str] = None,
    tracking_details: Optional[TrackingDetails] = None,
    *,
    strict: bool = False,
    merge_tracking: bool = False,
    now: Optional[datetime] = None,
) -> Order:
    """
    Return a copy of `order` with one more history entry.

    The original order and its existing entries are left untouched; the new
    order's history reuses the same entry objects followed by the new one.

    Raises:
        ValidationError: status or description missing, or unknown status
        StatusTransitionError: strict mode and the move is not forward
    """
    status = validate_status_update(new_status, description)

    if strict and not can_transition(order.status, status):
        raise StatusTransitionError(order.status.value, status.value)

    entry = StatusEntry(
        status=status,
        description=description.strip(),
        date=now or utcnow(),
        location=clean_location(location),
    )

    tracking = order.tracking_details
    if tracking_details is not None:
        tracking = _merge_tracking(tracking, tracking_details) if merge_tracking else tracking_details

    return replace(
        order,
        status=status,
        status_history=order.status_history + (entry,),
        tracking_details=tracking,
    )


def new_order_history(description: str = PLACED_DESCRIPTION, now: Optional[datetime] = None):
    """History every order starts with: a single Order Placed entry."""
    return (
        StatusEntry(
            status=OrderStatus.ORDER_PLACED,
            description=description,
            date=now or utcnow(),
        ),
    )


def render_timeline(order: Order) -> tuple[StatusEntry, ...]:
    """History oldest first, exactly as appended."""
    return tuple(order.status_history)


def status_tone(status) -> str:
    return STATUS_TONES[OrderStatus.parse(status)]


def format_tracking(order: Order) -> list[tuple[str, str]]:
    details = order.tracking_details
    if details is None:
        return []
    rows = [
        ("Carrier", details.carrier),
        ("Tracking Number", details.tracking_number),
        ("Current Location", details.current_location),
        ("Estimated Delivery", format_display_date(details.estimated_delivery)),
    ]
    return [(label, value) for label, value in rows if value]


def timeline_view(order: Order) -> dict:
    return {
        "order_id": order.display_id,
        "status": order.status.value,
        "tone": status_tone(order.status),
        "is_terminal": order.status.is_terminal,
        "timeline": [
            {
                "status": entry.status.value,
                "description": entry.description,
                "location": entry.location,
                "date": to_utc_z(entry.date),
                "display_date": format_display_date(entry.date),
            }
            for entry in render_timeline(order)
        ],
        "tracking": [{"label": label, "value": value} for label, value in format_tracking(order)],
    }
