# Overview: Order listing, tracking and admin status-update routes.

# backend/storefront/routes/orders.py
"""Order tracking API routes"""

from flask import Blueprint, current_app, g, jsonify, request

from ..decorators import require_auth
from ..errors import (
    AuthorizationError,
    NotFoundError,
    StatusTransitionError,
    TransportError,
    ValidationError,
)
from ..extensions import storefront_api
from ..models import TrackingDetails
from ..services import order_lookup_service, timeline_service


orders_bp = Blueprint("orders", __name__, url_prefix="/api/orders")


@orders_bp.get("")
@require_auth
def list_orders_route():
    """
    Orders for the Track Order page.

    Admins get every order; customers get their own. The role comes from the
    remote store's view of the token.
    """
    session = g.storefront_session

    try:
        with storefront_api(session.token) as api:
            session.user = api.get_current_user()
            if session.is_admin:
                orders = api.get_all_orders()
            else:
                orders = api.get_user_orders()

        return jsonify({
            "user": session.user.to_dict(),
            "orders": [timeline_service.timeline_view(order) for order in orders],
        }), 200

    except AuthorizationError as e:
        return jsonify({"error": e.message}), e.status_code
    except TransportError as e:
        current_app.logger.warning("Order listing failed: %s", e)
        return jsonify({"error": "Failed to load orders. Please try again."}), 502
    except Exception:
        current_app.logger.exception("Failed to list orders")
        return jsonify({"error": "Internal server error"}), 500


@orders_bp.get("/<order_id>/track")
def track_order_route(order_id: str):
    """
    Timeline for the Track Order page.

    Accepts the public order id or the internal id.
    """
    try:
        with storefront_api() as api:
            order = order_lookup_service.lookup_order(api, order_id)
        return jsonify({"order": timeline_service.timeline_view(order)}), 200

    except ValidationError as e:
        return jsonify({"error": order_lookup_service.user_message(e)}), 400
    except NotFoundError as e:
        return jsonify({"error": order_lookup_service.user_message(e)}), 404
    except TransportError as e:
        current_app.logger.warning("Order lookup failed for %s: %s", order_id, e)
        return jsonify({"error": order_lookup_service.user_message(e)}), 502
    except Exception:
        current_app.logger.exception("Failed to track order %s", order_id)
        return jsonify({"error": order_lookup_service.RETRY_MESSAGE}), 500


@orders_bp.put("/<order_id>/status")
@require_auth
def update_status_route(order_id: str):
    """
    Append a status to an order's timeline.

    Body: {"status", "description", "location"?, "trackingDetails"?}

    Status and description are checked here before anything is sent. In
    strict or merge mode the current order is fetched first so the
    transition can be checked and the tracking details merged locally.
    Admin rights are enforced by the remote store (403).
    """
    data = request.get_json(silent=True) or {}

    try:
        status = timeline_service.validate_status_update(
            data.get("status"), data.get("description")
        )
        description = data["description"].strip()
        location = timeline_service.clean_location(data.get("location"))
        tracking_data = data.get("trackingDetails")
        tracking = TrackingDetails.from_dict(tracking_data) if tracking_data is not None else None

        strict = current_app.config["STRICT_STATUS_TRANSITIONS"]
        merge = current_app.config["MERGE_TRACKING_DETAILS"]

        with storefront_api(g.storefront_session.token) as api:
            if strict or merge:
                current = api.track_order(order_id)
                preview = timeline_service.append_status(
                    current,
                    status,
                    description,
                    location,
                    tracking,
                    strict=strict,
                    merge_tracking=merge,
                )
                if tracking is not None:
                    tracking = preview.tracking_details

            updated = api.update_order_status(
                order_id, status.value, description, location, tracking
            )

        current_app.logger.info("Order %s moved to %s", order_id, status.value)
        return jsonify({"order": timeline_service.timeline_view(updated)}), 200

    except StatusTransitionError as e:
        return jsonify({"error": e.message, "details": e.details}), 409
    except ValidationError as e:
        return jsonify({"error": e.message, "details": e.details}), 400
    except AuthorizationError as e:
        return jsonify({"error": e.message}), e.status_code
    except NotFoundError as e:
        return jsonify({"error": order_lookup_service.user_message(e)}), 404
    except TransportError as e:
        current_app.logger.warning("Status update failed for %s: %s", order_id, e)
        return jsonify({"error": "Failed to update order status"}), 502
    except Exception:
        current_app.logger.exception("Failed to update status for order %s", order_id)
        return jsonify({"error": "Internal server error"}), 500
