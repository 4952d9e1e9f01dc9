# Overview: Checkout routes; summary totals and order placement.

from flask import Blueprint, current_app, g, jsonify, request

from ..clients.payment_gateway import RelayedPayment, checkout_options
from ..decorators import require_auth
from ..errors import (
    AuthorizationError,
    NotFoundError,
    PaymentCancelledError,
    TransportError,
    ValidationError,
)
from ..extensions import storefront_api
from ..models import ShippingAddress
from ..services import checkout_service
from ..session import build_cart

checkout_bp = Blueprint("checkout", __name__, url_prefix="/api/checkout")


def _pricing_config() -> dict:
    return {
        "default_tax_percent": current_app.config["DEFAULT_TAX_PERCENT"],
        "online_discount": current_app.config["ONLINE_PAYMENT_DISCOUNT"],
    }


@checkout_bp.post("/summary")
def checkout_summary_route():
    """
    Totals for the checkout page.

    Body: {"items": [...], "paymentMethod": "cod" | "online"}

    For online payment the response also carries the options the browser
    passes to the gateway's checkout window.
    """
    data = request.get_json(silent=True) or {}

    try:
        with storefront_api() as api:
            catalogue = api.fetch_all_products()

        cart = build_cart(data.get("items", []), catalogue)
        summary = checkout_service.build_summary(
            cart.lines, data.get("paymentMethod", checkout_service.PAYMENT_COD), **_pricing_config()
        )

        body = {"summary": summary.to_dict()}
        if summary.payment_method == checkout_service.PAYMENT_ONLINE and summary.amount_due > 0:
            body["gateway"] = checkout_options(
                summary.amount_due,
                data.get("orderToken", ""),
                key_id=current_app.config["PAYMENT_KEY_ID"],
                currency=current_app.config["CURRENCY"],
                merchant_name=current_app.config["MERCHANT_NAME"],
            )
        return jsonify(body), 200

    except ValidationError as e:
        return jsonify({"error": e.message, "details": e.details}), 400
    except NotFoundError as e:
        return jsonify({"error": e.message}), 404
    except TransportError as e:
        current_app.logger.warning("Catalogue fetch failed: %s", e)
        return jsonify({"error": "Failed to load checkout. Please try again."}), 502
    except Exception:
        current_app.logger.exception("Failed to build checkout summary")
        return jsonify({"error": "Internal server error"}), 500


@checkout_bp.post("/orders")
@require_auth
def place_order_route():
    """
    Place an order.

    Body: {
        "items": [...],
        "shippingAddress": {"fullName", "email", "address", "city", "zipCode"},
        "paymentMethod": "cod" | "online",
        "payment": {"paymentId", "orderToken", "signature"}   # online only
    }
    """
    data = request.get_json(silent=True) or {}
    session = g.storefront_session

    try:
        with storefront_api(session.token) as api:
            catalogue = api.fetch_all_products()
            session.cart = build_cart(data.get("items", []), catalogue)
            shipping = ShippingAddress.from_dict(data.get("shippingAddress") or {})

            result = checkout_service.place_order(
                api,
                session,
                shipping,
                data.get("paymentMethod", checkout_service.PAYMENT_COD),
                gateway=RelayedPayment(data.get("payment")),
                **_pricing_config(),
            )

        current_app.logger.info(
            "Order %s placed (%s)", result["orderId"], result["summary"]["payment_method"]
        )
        return jsonify(result), 201

    except PaymentCancelledError as e:
        return jsonify({"error": e.message, "details": e.details}), 400
    except ValidationError as e:
        return jsonify({"error": e.message, "details": e.details}), 400
    except AuthorizationError as e:
        return jsonify({"error": e.message}), e.status_code
    except NotFoundError as e:
        return jsonify({"error": e.message}), 404
    except TransportError as e:
        current_app.logger.warning("Order placement failed: %s", e)
        return jsonify({"error": "Failed to place order. Please try again."}), 502
    except Exception:
        current_app.logger.exception("Failed to place order")
        return jsonify({"error": "Internal server error"}), 500
