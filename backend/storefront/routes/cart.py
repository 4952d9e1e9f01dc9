# Overview: Cart pricing route; prices the customer's cart against the live catalogue.

from flask import Blueprint, current_app, jsonify, request

from ..errors import NotFoundError, TransportError, ValidationError
from ..extensions import storefront_api
from ..services import pricing_service
from ..services.pricing_service import quantize_money
from ..session import build_cart

cart_bp = Blueprint("cart", __name__, url_prefix="/api/cart")


@cart_bp.post("/quote")
def quote_cart_route():
    """
    Price a cart.

    Body: {"items": [{"productId": "...", "quantity": 2}, ...]}
    """
    data = request.get_json(silent=True) or {}

    try:
        with storefront_api() as api:
            catalogue = api.fetch_all_products()

        cart = build_cart(data.get("items", []), catalogue)
        lines = [pricing_service.price_line(line.product, line.quantity) for line in cart.lines]
        tax = pricing_service.total_tax(
            cart.lines, current_app.config["DEFAULT_TAX_PERCENT"]
        )

        return jsonify({
            "lines": [line.to_dict() for line in lines],
            "subtotal": str(quantize_money(cart.total())),
            "tax": str(quantize_money(tax)),
            "total_items": cart.total_items(),
        }), 200

    except ValidationError as e:
        return jsonify({"error": e.message, "details": e.details}), 400
    except NotFoundError as e:
        return jsonify({"error": e.message}), 404
    except TransportError as e:
        current_app.logger.warning("Catalogue fetch failed: %s", e)
        return jsonify({"error": "Failed to load cart. Please try again."}), 502
    except Exception:
        current_app.logger.exception("Failed to quote cart")
        return jsonify({"error": "Internal server error"}), 500
