# Overview: Product pricing and search routes for the product pages.

from flask import Blueprint, current_app, jsonify, request

from ..errors import NotFoundError, TransportError, ValidationError
from ..extensions import storefront_api
from ..services import pricing_service

products_bp = Blueprint("products", __name__, url_prefix="/api/products")


@products_bp.get("/search")
def search_products_route():
    """
    Search the catalogue (?q=term).

    Each hit carries its single-unit price and homepage badge so the results
    grid renders the same cards as the listing pages.
    """
    query = (request.args.get("q") or "").strip()
    if not query:
        return jsonify({"error": "Please enter a search term"}), 400

    try:
        with storefront_api() as api:
            products = api.search_products(query)

        results = []
        for product in products:
            homepage = pricing_service.homepage_discount_percent(product)
            results.append({
                "price": pricing_service.price_line(product, 1).to_dict(),
                "homepage_discount_percent": pricing_service.badge_percent(homepage),
                "in_stock": product.in_stock,
            })
        return jsonify({"query": query, "products": results}), 200

    except ValidationError as e:
        return jsonify({"error": e.message, "details": e.details}), 400
    except TransportError as e:
        current_app.logger.warning("Product search failed: %s", e)
        return jsonify({"error": "Search failed. Please try again."}), 502
    except Exception:
        current_app.logger.exception("Failed to search products")
        return jsonify({"error": "Internal server error"}), 500


@products_bp.get("/<product_id>/price")
def product_price_route(product_id: str):
    """
    Price one product at a quantity (?quantity=N, default 1).

    Returns the priced line, the homepage badge and the bulk tiers in
    'Buy N or more' order.
    """
    raw_quantity = request.args.get("quantity", "1")
    try:
        quantity = int(raw_quantity)
    except ValueError:
        return jsonify({"error": "invalid quantity"}), 400

    try:
        with storefront_api() as api:
            product = api.get_product(product_id)

        line = pricing_service.price_line(product, quantity)
        homepage = pricing_service.homepage_discount_percent(product)

        return jsonify({
            "price": line.to_dict(),
            "homepage_discount_percent": pricing_service.badge_percent(homepage),
            "in_stock": product.in_stock,
            "bulk_discounts": [
                {"min_quantity": tier.min_quantity, "discount_percent": str(tier.discount_percent)}
                for tier in pricing_service.display_tiers(product)
            ],
        }), 200

    except ValidationError as e:
        return jsonify({"error": e.message, "details": e.details}), 400
    except NotFoundError:
        return jsonify({"error": "Product not found"}), 404
    except TransportError as e:
        current_app.logger.warning("Product fetch failed: %s", e)
        return jsonify({"error": "Failed to load product. Please try again."}), 502
    except Exception:
        current_app.logger.exception("Failed to price product %s", product_id)
        return jsonify({"error": "Internal server error"}), 500
