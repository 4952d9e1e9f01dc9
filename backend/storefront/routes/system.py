# backend/storefront/routes/system.py
"""
Health endpoints.

/api/health answers without touching the network; /api/health/upstream
also round-trips the remote commerce API so deploys can see whether the
storefront can reach it.
"""

import time
from flask import Blueprint, current_app, jsonify

from ..errors import StorefrontError
from ..extensions import storefront_api
from ..time_utils import to_utc_z, utcnow

system_bp = Blueprint("system", __name__)


def check_upstream_health() -> dict:
    """
    Fetch the catalogue from the remote API and time it.

    Returns dict with status and details.
    """
    start_time = time.time()
    try:
        with storefront_api() as api:
            products = api.fetch_all_products()
        elapsed_ms = (time.time() - start_time) * 1000
        return {
            "status": "healthy",
            "latency_ms": round(elapsed_ms, 2),
            "details": {"products": len(products)},
        }
    except StorefrontError:
        elapsed_ms = (time.time() - start_time) * 1000
        current_app.logger.exception("Upstream health check failed")
        return {
            "status": "unhealthy",
            "latency_ms": round(elapsed_ms, 2),
            "error": "Upstream unreachable",
        }


@system_bp.get("/api/health")
def health():
    return jsonify({
        "status": "healthy",
        "timestamp": to_utc_z(utcnow()),
        "upstream": current_app.config["STOREFRONT_API_URL"],
    }), 200


@system_bp.get("/api/health/upstream")
def upstream_health():
    upstream = check_upstream_health()
    status_code = 200 if upstream["status"] == "healthy" else 503
    return jsonify({
        "status": upstream["status"],
        "timestamp": to_utc_z(utcnow()),
        "checks": {"upstream": upstream},
    }), status_code
