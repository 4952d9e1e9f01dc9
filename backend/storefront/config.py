# backend/storefront/config.py
from __future__ import annotations
import os


def _env_flag(name: str, default: bool = False) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


class Config:
    # Optional "SECRET_KEY", with default dev key
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-key-change-me")

    # Remote commerce API (orders, products, auth live there)
    STOREFRONT_API_URL = os.environ.get("STOREFRONT_API_URL", "http://localhost:5000/api")
    STOREFRONT_API_TIMEOUT = float(os.environ.get("STOREFRONT_API_TIMEOUT", "10"))

    # Pricing rules. Set DEFAULT_TAX_PERCENT=0 for the tax-free catalog.
    DEFAULT_TAX_PERCENT = os.environ.get("DEFAULT_TAX_PERCENT", "10")
    ONLINE_PAYMENT_DISCOUNT = os.environ.get("ONLINE_PAYMENT_DISCOUNT", "50")

    # Order timeline behaviour (both off = what the admin panel has always done)
    STRICT_STATUS_TRANSITIONS = _env_flag("STRICT_STATUS_TRANSITIONS")
    MERGE_TRACKING_DETAILS = _env_flag("MERGE_TRACKING_DETAILS")

    # Payment gateway checkout window
    PAYMENT_KEY_ID = os.environ.get("PAYMENT_KEY_ID", "")
    CURRENCY = os.environ.get("CURRENCY", "INR")
    MERCHANT_NAME = os.environ.get("MERCHANT_NAME", "Illuminate")

    ALLOWED_ORIGINS = {
        origin.strip()
        for origin in os.environ.get(
            "ALLOWED_ORIGINS",
            "http://localhost:5173,http://127.0.0.1:5173,http://localhost:4173,http://127.0.0.1:4173",
        ).split(",")
        if origin.strip()
    }
