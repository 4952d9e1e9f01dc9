# Overview: Per-request access to the remote commerce API client.

from flask import current_app, g

from .clients.storefront_api import StorefrontAPI


def storefront_api(token: str | None = None) -> StorefrontAPI:
    """
    Build a client for the configured upstream.

    STOREFRONT_API_TRANSPORT (an httpx transport) may be set in app.config
    to point the client at an in-process fake.
    """
    if token is None:
        session = getattr(g, "storefront_session", None)
        token = session.token if session else None
    return StorefrontAPI.from_config(
        current_app.config,
        token=token,
        transport=current_app.config.get("STOREFRONT_API_TRANSPORT"),
    )
