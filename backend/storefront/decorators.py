# Overview: Request decorators for API routes.

from functools import wraps
from flask import request, jsonify, g

from .session import StorefrontSession


def require_auth(f):
    """
    Require a bearer token and establish the request's storefront session.

    Sets g.storefront_session to a StorefrontSession carrying the token.
    The token is not validated here; the remote store checks it (and the
    admin role) on every forwarded call and answers 401/403.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        auth_header = request.headers.get("Authorization")

        if not auth_header or not auth_header.startswith("Bearer "):
            return jsonify({"error": "Authentication required"}), 401

        token = auth_header.split(" ", 1)[1].strip()
        if not token:
            return jsonify({"error": "Authentication required"}), 401

        g.storefront_session = StorefrontSession(token=token)

        return f(*args, **kwargs)

    return decorated_function
