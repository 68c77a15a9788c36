"""
Main routes.

The dashboard front end is served separately; the root only identifies
the service and points at the main endpoints.
"""

from flask import Blueprint

main_bp = Blueprint("main", __name__)


@main_bp.route("/")
def index():
    return {
        "service": "print-shop-dashboard",
        "endpoints": [
            "/api/dashboard",
            "/api/analytics",
            "/api/clients",
            "/api/orders",
            "/api/papers",
            "/api/costs",
        ],
    }
