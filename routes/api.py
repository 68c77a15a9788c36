"""
API routes (housekeeping endpoints).

Handles:
- /health            - Health check with store status
- /api/notifications - Drain pending success/error notifications
- /api/month         - Get or set the selected dashboard month
- /api/refresh       - Reload the local mirror from the document store
"""

from flask import (
    Blueprint,
    current_app,
    get_flashed_messages,
    request,
    session,
)

from modules.forms import parse_month, require_object
from logging_config import get_logger
from .common import get_state, selected_month


# Module logger
logger = get_logger(__name__)

api_bp = Blueprint("api", __name__)


@api_bp.route("/health", methods=["GET"])
def health():
    """Health check endpoint with service status."""
    health_status = {
        "status": "ok",
        "environment": current_app.config.get("ENVIRONMENT", "unknown"),
        "checks": {}
    }

    state = current_app.config.get("APP_STATE")
    if state is not None:
        health_status["checks"]["store"] = state.store.backend_name
        health_status["checks"]["counts"] = {
            "clients": len(state.clients),
            "orders": len(state.orders),
            "papers": len(state.papers),
            "additionalCosts": len(state.additional_costs),
        }
    else:
        health_status["checks"]["store"] = "not_initialized"
        health_status["status"] = "degraded"

    status_code = 200 if health_status["status"] == "ok" else 503
    return health_status, status_code


@api_bp.route("/api/notifications", methods=["GET"])
def notifications():
    """
    Pending notifications for this session.

    Reading them removes them, the same way flashed messages disappear
    once a page has shown them.
    """
    return {
        "notifications": [
            {"kind": kind, "message": message}
            for kind, message in get_flashed_messages(with_categories=True)
        ]
    }


@api_bp.route("/api/month", methods=["GET"])
def get_month():
    return {"month": selected_month()}


@api_bp.route("/api/month", methods=["POST"])
def set_month():
    data = require_object(request.get_json(silent=True))
    month = parse_month(data.get("month"))
    session["month"] = month
    session.modified = True
    return {"month": month}


@api_bp.route("/api/refresh", methods=["POST"])
def refresh():
    ok = get_state().refresh()
    if not ok:
        logger.warning("Refresh completed with errors")
    return {"ok": ok}, (200 if ok else 502)
