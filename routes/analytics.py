"""
Dashboard and analytics routes.

Handles:
- GET /api/dashboard?month=YYYY-MM - headline stats, daily series, monthly
                                     series and recent orders for one month
- GET /api/analytics               - monthly and per-client series over all orders

All numbers are recomputed from the stored orders on every request.
"""

from flask import Blueprint, current_app

from services import analytics_service
from .common import get_state, selected_month


analytics_bp = Blueprint("analytics", __name__, url_prefix="/api")


@analytics_bp.route("/dashboard", methods=["GET"])
def dashboard():
    state = get_state()
    month = selected_month()
    orders = state.orders
    clients = state.clients
    limit = current_app.config.get("RECENT_ORDERS_LIMIT", 5)

    return {
        "stats": analytics_service.dashboard_stats(orders, clients, month),
        "daily": [p.to_dict() for p in analytics_service.daily_series(orders, month)],
        "monthly": [p.to_dict() for p in analytics_service.monthly_series(orders)],
        "recentOrders": analytics_service.recent_orders(orders, clients, month, limit=limit),
    }


@analytics_bp.route("/analytics", methods=["GET"])
def analytics():
    state = get_state()
    orders = state.orders
    return {
        "monthly": [p.to_dict() for p in analytics_service.monthly_series(orders)],
        "clients": [
            p.to_dict() for p in analytics_service.client_series(orders, state.clients)
        ],
    }
