"""
Order routes.

Handles:
- GET    /api/orders          - all stored orders (stored totals, as created)
- GET    /api/orders/history  - newest first, with client display names
- POST   /api/orders/quote    - price the jobs without saving
- POST   /api/orders          - build and save an order
- PUT    /api/orders/<id>     - replace an order's client and jobs (re-priced)
- DELETE /api/orders/<id>     - delete an order

Submitting or replacing an order never blocks on unpriced jobs unless
REQUIRE_PRICED_JOBS is set (then it answers 422); the response carries
warnings instead.
"""

from flask import Blueprint, request

from modules.forms import parse_order_request
from services import analytics_service
from logging_config import get_logger
from .common import command_response, get_state


# Module logger
logger = get_logger(__name__)

orders_bp = Blueprint("orders", __name__, url_prefix="/api/orders")


@orders_bp.route("", methods=["GET"])
def list_orders():
    return {"orders": [order.to_dict() for order in get_state().orders]}


@orders_bp.route("/history", methods=["GET"])
def history():
    state = get_state()
    return {"orders": analytics_service.order_history(state.orders, state.clients)}


@orders_bp.route("/quote", methods=["POST"])
def quote():
    client_id, jobs = parse_order_request(request.get_json(silent=True))
    return get_state().quote_order(client_id, jobs).to_dict()


@orders_bp.route("", methods=["POST"])
def submit():
    client_id, jobs = parse_order_request(request.get_json(silent=True))
    logger.info(f"Submitting order for client {client_id} with {len(jobs)} job(s)")

    state = get_state()
    result = state.submit_order(client_id, jobs)
    if _rejected_as_unpriced(state, result):
        return command_response(result)[0], 422
    return command_response(result, success_status=201)


@orders_bp.route("/<order_id>", methods=["PUT"])
def replace_order(order_id: str):
    state = get_state()
    if state.get_order(order_id) is None:
        return {"ok": False, "message": "Order not found"}, 404

    client_id, jobs = parse_order_request(request.get_json(silent=True))
    result = state.reprice_order(order_id, client_id, jobs)
    if _rejected_as_unpriced(state, result):
        return command_response(result)[0], 422
    return command_response(result)


@orders_bp.route("/<order_id>", methods=["DELETE"])
def delete_order(order_id: str):
    return command_response(get_state().delete_order(order_id))


def _rejected_as_unpriced(state, result) -> bool:
    # Rejected before reaching the store
    return not result.ok and state.require_priced_jobs and bool(result.warnings)
