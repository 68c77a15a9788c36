"""
Client management routes.

Handles:
- GET    /api/clients        - list clients (with their rate catalogs)
- POST   /api/clients        - add a client
- PUT    /api/clients/<id>   - replace a client (rates included)
- DELETE /api/clients/<id>   - delete a client (orders keep the dangling id)
- GET    /api/clients/<id>/options - paper sizes/thicknesses the client has rates for
"""

from flask import Blueprint, request

from models.numbers import to_number
from modules.forms import parse_client
from logging_config import get_logger
from .common import command_response, get_state


# Module logger
logger = get_logger(__name__)

clients_bp = Blueprint("clients", __name__, url_prefix="/api/clients")


@clients_bp.route("", methods=["GET"])
def list_clients():
    return {"clients": [client.to_dict() for client in get_state().clients]}


@clients_bp.route("", methods=["POST"])
def add_client():
    client = parse_client(request.get_json(silent=True))
    return command_response(get_state().add_client(client), success_status=201)


@clients_bp.route("/<client_id>", methods=["PUT"])
def update_client(client_id: str):
    state = get_state()
    if state.get_client(client_id) is None:
        return {"ok": False, "message": "Client not found"}, 404

    client = parse_client(request.get_json(silent=True), client_id=client_id)
    return command_response(state.update_client(client))


@clients_bp.route("/<client_id>", methods=["DELETE"])
def delete_client(client_id: str):
    return command_response(get_state().delete_client(client_id))


@clients_bp.route("/<client_id>/options", methods=["GET"])
def paper_options(client_id: str):
    """
    Selection choices for the new-order form.

    Sizes come from the client's rates (first occurrence order); each size
    lists the thicknesses the client has a rate for.
    """
    client = get_state().get_client(client_id)
    if client is None:
        return {"ok": False, "message": "Client not found"}, 404

    catalog = client.rate_catalog
    return {
        "sizes": [
            {
                "paperSize": size,
                "thicknesses": [to_number(t) for t in catalog.thicknesses_for(size)],
            }
            for size in catalog.paper_sizes()
        ]
    }
