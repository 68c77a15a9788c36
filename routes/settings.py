"""
Settings routes: paper stock and additional costs.

Handles:
- GET/POST   /api/papers          - list / add paper stock
- DELETE     /api/papers/<id>     - remove paper stock
- GET/POST   /api/costs           - list / add additional costs
- PUT/DELETE /api/costs/<id>      - replace / remove an additional cost

Changing additional costs only affects orders built afterwards; stored
orders keep the cost they were created with.
"""

from flask import Blueprint, request

from models.numbers import to_number
from modules.forms import parse_additional_cost, parse_paper
from .common import command_response, get_state


settings_bp = Blueprint("settings", __name__, url_prefix="/api")


@settings_bp.route("/papers", methods=["GET"])
def list_papers():
    return {"papers": [paper.to_dict() for paper in get_state().papers]}


@settings_bp.route("/papers", methods=["POST"])
def add_paper():
    paper = parse_paper(request.get_json(silent=True))
    return command_response(get_state().add_paper(paper), success_status=201)


@settings_bp.route("/papers/<paper_id>", methods=["DELETE"])
def delete_paper(paper_id: str):
    return command_response(get_state().delete_paper(paper_id))


@settings_bp.route("/costs", methods=["GET"])
def list_costs():
    state = get_state()
    catalog = state.cost_catalog()
    return {
        "costs": [cost.to_dict() for cost in catalog.costs],
        "perUnitTotal": to_number(catalog.per_unit_total),
        "plateCharge": to_number(state.aggregator.engine.plate_charge),
    }


@settings_bp.route("/costs", methods=["POST"])
def add_cost():
    cost = parse_additional_cost(request.get_json(silent=True))
    return command_response(get_state().add_additional_cost(cost), success_status=201)


@settings_bp.route("/costs/<cost_id>", methods=["PUT"])
def update_cost(cost_id: str):
    cost = parse_additional_cost(request.get_json(silent=True), cost_id=cost_id)
    return command_response(get_state().update_additional_cost(cost))


@settings_bp.route("/costs/<cost_id>", methods=["DELETE"])
def delete_cost(cost_id: str):
    return command_response(get_state().delete_additional_cost(cost_id))
