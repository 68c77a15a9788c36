"""Shared helpers for the JSON blueprints."""

from datetime import datetime, timezone

from flask import current_app, request, session

from modules.forms import parse_month
from services.app_state import AppState, CommandResult


def get_state() -> AppState:
    """The AppState created by create_app()."""
    return current_app.config["APP_STATE"]


def current_month() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m")


def selected_month() -> str:
    """
    Month for month-scoped views.

    Order of precedence: ?month= query argument, the month stored in the
    session, then the current month.
    """
    month = request.args.get("month")
    if month:
        return parse_month(month)
    return session.get("month") or current_month()


def command_response(result: CommandResult, success_status: int = 200):
    """
    Render a CommandResult.

    Failed store calls answer 502: the request was valid but the store
    behind the dashboard refused it.
    """
    body = {"ok": result.ok, "message": result.message}
    if result.record is not None:
        body["record"] = result.record.to_dict()
    if result.warnings:
        body["warnings"] = result.warnings
    return body, (success_status if result.ok else 502)
