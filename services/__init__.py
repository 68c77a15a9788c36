"""
Services layer for the print shop dashboard.

This module contains the business logic services:
- OrderAggregator: Builds orders with materialized price/cost totals
- AppState: Local mirror of the document store with mutation commands
- analytics_service: Pure daily/monthly/per-client reductions over orders

Routes reach AppState through app.config["APP_STATE"]; nothing in this
package holds module-level mutable state.
"""

from .order_service import OrderAggregator, OrderQuote, JobQuote
from .app_state import AppState, CommandResult
from . import analytics_service

__all__ = [
    "OrderAggregator",
    "OrderQuote",
    "JobQuote",
    "AppState",
    "CommandResult",
    "analytics_service",
]
