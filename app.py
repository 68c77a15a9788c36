"""
Print Shop Dashboard - Flask Application Entry Point.

This is a slim app factory that:
1. Loads configuration and logging
2. Opens the document store (fail-fast if it cannot be opened)
3. Builds the application state (pricing engine, order aggregator, mirror)
4. Loads every collection into the local mirror
5. Registers route blueprints and JSON error handlers

ARCHITECTURE:
    Request threads
    └── routes -> AppState (commands, snapshots)
                  ├── OrderAggregator -> PricingEngine
                  ├── DocumentStore (memory | json file)
                  └── Notifier (flash queue)

Pricing and analytics are pure and read immutable snapshots. Only
AppState commands touch the store, and they update the mirror after the
store call succeeds.
"""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask
from werkzeug.exceptions import HTTPException

from logging_config import setup_logging, get_logger
from core.document_store import DocumentStore, create_document_store
from core.exceptions import PrintShopError, StoreUnavailableError, ValidationError
from core.notifications import FlashNotifier, Notifier
from modules.pricing import PricingEngine
from models.numbers import to_decimal
from services.app_state import AppState
from services.order_service import OrderAggregator
from routes import register_blueprints


# Module logger (configured after setup_logging)
logger = get_logger(__name__)


def _get_base_path() -> Path:
    """
    Get the base path for the application.

    Frozen bundle: the directory containing the executable
    Development: the directory containing app.py
    """
    if getattr(sys, 'frozen', False):
        return Path(sys.executable).parent
    else:
        return Path(__file__).parent


def create_app(
    config_object: str = "config.Config",
    store: Optional[DocumentStore] = None,
    notifier: Optional[Notifier] = None,
) -> Flask:
    """
    Application factory - creates and configures the Flask app.

    Args:
        config_object: Import path of the config class
        store: Document store to use instead of the configured backend
        notifier: Notification sink to use instead of the flash queue

    Returns:
        Configured Flask application

    Raises:
        StoreUnavailableError: If the configured document store cannot be opened
    """
    # Use override=True so .env file always takes precedence over shell environment
    env_file = _get_base_path() / '.env'
    if env_file.exists():
        load_dotenv(env_file, override=True)
    else:
        load_dotenv(override=True)

    app = Flask(__name__)
    app.config.from_object(config_object)

    log_level = logging.DEBUG if app.config.get("DEBUG") else logging.INFO
    enable_file_logging = app.config.get("ENVIRONMENT") == "production"

    root_logger = setup_logging(
        log_level=log_level,
        enable_file_logging=enable_file_logging
    )

    # Set Flask's logger to use our configured logger
    app.logger.handlers = root_logger.handlers
    app.logger.setLevel(log_level)

    logger.info(f"Starting print shop dashboard in {app.config.get('ENVIRONMENT')} mode")

    # =========================================================================
    # DOCUMENT STORE (FAIL-FAST)
    # =========================================================================

    if store is None:
        backend = app.config.get("STORE_BACKEND", "memory")
        try:
            store = create_document_store(backend, app.config.get("STORE_PATH"))
        except StoreUnavailableError as e:
            logger.error(f"FATAL: Cannot start application - {e}")
            raise
    logger.info(f"Document store ready ({store.backend_name})")

    # =========================================================================
    # APPLICATION STATE
    # =========================================================================

    engine = PricingEngine(plate_charge=to_decimal(app.config.get("PLATE_CHARGE", "290")))
    state = AppState(
        store=store,
        notifier=notifier or FlashNotifier(),
        aggregator=OrderAggregator(engine),
        require_priced_jobs=bool(app.config.get("REQUIRE_PRICED_JOBS")),
    )
    if not state.refresh():
        logger.warning("Initial load from the document store was incomplete")

    app.config["APP_STATE"] = state

    register_blueprints(app)

    # =========================================================================
    # ERROR HANDLERS
    # =========================================================================

    @app.errorhandler(ValidationError)
    def handle_validation_error(e: ValidationError):
        logger.info(f"Rejected request: {e}")
        body = {"ok": False, "message": e.message}
        if e.field:
            body["field"] = e.field
        return body, 400

    @app.errorhandler(PrintShopError)
    def handle_app_error(e: PrintShopError):
        logger.error(f"Unhandled application error: {e}", exc_info=True)
        return {"ok": False, "message": e.message}, 500

    @app.errorhandler(HTTPException)
    def handle_http_error(e: HTTPException):
        return {"ok": False, "message": e.description}, e.code

    @app.errorhandler(500)
    def handle_server_error(e):
        logger.error(f"500 error: {e}", exc_info=True)
        return {"ok": False, "message": "An unexpected error occurred. Please try again."}, 500

    logger.info("Application initialized successfully")
    return app


if __name__ == "__main__":
    app = create_app()
    debug_mode = os.environ.get("FLASK_DEBUG", "1") == "1"
    app.run(debug=debug_mode)
