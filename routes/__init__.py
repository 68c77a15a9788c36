"""
Flask route blueprints for the print shop dashboard.

This module contains all route handlers organized by functionality:
- main: Service root
- clients: Client and rate catalog management
- orders: Order quoting, submission, history, replacement
- settings: Paper stock and additional costs
- analytics: Dashboard and analytics series
- api: Health, notifications, selected month, refresh

Every blueprint answers JSON. Each one is registered with the Flask app in
create_app().
"""

from .main import main_bp
from .clients import clients_bp
from .orders import orders_bp
from .settings import settings_bp
from .analytics import analytics_bp
from .api import api_bp

__all__ = [
    "main_bp",
    "clients_bp",
    "orders_bp",
    "settings_bp",
    "analytics_bp",
    "api_bp",
]


def register_blueprints(app):
    """
    Register all blueprints with the Flask app.

    Args:
        app: Flask application instance
    """
    app.register_blueprint(main_bp)
    app.register_blueprint(clients_bp)
    app.register_blueprint(orders_bp)
    app.register_blueprint(settings_bp)
    app.register_blueprint(analytics_bp)
    app.register_blueprint(api_bp)
