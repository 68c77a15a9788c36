"""
Configuration for the print shop dashboard.

Values come from environment variables, optionally loaded from a .env file
next to this module.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env file early so environment variables are available for Config class
# This must happen before the Config class is defined
load_dotenv(override=True)

# Base directory (where this file lives)
BASE_DIR = Path(__file__).resolve().parent


class Config:
    """Default configuration for the Flask application."""

    # Flask settings
    SECRET_KEY = os.environ.get("FLASK_SECRET_KEY", "dev-secret-key")
    SESSION_COOKIE_NAME = "print_shop_session"
    ENVIRONMENT = os.environ.get("FLASK_ENV", "development")

    # Debug mode
    DEBUG = os.environ.get("FLASK_DEBUG", "1") == "1"

    # ==========================================================================
    # Document store
    # ==========================================================================
    # STORE_BACKEND: "memory" (lost on restart) or "json" (single JSON file)
    # STORE_PATH: file used by the "json" backend
    # ==========================================================================
    STORE_BACKEND = os.environ.get("STORE_BACKEND", "json")
    STORE_PATH = os.environ.get(
        "STORE_PATH", str(BASE_DIR / "data" / "print_shop.json")
    )

    # ==========================================================================
    # Pricing
    # ==========================================================================
    # PLATE_CHARGE: flat production charge added once to every job's cost
    # REQUIRE_PRICED_JOBS: reject order submission when any job is unpriced
    #   (otherwise the order is saved and a warning is returned)
    # ==========================================================================
    PLATE_CHARGE = os.environ.get("PLATE_CHARGE", "290")
    REQUIRE_PRICED_JOBS = os.environ.get("REQUIRE_PRICED_JOBS", "0") == "1"

    # Orders shown in the dashboard's recent orders table
    RECENT_ORDERS_LIMIT = int(os.environ.get("RECENT_ORDERS_LIMIT", "5"))


class ProductionConfig(Config):
    """Production configuration."""
    DEBUG = False
    TESTING = False
    SESSION_COOKIE_SECURE = True
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = 'Lax'
    PERMANENT_SESSION_LIFETIME = 3600  # 1 hour


class DevelopmentConfig(Config):
    """Development configuration."""
    DEBUG = True
    TESTING = False


class TestingConfig(Config):
    """Testing configuration."""
    DEBUG = False
    TESTING = True
    STORE_BACKEND = "memory"
    STORE_PATH = ""
    PLATE_CHARGE = "290"
    REQUIRE_PRICED_JOBS = False
