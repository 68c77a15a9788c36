"""Shared fixtures for the print shop dashboard tests."""

from decimal import Decimal

import pytest

from app import create_app
from core.document_store import InMemoryDocumentStore
from core.notifications import RecordingNotifier
from models.catalog import AdditionalCost, CostCatalog
from models.client import Client, PriceRate, QuantityBreak
from modules.pricing import PricingEngine


@pytest.fixture
def engine():
    """Pricing engine with the standard 290 plate charge."""
    return PricingEngine(plate_charge=Decimal("290"))


@pytest.fixture
def tiered_rate():
    """A4/300gsm at 12 per unit with breaks at 0, 100 and 500."""
    return PriceRate(
        paper_size="A4",
        paper_thickness=Decimal("300"),
        price_per_unit=Decimal("12"),
        quantity_breaks=(
            QuantityBreak(min_quantity=0, price=Decimal("10")),
            QuantityBreak(min_quantity=100, price=Decimal("8")),
            QuantityBreak(min_quantity=500, price=Decimal("6")),
        ),
    )


@pytest.fixture
def acme(tiered_rate):
    """Client with the tiered A4 rate and a flat A3 rate."""
    return Client(
        id="acme",
        name="Acme Printing",
        email="orders@acme.test",
        phone="555-0100",
        price_rates=(
            tiered_rate,
            PriceRate(paper_size="A3", paper_thickness=Decimal("170"), price_per_unit=Decimal("20")),
        ),
    )


@pytest.fixture
def cost_catalog():
    """Ink at 1.50 and chemicals at 0.50 per unit (2.00 per unit total)."""
    return CostCatalog.of([
        AdditionalCost(id="ink", name="Ink", cost_per_unit=Decimal("1.50")),
        AdditionalCost(id="chem", name="Chemicals", cost_per_unit=Decimal("0.50")),
    ])


@pytest.fixture
def store():
    return InMemoryDocumentStore()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def app(store, notifier):
    """Flask app on an in-memory store with recorded notifications."""
    app = create_app("config.TestingConfig", store=store, notifier=notifier)
    return app


@pytest.fixture
def http(app):
    """Flask test client."""
    return app.test_client()
