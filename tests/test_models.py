"""
Unit tests for the data models and their stored format.
"""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

from models.catalog import AdditionalCost, Paper
from models.client import Client, RateCatalog, rate_key
from models.numbers import to_decimal, to_number
from models.order import Order, format_timestamp, parse_timestamp


STORED_ORDER = {
    "id": "o1",
    "clientId": "acme",
    "date": "2024-01-15T10:30:00.000Z",
    "jobs": [{"id": "j1", "paperSize": "A4", "paperThickness": 300, "quantity": 50}],
    "totalAmount": 500,
    "cost": 390.5,
}


class TestNumbers:
    """Test stored number conversions."""

    def test_float_goes_through_str(self):
        assert to_decimal(0.1) == Decimal("0.1")

    def test_unparseable_uses_default(self):
        assert to_decimal("abc") == 0
        assert to_decimal(None, default=Decimal("290")) == Decimal("290")

    def test_to_number(self):
        assert to_number(Decimal("300.00")) == 300
        assert isinstance(to_number(Decimal("300.00")), int)
        assert to_number(Decimal("0.5")) == 0.5
        assert to_number(None) is None


class TestOrderModel:
    """Test Order stored format and date helpers."""

    def test_round_trip(self):
        order = Order.from_dict(STORED_ORDER)
        assert order.total_amount == Decimal("500")
        assert order.jobs[0].paper_thickness == Decimal("300")
        assert order.to_dict() == STORED_ORDER

    def test_profit(self):
        assert Order.from_dict(STORED_ORDER).profit == Decimal("109.5")

    def test_day_and_month(self):
        order = Order.from_dict(STORED_ORDER)
        assert order.day == "2024-01-15"
        assert order.in_month("2024-01")
        assert not order.in_month("2024-02")

    def test_missing_fields(self):
        order = Order.from_dict({"id": "o2", "clientId": "acme", "date": "2024-03-01"})
        assert order.jobs == ()
        assert order.total_amount == 0

    def test_unreadable_date_has_no_timestamp(self):
        for date in ("", "15/01/2024", "yesterday"):
            order = Order.from_dict({**STORED_ORDER, "date": date})
            assert order.timestamp is None

    def test_format_timestamp_converts_to_utc(self):
        local = datetime(2024, 1, 15, 12, 30, tzinfo=timezone(timedelta(hours=2)))
        assert format_timestamp(local) == "2024-01-15T10:30:00.000Z"

    def test_parse_timestamp(self):
        assert parse_timestamp("2024-01-15T10:30:00.000Z") == datetime(
            2024, 1, 15, 10, 30, tzinfo=timezone.utc
        )
        assert parse_timestamp("2024-01-15").tzinfo is timezone.utc


class TestClientModel:
    """Test Client stored format and the rate catalog."""

    def test_round_trip(self):
        data = {
            "id": "acme",
            "name": "Acme",
            "email": "",
            "phone": "",
            "priceRates": [{
                "paperSize": "A4",
                "paperThickness": 300,
                "pricePerUnit": 12,
                "quantityBreaks": [{"minQuantity": 100, "price": 8.5}],
            }],
        }
        assert Client.from_dict(data).to_dict() == data

    def test_rate_key(self):
        assert rate_key("A4", "300") == rate_key("A4", 300.0)
        assert rate_key("", 300) is None
        assert rate_key("A4", None) is None

    def test_catalog_choices(self):
        client = Client.from_dict({
            "id": "acme",
            "name": "Acme",
            "priceRates": [
                {"paperSize": "A4", "paperThickness": 300, "pricePerUnit": 12},
                {"paperSize": "A3", "paperThickness": 170, "pricePerUnit": 20},
                {"paperSize": "A4", "paperThickness": 170, "pricePerUnit": 9},
            ],
        })
        catalog = client.rate_catalog
        assert catalog.paper_sizes() == ["A4", "A3"]
        assert catalog.thicknesses_for("A4") == [Decimal("300"), Decimal("170")]
        assert ("A3", Decimal("170")) in catalog

    def test_catalog_skips_rates_without_size(self):
        catalog = RateCatalog([Client.from_dict({"priceRates": [{"paperThickness": 300}]}).price_rates[0]])
        assert len(catalog) == 0


class TestCatalogModels:
    """Test papers and additional costs."""

    def test_paper_without_id(self):
        paper = Paper(size="A4", thickness=Decimal("300"), cost_per_unit=Decimal("0.45"))
        assert paper.to_dict() == {"size": "A4", "thickness": 300, "costPerUnit": 0.45}

    def test_additional_cost_round_trip(self):
        data = {"id": "ink", "name": "Ink", "costPerUnit": 1.5}
        assert AdditionalCost.from_dict(data).to_dict() == data
