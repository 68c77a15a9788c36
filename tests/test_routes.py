"""
Integration tests for the JSON routes, using the Flask test client.
"""

import pytest

from app import create_app
from core.document_store import InMemoryDocumentStore


ACME = {
    "name": "Acme Printing",
    "email": "orders@acme.test",
    "priceRates": [
        {
            "paperSize": "A4",
            "paperThickness": 300,
            "pricePerUnit": 12,
            "quantityBreaks": [{"minQuantity": 100, "price": 8}],
        },
        {"paperSize": "A3", "paperThickness": 170, "pricePerUnit": 20},
    ],
}


def post_client(http, payload=ACME):
    response = http.post("/api/clients", json=payload)
    assert response.status_code == 201
    return response.get_json()["record"]["id"]


# Fixtures

@pytest.fixture
def client_id(http):
    return post_client(http)


@pytest.fixture
def ink(http):
    response = http.post("/api/costs", json={"name": "Ink", "costPerUnit": 1})
    assert response.status_code == 201
    return response.get_json()["record"]["id"]


class TestServiceRoutes:
    """Test root, health and error rendering."""

    def test_index(self, http):
        data = http.get("/").get_json()
        assert data["service"] == "print-shop-dashboard"
        assert "/api/dashboard" in data["endpoints"]

    def test_health(self, http, client_id):
        response = http.get("/health")
        data = response.get_json()
        assert response.status_code == 200
        assert data["checks"]["store"] == "memory"
        assert data["checks"]["counts"]["clients"] == 1

    def test_unknown_route_is_json(self, http):
        response = http.get("/api/nothing-here")
        assert response.status_code == 404
        assert response.get_json()["ok"] is False

    def test_validation_error_is_400(self, http):
        response = http.post("/api/clients", json={"email": "x@y.test"})
        assert response.status_code == 400
        assert response.get_json() == {"ok": False, "message": "name is required", "field": "name"}


class TestClientRoutes:
    """Test client CRUD."""

    def test_list(self, http, client_id):
        clients = http.get("/api/clients").get_json()["clients"]
        assert [c["id"] for c in clients] == [client_id]
        assert clients[0]["priceRates"][0]["quantityBreaks"] == [{"minQuantity": 100, "price": 8}]

    def test_update(self, http, client_id, notifier):
        response = http.put(f"/api/clients/{client_id}", json={**ACME, "phone": "555-0100"})
        assert response.status_code == 200
        assert response.get_json()["record"]["phone"] == "555-0100"
        assert notifier.last == ("success", "Client updated successfully")

    def test_update_unknown(self, http):
        assert http.put("/api/clients/nope", json=ACME).status_code == 404

    def test_delete(self, http, client_id):
        assert http.delete(f"/api/clients/{client_id}").status_code == 200
        assert http.get("/api/clients").get_json()["clients"] == []

    def test_delete_unknown_is_store_failure(self, http, notifier):
        response = http.delete("/api/clients/nope")
        assert response.status_code == 502
        assert notifier.last == ("error", "Failed to delete client")

    def test_options(self, http, client_id):
        data = http.get(f"/api/clients/{client_id}/options").get_json()
        assert data["sizes"] == [
            {"paperSize": "A4", "thicknesses": [300]},
            {"paperSize": "A3", "thicknesses": [170]},
        ]


class TestOrderRoutes:
    """Test quoting, submission and history."""

    def test_quote(self, http, client_id, ink):
        response = http.post("/api/orders/quote", json={
            "clientId": client_id,
            "jobs": [{"paperSize": "A4", "paperThickness": 300, "quantity": 150}],
        })
        data = response.get_json()
        assert data["totalAmount"] == 1200
        assert data["cost"] == 440
        assert http.get("/api/orders").get_json()["orders"] == []

    def test_submit(self, http, client_id):
        response = http.post("/api/orders", json={
            "clientId": client_id,
            "jobs": [
                {"paperSize": "A4", "paperThickness": 300, "quantity": 50},
                {"paperSize": "B5", "paperThickness": 80, "quantity": 5},
            ],
        })
        assert response.status_code == 201
        data = response.get_json()
        assert data["record"]["totalAmount"] == 600
        assert data["record"]["cost"] == 580
        assert data["warnings"] == ["Job 2 is unpriced (no_rate)"]

    def test_submit_rejected_when_priced_jobs_required(self, store, notifier):
        app = create_app("config.TestingConfig", store=store, notifier=notifier)
        app.config["APP_STATE"].require_priced_jobs = True
        http = app.test_client()
        client_id = post_client(http)

        response = http.post("/api/orders", json={
            "clientId": client_id,
            "jobs": [{"paperSize": "B5", "paperThickness": 80, "quantity": 5}],
        })
        assert response.status_code == 422
        assert store.collection("orders").list() == []

    def test_replace_with_unpriced_job_warns(self, http, client_id):
        created = http.post("/api/orders", json={
            "clientId": client_id,
            "jobs": [{"paperSize": "A3", "paperThickness": 170, "quantity": 1}],
        }).get_json()["record"]

        response = http.put(f"/api/orders/{created['id']}", json={
            "clientId": client_id,
            "jobs": [{"paperSize": "B5", "paperThickness": 80, "quantity": 5}],
        })
        assert response.status_code == 200
        assert response.get_json()["warnings"] == ["Job 1 is unpriced (no_rate)"]

    def test_replace_rejected_when_priced_jobs_required(self, store, notifier):
        app = create_app("config.TestingConfig", store=store, notifier=notifier)
        app.config["APP_STATE"].require_priced_jobs = True
        http = app.test_client()
        client_id = post_client(http)
        created = http.post("/api/orders", json={
            "clientId": client_id,
            "jobs": [{"paperSize": "A3", "paperThickness": 170, "quantity": 1}],
        }).get_json()["record"]

        response = http.put(f"/api/orders/{created['id']}", json={
            "clientId": client_id,
            "jobs": [{"paperSize": "B5", "paperThickness": 80, "quantity": 5}],
        })
        assert response.status_code == 422
        assert response.get_json()["warnings"] == ["Job 1 is unpriced (no_rate)"]
        assert store.collection("orders").list()[0]["totalAmount"] == 20

    def test_infinite_quantity_is_400(self, http, client_id):
        body = (
            '{"clientId": "%s", "jobs": [{"paperSize": "A4", "paperThickness": 300, '
            '"quantity": Infinity}]}' % client_id
        )
        response = http.post("/api/orders/quote", data=body, content_type="application/json")
        assert response.status_code == 400
        assert response.get_json()["field"] == "quantity"

    def test_submit_needs_jobs(self, http, client_id):
        response = http.post("/api/orders", json={"clientId": client_id, "jobs": []})
        assert response.status_code == 400

    def test_history_names_deleted_clients_unknown(self, http, client_id):
        http.post("/api/orders", json={
            "clientId": client_id,
            "jobs": [{"paperSize": "A3", "paperThickness": 170, "quantity": 1}],
        })
        http.delete(f"/api/clients/{client_id}")

        orders = http.get("/api/orders/history").get_json()["orders"]
        assert orders[0]["clientName"] == "Unknown"
        assert orders[0]["totalAmount"] == 20

    def test_replace_and_delete(self, http, client_id):
        created = http.post("/api/orders", json={
            "clientId": client_id,
            "jobs": [{"paperSize": "A3", "paperThickness": 170, "quantity": 1}],
        }).get_json()["record"]

        response = http.put(f"/api/orders/{created['id']}", json={
            "clientId": client_id,
            "jobs": [{"paperSize": "A3", "paperThickness": 170, "quantity": 3}],
        })
        record = response.get_json()["record"]
        assert record["totalAmount"] == 60
        assert record["date"] == created["date"]

        assert http.delete(f"/api/orders/{created['id']}").status_code == 200
        assert http.put(f"/api/orders/{created['id']}", json={
            "clientId": client_id, "jobs": [{"quantity": 1}],
        }).status_code == 404


class TestSettingsRoutes:
    """Test papers and additional costs."""

    def test_costs_summary(self, http, ink):
        http.post("/api/costs", json={"name": "Chemicals", "costPerUnit": 0.5})
        data = http.get("/api/costs").get_json()
        assert data["perUnitTotal"] == 1.5
        assert data["plateCharge"] == 290

    def test_update_and_delete_cost(self, http, ink):
        response = http.put(f"/api/costs/{ink}", json={"name": "Ink", "costPerUnit": 2})
        assert response.get_json()["record"]["costPerUnit"] == 2

        assert http.delete(f"/api/costs/{ink}").status_code == 200
        assert http.get("/api/costs").get_json()["costs"] == []

    def test_papers(self, http):
        response = http.post("/api/papers", json={"size": "A4", "thickness": 300, "costPerUnit": 0.4})
        paper_id = response.get_json()["record"]["id"]
        assert http.get("/api/papers").get_json()["papers"][0]["id"] == paper_id
        assert http.delete(f"/api/papers/{paper_id}").status_code == 200


class TestDashboardRoutes:
    """Test dashboard, analytics and month selection."""

    @pytest.fixture
    def seeded_http(self, notifier):
        store = InMemoryDocumentStore({
            "clients": {"acme": {"name": "Acme Printing", "priceRates": []}},
            "orders": {
                "o1": {"clientId": "acme", "date": "2024-01-15T10:00:00.000Z",
                       "jobs": [], "totalAmount": 100, "cost": 40},
                "o2": {"clientId": "acme", "date": "2024-01-20T10:00:00.000Z",
                       "jobs": [], "totalAmount": 50, "cost": 10},
                "o3": {"clientId": "gone", "date": "2024-02-01T10:00:00.000Z",
                       "jobs": [], "totalAmount": 30, "cost": 30},
            },
        })
        return create_app("config.TestingConfig", store=store, notifier=notifier).test_client()

    def test_dashboard(self, seeded_http):
        data = seeded_http.get("/api/dashboard?month=2024-01").get_json()
        assert data["stats"]["totalOrders"] == 2
        assert data["stats"]["totalProfit"] == 100
        assert [p["date"] for p in data["daily"]] == ["2024-01-15", "2024-01-20"]
        assert data["monthly"][0] == {"month": "Jan", "revenue": 150, "profit": 100, "orders": 2}
        assert [o["id"] for o in data["recentOrders"]] == ["o2", "o1"]

    def test_unreadable_order_date(self, notifier):
        store = InMemoryDocumentStore({
            "orders": {
                "o1": {"clientId": "acme", "date": "2024-01-15T10:00:00.000Z",
                       "jobs": [], "totalAmount": 100, "cost": 40},
                "o2": {"clientId": "acme", "date": "", "jobs": [], "totalAmount": 5, "cost": 0},
            },
        })
        http = create_app("config.TestingConfig", store=store, notifier=notifier).test_client()

        dashboard = http.get("/api/dashboard?month=2024-01")
        assert dashboard.status_code == 200
        assert dashboard.get_json()["monthly"] == [
            {"month": "Jan", "revenue": 100, "profit": 60, "orders": 1}
        ]

        history = http.get("/api/orders/history")
        assert history.status_code == 200
        assert [o["id"] for o in history.get_json()["orders"]] == ["o1", "o2"]

    def test_bad_month(self, seeded_http):
        assert seeded_http.get("/api/dashboard?month=2024-13").status_code == 400

    def test_month_in_session(self, seeded_http):
        assert seeded_http.post("/api/month", json={"month": "2024-02"}).status_code == 200
        assert seeded_http.get("/api/month").get_json() == {"month": "2024-02"}
        data = seeded_http.get("/api/dashboard").get_json()
        assert data["stats"]["totalOrders"] == 1

    def test_analytics(self, seeded_http):
        data = seeded_http.get("/api/analytics").get_json()
        assert {row["client"] for row in data["clients"]} == {"Acme Printing", "Unknown"}

    def test_refresh(self, seeded_http):
        assert seeded_http.post("/api/refresh").get_json() == {"ok": True}


class TestNotifications:
    """Flash-backed notifications reach the session."""

    def test_notifications_drain(self):
        app = create_app("config.TestingConfig", store=InMemoryDocumentStore())
        http = app.test_client()

        post_client(http)

        first = http.get("/api/notifications").get_json()["notifications"]
        assert first == [{"kind": "success", "message": "Client added successfully"}]
        assert http.get("/api/notifications").get_json()["notifications"] == []
