"""Tests for inventory lifecycle API endpoints."""

from datetime import datetime, timedelta

from flask.testing import FlaskClient

from app.services.container import ServiceContainer
from app.services.part_lifecycle import MAX_QUANTITY


class TestInventoryAPI:
    """Test cases for check-in/out and status update endpoints."""

    def test_check_out(self, client: FlaskClient, make_part):
        make_part("P1", quantity=10)

        response = client.post("/api/inventory/check-in-out", json={
            "partId": "P1",
            "type": "check-out",
            "change": 3,
            "newQuantity": 7,
            "userId": "bob",
        })

        assert response.status_code == 200
        data = response.get_json()
        assert data["quantity"] == 7
        assert data["version"] == 2
        entry = data["history"][-1]
        assert entry["type"] == "check-out"
        assert entry["change"] == 3
        assert entry["user"] == "bob"

    def test_check_in_with_string_amount(self, client: FlaskClient, make_part):
        make_part("P1", quantity=1)

        response = client.post("/api/inventory/check-in-out", json={
            "partId": "P1", "type": "check-in", "change": "5",
        }, headers={"X-User-Id": "grace"})

        assert response.status_code == 200
        data = response.get_json()
        assert data["quantity"] == 6
        assert data["history"][-1]["user"] == "grace"

    def test_check_out_insufficient(self, client: FlaskClient, make_part, container: ServiceContainer):
        make_part("P1", quantity=2)

        response = client.post("/api/inventory/check-in-out", json={
            "partId": "P1", "type": "check-out", "change": 3,
        })

        assert response.status_code == 409
        data = response.get_json()
        assert data["code"] == "INSUFFICIENT_QUANTITY"
        assert data["error"].startswith("Cannot check out more parts than available")

        part = container.part_service().get_part("P1")
        assert part.quantity == 2
        assert len(part.history) == 1

    def test_check_in_out_zero_amount(self, client: FlaskClient, make_part):
        make_part("P1", quantity=2)

        response = client.post("/api/inventory/check-in-out", json={
            "partId": "P1", "type": "check-in", "change": 0,
        })

        assert response.status_code == 400
        assert response.get_json()["error"] == "Please enter a valid positive number for quantity."

    def test_check_in_out_unknown_type(self, client: FlaskClient, make_part):
        make_part("P1")

        response = client.post("/api/inventory/check-in-out", json={
            "partId": "P1", "type": "borrow", "change": 1,
        })

        assert response.status_code == 400

    def test_check_in_out_missing_part_id(self, client: FlaskClient):
        response = client.post("/api/inventory/check-in-out", json={"type": "check-in", "change": 1})

        assert response.status_code == 400

    def test_check_in_out_not_found(self, client: FlaskClient):
        response = client.post("/api/inventory/check-in-out", json={
            "partId": "missing", "type": "check-in", "change": 1,
        })

        assert response.status_code == 404

    def test_check_in_out_stale_new_quantity(self, client: FlaskClient, make_part):
        make_part("P1", quantity=10)

        response = client.post("/api/inventory/check-in-out", json={
            "partId": "P1", "type": "check-out", "change": 3, "newQuantity": 9,
        })

        assert response.status_code == 409
        assert response.get_json()["code"] == "CONCURRENT_MODIFICATION"
        assert client.get("/api/parts/P1").get_json()["quantity"] == 10

    def test_update_status(self, client: FlaskClient, make_part):
        make_part("P1", status="In Work")

        response = client.post("/api/inventory/status", json={
            "partId": "P1", "newStatus": "Completed", "userId": "carol",
        })

        assert response.status_code == 200
        data = response.get_json()
        assert data["status"] == "Completed"
        entry = data["history"][-1]
        assert entry["type"] == "status-update"
        assert entry["oldStatus"] == "In Work"
        assert entry["newStatus"] == "Completed"
        assert entry["user"] == "carol"
        assert "change" not in entry

    def test_update_status_same_status(self, client: FlaskClient, make_part):
        make_part("P1")

        response = client.post("/api/inventory/status", json={"partId": "P1", "newStatus": "Received"})

        assert response.status_code == 409
        data = response.get_json()
        assert data["error"] == "Please select a new status to update."
        assert data["code"] == "NO_OP_REJECTED"

    def test_update_status_blank(self, client: FlaskClient, make_part):
        make_part("P1")

        response = client.post("/api/inventory/status", json={"partId": "P1", "newStatus": ""})

        assert response.status_code == 409
        assert response.get_json()["error"] == "Please select a new status to update."

    def test_update_status_unknown(self, client: FlaskClient, make_part):
        make_part("P1")

        response = client.post("/api/inventory/status", json={"partId": "P1", "newStatus": "Lost"})

        assert response.status_code == 400

    def test_update_status_not_found(self, client: FlaskClient):
        response = client.post("/api/inventory/status", json={"partId": "missing", "newStatus": "Completed"})

        assert response.status_code == 404

    def test_full_scenario(self, client: FlaskClient):
        """Create, check out 3, check in 2, then send the part out."""
        created = client.post("/api/parts", json={"id": "P1", "name": "Pump", "quantity": 10})
        assert created.status_code == 201

        out = client.post("/api/inventory/check-in-out", json={"partId": "P1", "type": "check-out", "change": 3})
        assert out.get_json()["quantity"] == 7

        back = client.post("/api/inventory/check-in-out", json={"partId": "P1", "type": "check-in", "change": 2})
        assert back.get_json()["quantity"] == 9

        sent = client.post("/api/inventory/status", json={"partId": "P1", "newStatus": "Sent Out"})
        data = sent.get_json()
        assert data["status"] == "Sent Out"
        assert data["quantity"] == 9
        assert data["version"] == 4
        assert [(e["type"], e.get("change")) for e in data["history"]] == [
            ("initial-add", 10),
            ("check-out", 3),
            ("check-in", 2),
            ("status-update", None),
        ]
        assert data["history"][-1]["oldStatus"] == "Received"
        assert data["history"][-1]["newStatus"] == "Sent Out"

    def test_check_in_out_boolean_amount(self, client: FlaskClient, make_part, container: ServiceContainer):
        """JSON booleans are not amounts and must not move stock."""
        make_part("P1", quantity=2)

        response = client.post("/api/inventory/check-in-out", json={
            "partId": "P1", "type": "check-in", "change": True,
        })

        assert response.status_code == 400
        part = container.part_service().get_part("P1")
        assert part.quantity == 2
        assert part.version == 1
        assert len(part.history) == 1

    def test_check_in_out_boolean_new_quantity(self, client: FlaskClient, make_part):
        make_part("P1", quantity=2)

        response = client.post("/api/inventory/check-in-out", json={
            "partId": "P1", "type": "check-out", "change": 1, "newQuantity": True,
        })

        assert response.status_code == 400
        assert client.get("/api/parts/P1").get_json()["quantity"] == 2

    def test_check_in_oversized_amount(self, client: FlaskClient, make_part, container: ServiceContainer):
        make_part("P1", quantity=2)

        response = client.post("/api/inventory/check-in-out", json={
            "partId": "P1", "type": "check-in", "change": 10**20,
        })

        assert response.status_code == 400
        assert response.get_json()["code"] == "INVALID_INPUT"
        part = container.part_service().get_part("P1")
        assert part.quantity == 2
        assert len(part.history) == 1

    def test_check_in_past_quantity_limit(self, client: FlaskClient, make_part):
        make_part("P1", quantity=MAX_QUANTITY)

        response = client.post("/api/inventory/check-in-out", json={
            "partId": "P1", "type": "check-in", "change": 1,
        })

        assert response.status_code == 400
        assert response.get_json()["code"] == "INVALID_INPUT"
        assert client.get("/api/parts/P1").get_json()["quantity"] == MAX_QUANTITY

    def test_history_timestamps_are_stable_utc(self, client: FlaskClient, make_part):
        """Timestamps read back later match the ones returned by the write."""
        make_part("P1", quantity=5)

        written = client.post("/api/inventory/check-in-out", json={
            "partId": "P1", "type": "check-out", "change": 1,
        }).get_json()
        read_back = client.get("/api/parts/P1").get_json()

        assert [e["timestamp"] for e in read_back["history"]] == [e["timestamp"] for e in written["history"]]
        for entry in read_back["history"]:
            assert datetime.fromisoformat(entry["timestamp"]).utcoffset() == timedelta(0)
        assert datetime.fromisoformat(read_back["createdAt"]).utcoffset() == timedelta(0)
