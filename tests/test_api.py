"""Integration tests for the orders and appointments HTTP surface.

Run with: pytest tests/test_api.py -v
"""

import uuid

import pytest
from rest_framework.test import APIClient

ORDER_PAYLOAD = {
    "services": [{"name": "Brake service", "price": "100.00", "quantity": 2}],
    "parts": [{"name": "Brake pads", "code": "BP-1", "price": "50.00", "quantity": 1}],
    "laborCost": "30.00",
    "discount": "10",
    "tax": "5",
    "technician": "ana",
}


def create_order(client: APIClient, payload=None) -> dict:
    res = client.post("/api/orders", payload or ORDER_PAYLOAD, format="json")
    assert res.status_code == 201, res.content
    return res.json()


def book(client: APIClient, resource: str, start: str, end: str):
    return client.post(
        "/api/appointments",
        {"resourceId": resource, "start_time": start, "end_time": end, "service_type": "Inspection"},
        format="json",
    )


@pytest.mark.django_db
class TestOrderEndpoints:
    """Tests for /api/orders"""

    def test_create_order_returns_record_layout(self, api_client: APIClient):
        data = create_order(api_client)
        assert data["number"] == 1000
        assert data["status"] == "open"
        assert data["subtotal"] == 280
        assert data["discountAmount"] == 28
        assert data["taxAmount"] == 12.6
        assert data["total"] == 264.6
        assert data["statusHistory"] == []
        assert data["completedAt"] is None
        assert data["version"] == 1
        for key in ["id", "services", "parts", "laborCost", "discount", "tax", "created_at", "updated_at"]:
            assert key in data
        assert data["parts"][0]["code"] == "BP-1"

    def test_create_order_rejects_discount_above_100(self, api_client: APIClient):
        res = api_client.post("/api/orders", {**ORDER_PAYLOAD, "discount": "120"}, format="json")
        assert res.status_code == 400

    def test_create_order_rejects_zero_quantity(self, api_client: APIClient):
        payload = {**ORDER_PAYLOAD, "services": [{"name": "Wash", "price": "10", "quantity": 0}]}
        res = api_client.post("/api/orders", payload, format="json")
        assert res.status_code == 400

    def test_list_orders_newest_first(self, api_client: APIClient):
        create_order(api_client)
        create_order(api_client)
        res = api_client.get("/api/orders")
        assert [o["number"] for o in res.json()] == [1001, 1000]

    def test_get_order_not_found(self, api_client: APIClient):
        res = api_client.get(f"/api/orders/{uuid.uuid4()}")
        assert res.status_code == 404
        assert res.json()["code"] == "ORDER_NOT_FOUND"

    def test_get_order_malformed_id_not_found(self, api_client: APIClient):
        assert api_client.get("/api/orders/not-a-uuid").status_code == 404

    def test_update_pricing(self, api_client: APIClient):
        order = create_order(api_client)
        res = api_client.patch(
            f"/api/orders/{order['id']}/pricing",
            {"discount": "0", "tax": "0", "version": order["version"]},
            format="json",
        )
        assert res.status_code == 200
        assert res.json()["total"] == 280
        assert res.json()["version"] == 2

    def test_update_pricing_stale_version(self, api_client: APIClient):
        order = create_order(api_client)
        url = f"/api/orders/{order['id']}/pricing"
        api_client.patch(url, {"tax": "0", "version": 1}, format="json")
        res = api_client.patch(url, {"tax": "7", "version": 1}, format="json")
        assert res.status_code == 409
        assert res.json()["code"] == "VERSION_CONFLICT"

    def test_transition_records_history(self, api_client: APIClient):
        order = create_order(api_client)
        res = api_client.post(
            f"/api/orders/{order['id']}/transitions",
            {"status": "in_progress", "user": "ana", "notes": "started", "version": 1},
            format="json",
        )
        assert res.status_code == 200
        data = res.json()
        assert data["status"] == "in_progress"
        assert len(data["statusHistory"]) == 1
        entry = data["statusHistory"][0]
        assert (entry["status"], entry["user"], entry["notes"]) == ("in_progress", "ana", "started")

    def test_complete_sets_completed_at(self, api_client: APIClient):
        order = create_order(api_client)
        url = f"/api/orders/{order['id']}/transitions"
        api_client.post(url, {"status": "in_progress", "version": 1}, format="json")
        res = api_client.post(url, {"status": "completed", "version": 2}, format="json")
        assert res.status_code == 200
        assert res.json()["completedAt"] is not None

    def test_invalid_transition_returns_409(self, api_client: APIClient):
        order = create_order(api_client)
        url = f"/api/orders/{order['id']}/transitions"
        api_client.post(url, {"status": "in_progress", "version": 1}, format="json")
        api_client.post(url, {"status": "waiting_parts", "version": 2}, format="json")
        res = api_client.post(url, {"status": "completed", "version": 3}, format="json")
        assert res.status_code == 409
        assert res.json()["code"] == "INVALID_TRANSITION"

    def test_unknown_status_returns_400(self, api_client: APIClient):
        order = create_order(api_client)
        res = api_client.post(
            f"/api/orders/{order['id']}/transitions",
            {"status": "delivered", "version": 1},
            format="json",
        )
        assert res.status_code == 400

    def test_timeline_synthesizes_creation_entry(self, api_client: APIClient):
        order = create_order(api_client)
        res = api_client.get(f"/api/orders/{order['id']}/timeline")
        assert res.status_code == 200
        data = res.json()
        assert len(data["timeline"]) == 1
        assert data["timeline"][0]["status"] == "open"
        assert data["availableTransitions"] == ["in_progress", "waiting_approval", "canceled"]


@pytest.mark.django_db
class TestAppointmentEndpoints:
    """Tests for /api/appointments"""

    def test_booking_conflict_returns_409(self, api_client: APIClient):
        assert book(api_client, "M1", "2024-03-15T09:30:00Z", "2024-03-15T10:30:00Z").status_code == 201
        res = book(api_client, "M1", "2024-03-15T09:00:00Z", "2024-03-15T10:00:00Z")
        assert res.status_code == 409
        assert res.json()["code"] == "SCHEDULE_CONFLICT"

    def test_same_booking_on_other_resource_succeeds(self, api_client: APIClient):
        book(api_client, "M1", "2024-03-15T09:30:00Z", "2024-03-15T10:30:00Z")
        res = book(api_client, "M2", "2024-03-15T09:00:00Z", "2024-03-15T10:00:00Z")
        assert res.status_code == 201
        data = res.json()
        assert data["resourceId"] == "M2"
        assert data["status"] == "scheduled"

    def test_zero_duration_returns_400(self, api_client: APIClient):
        res = book(api_client, "M1", "2024-03-15T09:00:00Z", "2024-03-15T09:00:00Z")
        assert res.status_code == 400
        assert res.json()["code"] == "VALIDATION_FAILED"

    def test_filter_by_mechanic(self, api_client: APIClient):
        book(api_client, "M1", "2024-03-15T09:00:00Z", "2024-03-15T10:00:00Z")
        book(api_client, "M2", "2024-03-15T09:00:00Z", "2024-03-15T10:00:00Z")
        res = api_client.get("/api/appointments", {"mechanic": "M2"})
        assert [a["resourceId"] for a in res.json()] == ["M2"]

    def test_reschedule_and_stale_version(self, api_client: APIClient):
        created = book(api_client, "M1", "2024-03-15T09:00:00Z", "2024-03-15T10:00:00Z").json()
        url = f"/api/appointments/{created['id']}"
        res = api_client.patch(
            url,
            {"start_time": "2024-03-15T11:00:00Z", "end_time": "2024-03-15T12:00:00Z", "version": 1},
            format="json",
        )
        assert res.status_code == 200
        assert res.json()["start_time"].startswith("2024-03-15T11:00:00")
        stale = api_client.patch(url, {"notes": "late", "version": 1}, format="json")
        assert stale.status_code == 409

    def test_cancel_frees_the_slot(self, api_client: APIClient):
        created = book(api_client, "M1", "2024-03-15T09:00:00Z", "2024-03-15T10:00:00Z").json()
        res = api_client.post(
            f"/api/appointments/{created['id']}/status",
            {"status": "cancelled", "version": 1},
            format="json",
        )
        assert res.status_code == 200
        assert book(api_client, "M1", "2024-03-15T09:00:00Z", "2024-03-15T10:00:00Z").status_code == 201

    def test_day_and_days_views(self, api_client: APIClient):
        book(api_client, "M1", "2024-03-15T09:00:00Z", "2024-03-15T10:00:00Z")
        book(api_client, "M2", "2024-03-15T11:00:00Z", "2024-03-15T12:00:00Z")
        book(api_client, "M1", "2024-03-20T09:00:00Z", "2024-03-20T10:00:00Z")
        day = api_client.get("/api/appointments/day/2024-03-15")
        assert [a["resourceId"] for a in day.json()] == ["M1", "M2"]
        days = api_client.get("/api/appointments/days", {"start": "2024-03-01", "end": "2024-03-31"})
        assert days.json() == {"days": ["2024-03-15", "2024-03-20"]}

    def test_malformed_day_returns_400(self, api_client: APIClient):
        assert api_client.get("/api/appointments/day/15-03-2024").status_code == 400

    def test_get_appointment_not_found(self, api_client: APIClient):
        res = api_client.get(f"/api/appointments/{uuid.uuid4()}")
        assert res.status_code == 404
        assert res.json()["code"] == "APPOINTMENT_NOT_FOUND"

    def test_delete_appointment(self, api_client: APIClient):
        created = book(api_client, "M1", "2024-03-15T09:00:00Z", "2024-03-15T10:00:00Z").json()
        url = f"/api/appointments/{created['id']}"
        assert api_client.delete(url).status_code == 204
        assert api_client.get(url).status_code == 404
        assert api_client.get("/api/appointments/day/2024-03-15").json() == []
