"""Contract tests for GET /availability.

Response: {ok, property:{id,slug,name}, range:{from,to}, occupied:[{id,checkin,checkout,status}]}
"""

import datetime as dt

from fastapi.testclient import TestClient
from starlette.status import HTTP_200_OK, HTTP_400_BAD_REQUEST, HTTP_404_NOT_FOUND

from staybook.models import ReservationStatus


class TestAvailabilitySuccess:
    def test_empty_calendar(self, client: TestClient, villa):
        response = client.get(
            "/availability",
            params={"property_slug": "villa-x", "from": "2024-06-01", "to": "2024-06-30"},
        )

        assert response.status_code == HTTP_200_OK
        assert response.json() == {
            "ok": True,
            "property": {"id": villa.id, "slug": "villa-x", "name": "Villa X"},
            "range": {"from": "2024-06-01", "to": "2024-06-30"},
            "occupied": [],
        }

    def test_lists_blocking_reservations(self, client: TestClient, villa, make_reservation):
        pending = make_reservation(dt.date(2024, 6, 1), dt.date(2024, 6, 4))
        paid = make_reservation(dt.date(2024, 6, 10), dt.date(2024, 6, 12), ReservationStatus.PAID)
        make_reservation(dt.date(2024, 6, 20), dt.date(2024, 6, 22), ReservationStatus.EXPIRED)

        response = client.get(
            "/availability",
            params={"property_id": villa.id, "from": "2024-06-01", "to": "2024-06-30"},
        )

        assert response.status_code == HTTP_200_OK
        assert response.json()["occupied"] == [
            {"id": pending, "checkin": "2024-06-01", "checkout": "2024-06-04", "status": "pending"},
            {"id": paid, "checkin": "2024-06-10", "checkout": "2024-06-12", "status": "paid"},
        ]

    def test_inverted_range_lists_nothing(self, client: TestClient, make_reservation):
        make_reservation(dt.date(2024, 6, 1), dt.date(2024, 6, 10))

        response = client.get(
            "/availability",
            params={"property_slug": "villa-x", "from": "2024-06-08", "to": "2024-06-02"},
        )

        assert response.status_code == HTTP_200_OK
        assert response.json()["occupied"] == []


class TestAvailabilityErrors:
    def test_missing_to(self, client: TestClient):
        response = client.get(
            "/availability", params={"property_slug": "villa-x", "from": "2024-06-01"}
        )

        assert response.status_code == HTTP_400_BAD_REQUEST
        body = response.json()
        assert body["ok"] is False
        assert "to" in body["error"]

    def test_malformed_date(self, client: TestClient):
        response = client.get(
            "/availability",
            params={"property_slug": "villa-x", "from": "June 1st", "to": "2024-06-30"},
        )

        assert response.status_code == HTTP_400_BAD_REQUEST
        assert response.json()["ok"] is False

    def test_unknown_property(self, client: TestClient):
        response = client.get(
            "/availability",
            params={"property_slug": "nope", "from": "2024-06-01", "to": "2024-06-30"},
        )

        assert response.status_code == HTTP_404_NOT_FOUND
        assert response.json() == {"ok": False, "error": "Property not found"}

    def test_no_property_key(self, client: TestClient):
        response = client.get("/availability", params={"from": "2024-06-01", "to": "2024-06-30"})

        assert response.status_code == HTTP_404_NOT_FOUND
