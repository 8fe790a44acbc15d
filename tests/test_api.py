"""
Tests for the HTTP endpoints.
"""

import pytest
from fastapi.testclient import TestClient

from apps.api import deps
from apps.api.main import app
from core.config import settings
from domain.models import Table
from services.availability import AvailabilityService
from services.booking_service import BookingService
from services.exceptions import StorageError
from services.reservation_validation import ReservationValidator
from services.store import InMemoryReservationStore


PREFIX = settings.API_V1_PREFIX


class UnavailableStore(InMemoryReservationStore):
    def get_restaurant_config(self, restaurant_id):
        raise StorageError("connection refused")

    def get_tables(self, restaurant_id):
        raise StorageError("connection refused")


@pytest.fixture
def make_client(clock):
    """TestClient wired to the given store with a fixed clock."""
    def _make(store):
        validator = ReservationValidator(store, clock)
        booking_service = BookingService(store, validator=validator)
        app.dependency_overrides[deps.get_validator] = lambda: validator
        app.dependency_overrides[deps.get_availability_service] = lambda: AvailabilityService(store, clock=clock)
        app.dependency_overrides[deps.get_booking_service] = lambda: booking_service
        return TestClient(app)

    yield _make
    app.dependency_overrides.clear()


@pytest.fixture
def client(make_client, store):
    return make_client(store)


@pytest.fixture
def body(booking_day):
    return {
        "restaurant_id": "r1",
        "booking_date": booking_day.isoformat(),
        "booking_time": "18:00",
        "party_size": 4,
        "requested_duration": {"hours": 1, "minutes": 30},
        "guest_name": "Jana",
    }


class TestHealth:
    @pytest.mark.unit
    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"


class TestAvailabilityEndpoint:
    """Tests for GET /restaurants/{id}/availability."""

    @pytest.mark.unit
    def test_slots(self, client, booking_day):
        response = client.get(
            f"{PREFIX}/restaurants/r1/availability",
            params={"date": booking_day.isoformat(), "party_size": 2, "hours": 1, "minutes": 0},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["date"] == booking_day.isoformat()
        assert data["slots"][0] == "09:00"
        assert data["total_available"] == len(data["slots"])

    @pytest.mark.unit
    def test_unknown_restaurant(self, client, booking_day):
        response = client.get(
            f"{PREFIX}/restaurants/nope/availability",
            params={"date": booking_day.isoformat(), "party_size": 2},
        )
        assert response.status_code == 404

    @pytest.mark.unit
    def test_storage_error(self, make_client, make_config, booking_day):
        store = UnavailableStore()
        store.add_restaurant(make_config(), [Table(id="t1", capacity=4)])

        response = make_client(store).get(
            f"{PREFIX}/restaurants/r1/availability",
            params={"date": booking_day.isoformat(), "party_size": 2},
        )

        assert response.status_code == 503

    @pytest.mark.unit
    def test_zero_duration(self, client, booking_day):
        response = client.get(
            f"{PREFIX}/restaurants/r1/availability",
            params={"date": booking_day.isoformat(), "party_size": 2, "hours": 0, "minutes": 0},
        )
        assert response.status_code == 422

    @pytest.mark.unit
    def test_invalid_party_size(self, client, booking_day):
        response = client.get(
            f"{PREFIX}/restaurants/r1/availability",
            params={"date": booking_day.isoformat(), "party_size": 0},
        )
        assert response.status_code == 422


class TestValidateEndpoint:
    """Tests for POST /reservations/validate."""

    @pytest.mark.unit
    def test_accepted(self, client, body):
        response = client.post(f"{PREFIX}/reservations/validate", json=body)

        assert response.status_code == 200
        data = response.json()
        assert data["accepted"] is True
        assert data["table"]["id"] == "t1"
        assert data["end_time"] == "19:30"

    @pytest.mark.unit
    def test_rejection_is_200(self, client, body, sunday):
        body["booking_date"] = sunday.isoformat()

        response = client.post(f"{PREFIX}/reservations/validate", json=body)

        assert response.status_code == 200
        assert response.json()["error_kind"] == "RestaurantClosed"

    @pytest.mark.unit
    def test_missing_fields(self, client):
        response = client.post(f"{PREFIX}/reservations/validate", json={"restaurant_id": "r1"})

        assert response.status_code == 200
        assert response.json()["error_kind"] == "MalformedRequest"


class TestCreateEndpoint:
    """Tests for POST /reservations."""

    @pytest.mark.unit
    def test_created(self, client, body, store):
        response = client.post(f"{PREFIX}/reservations", json=body)

        assert response.status_code == 201
        data = response.json()
        assert data["table"]["id"] == "t1"
        assert data["end_time"] == "19:30"
        assert data["booking"]["guest_name"] == "Jana"
        assert len(store.get_bookings("r1")) == 1

    @pytest.mark.unit
    def test_double_booking_conflict(self, client, body):
        assert client.post(f"{PREFIX}/reservations", json=body).status_code == 201

        response = client.post(f"{PREFIX}/reservations", json=body)

        assert response.status_code == 409
        assert response.json()["detail"]["error_kind"] == "NoTableAvailable"

    @pytest.mark.unit
    def test_business_rejection(self, client, body):
        body["booking_time"] = "23:00"

        response = client.post(f"{PREFIX}/reservations", json=body)

        assert response.status_code == 422
        assert response.json()["detail"]["error_kind"] == "RestaurantClosed"

    @pytest.mark.unit
    def test_storage_unavailable(self, make_client, make_config, body):
        store = UnavailableStore()
        store.add_restaurant(make_config(), [Table(id="t1", capacity=4)])

        response = make_client(store).post(f"{PREFIX}/reservations", json=body)

        assert response.status_code == 503
        assert response.json()["detail"]["retryable"] is True
