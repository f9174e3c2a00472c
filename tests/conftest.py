import os
from datetime import datetime, timedelta, timezone

os.environ.setdefault("LOG_FILE", os.devnull)

import pytest
from fastapi.testclient import TestClient

from barbermatch.config import Settings
from barbermatch.main import create_app

PASSWORD = "password123"


@pytest.fixture
def settings():
    return Settings(
        database_url="sqlite://",
        secret_key="test-secret-key",
        ai_provider="mock",
    )


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def db(app):
    session = app.state.session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def register(client):
    """Register and log in a user, returning (profile, auth headers)"""

    def _register(email, role="customer", display_name=None):
        response = client.post(
            "/api/auth/register",
            json={
                "email": email,
                "display_name": display_name or email.split("@")[0].title(),
                "password": PASSWORD,
                "role": role,
            },
        )
        assert response.status_code == 201, response.text
        login = client.post("/api/auth/login", json={"email": email, "password": PASSWORD})
        assert login.status_code == 200, login.text
        return response.json(), {"Authorization": f"Bearer {login.json()['access_token']}"}

    return _register


@pytest.fixture
def customer(register):
    return register("carol@example.com", role="customer", display_name="Carol")


@pytest.fixture
def barber(register):
    return register("bob@example.com", role="barber", display_name="Bob the Barber")


def future_appointment(days=3, hour=10, minute=30):
    return (datetime.now(timezone.utc) + timedelta(days=days)).replace(
        hour=hour, minute=minute, second=0, microsecond=0
    )


@pytest.fixture
def booking_data():
    """Store-level booking fields; override any of them with keyword arguments"""

    def _booking_data(**overrides):
        appointment = overrides.pop("appointment_datetime", future_appointment())
        data = {
            "customer_id": "customer-1",
            "customer_name": "Carol",
            "barber_id": "barber-1",
            "barber_name": "Bob",
            "appointment_datetime": appointment,
            "time": appointment.strftime("%H:%M"),
            "style": "Skin fade with a textured top",
            "service_name": None,
            "service_price": None,
            "service_duration": None,
            "notes": None,
        }
        data.update(overrides)
        return data

    return _booking_data


@pytest.fixture
def request_payload(barber):
    """API payload for POST /api/bookings against the barber fixture"""

    def _request_payload(**overrides):
        payload = {
            "barber_id": barber[0]["id"],
            "appointment_datetime": future_appointment().isoformat(),
            "style": "Textured crop",
        }
        payload.update(overrides)
        return payload

    return _request_payload


@pytest.fixture
def fade_service(client, barber):
    """The barber lists a 25.00 Fade; returns the offered-service id"""
    response = client.patch(
        "/api/me",
        json={"services_offered": [
            {"id": "svc-fade", "haircut_option_id": "men-fade", "price": 25, "duration": 30},
        ]},
        headers=barber[1],
    )
    assert response.status_code == 200, response.text
    return "svc-fade"
