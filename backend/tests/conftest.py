"""Shared fixtures for the test suite."""
import copy
import shutil
import tempfile
from pathlib import Path

import pytest

from gym_booking.config import settings
from gym_booking.services import StorageService, storage_service

GYM_DOCUMENT = {
    "gymName": "Iron Temple",
    "address": {
        "location": "MG Road, Bengaluru",
        "place_id": "ChIJbU60yXAWrjsR4E9-UejD3_g",
        "street": "12 MG Road",
    },
    "coordinates": {"lat": 12.9716, "lng": 77.5946},
    "pricing": {"hourlyRate": 200, "weeklyRate": 1000, "monthlyRate": 3500},
    "personalTrainerPricing": {"hourlyRate": 500, "weeklyRate": 2500, "monthlyRate": 8000},
    "timings": {
        "morning": {
            "openingTime": "2024-01-01T06:00:00",
            "closingTime": "2024-01-01T10:00:00",
            "slots": [
                {"_id": "m1", "start": "06:00", "end": "07:00", "maxPeople": 10},
                {"_id": "m2", "start": "07:00", "end": "08:00", "maxPeople": 10},
            ],
        },
        "evening": {
            "openingTime": "2024-01-01T17:00:00",
            "closingTime": "2024-01-01T21:00:00",
            "slots": [
                {"_id": "e1", "start": "18:00", "end": "19:00", "maxPeople": 8},
            ],
        },
    },
    "currency": {"name": "INR", "symbol": "₹"},
    "description": "Strength and conditioning gym in the city centre.",
    "gymOwner": "owner_1",
    "images": {"url": "https://images.example.com/iron.jpg", "public_id": "gyms/iron"},
    "amenities": [{"id": "wifi", "label": "Wi-Fi", "checked": True}],
}


def make_gym_document(**overrides) -> dict:
    """Get a fresh gym JSON document with top-level overrides applied."""
    document = copy.deepcopy(GYM_DOCUMENT)
    document.update(overrides)
    return document


def make_order_document(gym_id: str, **overrides) -> dict:
    """Get a valid order request for three hourly slots at 200 each."""
    document = {
        "userId": "user_1",
        "buyer_name": "Asha",
        "email": "asha@example.com",
        "phone": "9876543210",
        "gymId": gym_id,
        "selectedPlan": "Hourly Plan",
        "amount": 600,
        "baseAmount": 200,
        "numberOfSlots": 3,
        "currency": "INR",
        "startDate": "2030-01-01",
        "endDate": "2030-01-01",
        "gymNames": "Iron Temple",
        "bookingDate": "2029-12-30",
        "bookingTimeSlots": [
            {"date": "2030-01-01", "time": "06:00 - 07:00", "slotId": "m1"},
            {"date": "2030-01-01", "time": "07:00 - 08:00", "slotId": "m2"},
            {"date": "2030-01-01", "time": "18:00 - 19:00", "slotId": "e1"},
        ],
    }
    document.update(overrides)
    return document


@pytest.fixture
def gym_document():
    return make_gym_document()


@pytest.fixture
def temp_storage_dir():
    """Create a temporary storage directory for testing."""
    temp_dir = Path(tempfile.mkdtemp())
    yield temp_dir
    # Cleanup after test
    shutil.rmtree(temp_dir, ignore_errors=True)


@pytest.fixture
def storage(temp_storage_dir):
    """Create a storage service instance with temp directory."""
    return StorageService(base_path=temp_storage_dir)


@pytest.fixture
def global_storage(monkeypatch, temp_storage_dir):
    """Point the global storage service at a temporary directory."""
    monkeypatch.setattr(storage_service, "base_path", temp_storage_dir)
    storage_service._ensure_base_directory()
    return storage_service


@pytest.fixture
def open_auth(monkeypatch):
    """Accept any bearer token."""
    monkeypatch.setattr(settings, "api_tokens", "")


@pytest.fixture
def auth_headers(open_auth):
    return {"Authorization": "Bearer test-token"}
