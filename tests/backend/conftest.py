from datetime import datetime, timezone
from typing import Any, Callable

import pytest
from httpx import ASGITransport, AsyncClient

from src.dental_center.dependencies import get_store
from src.dental_center.domain.models.incident import Incident, IncidentStatus
from src.dental_center.domain.models.patient import Patient
from src.dental_center.infra.storage.kv import InMemoryKeyValueStorage
from src.dental_center.main import app
from src.dental_center.services.store.service import AppStore


@pytest.fixture
def storage() -> InMemoryKeyValueStorage:
    return InMemoryKeyValueStorage()


@pytest.fixture
def store(storage: InMemoryKeyValueStorage) -> AppStore:
    app_store = AppStore(storage)
    app_store.hydrate()
    return app_store


@pytest.fixture
async def client(store: AppStore):
    app.dependency_overrides[get_store] = lambda: store
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def incident_factory() -> Callable[..., Incident]:
    counter = {"n": 0}

    def _make(**overrides: Any) -> Incident:
        counter["n"] += 1
        fields = {
            "id": f"t{counter['n']}",
            "patient_id": "p1",
            "title": f"Visit {counter['n']}",
            "appointment_date": datetime(2025, 1, 10, 9, 0),
            "status": IncidentStatus.SCHEDULED,
            "created_at": datetime(2024, 12, 1, tzinfo=timezone.utc),
        }
        fields.update(overrides)
        return Incident(**fields)

    return _make


@pytest.fixture
def patient_factory() -> Callable[..., Patient]:
    def _make(patient_id: str, **overrides: Any) -> Patient:
        fields = {
            "id": patient_id,
            "name": f"Patient {patient_id}",
            "dob": "1980-01-01",
            "contact": "5550000",
            "email": f"{patient_id}@example.com",
            "address": "1 Test Rd",
            "health_info": "",
            "emergency_contact": "",
            "created_at": datetime(2024, 1, 1, tzinfo=timezone.utc),
        }
        fields.update(overrides)
        return Patient(**fields)

    return _make
