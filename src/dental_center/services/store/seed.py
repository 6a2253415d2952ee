from __future__ import annotations

from src.dental_center.domain.models.app_state import AppState


# Canonical first-run fixture, used when nothing has been persisted yet.
_SEED_SNAPSHOT = {
    "users": [
        {"id": "1", "role": "Admin", "email": "admin@entnt.in", "password": "admin123"},
        {"id": "2", "role": "Patient", "email": "john@entnt.in", "password": "patient123", "patientId": "p1"},
        {"id": "3", "role": "Patient", "email": "jane@entnt.in", "password": "patient123", "patientId": "p2"},
    ],
    "patients": [
        {
            "id": "p1",
            "name": "John Doe",
            "dob": "1990-05-10",
            "contact": "1234567890",
            "email": "john@entnt.in",
            "address": "123 Main St, City, State 12345",
            "healthInfo": "No known allergies. Regular checkups.",
            "emergencyContact": "Jane Doe - 0987654321",
            "createdAt": "2024-01-15T10:00:00Z",
        },
        {
            "id": "p2",
            "name": "Jane Smith",
            "dob": "1985-08-22",
            "contact": "0987654321",
            "email": "jane@entnt.in",
            "address": "456 Oak Ave, City, State 12345",
            "healthInfo": "Diabetic. Requires special care.",
            "emergencyContact": "John Smith - 1234567890",
            "createdAt": "2024-02-10T14:30:00Z",
        },
    ],
    "incidents": [
        {
            "id": "i1",
            "patientId": "p1",
            "title": "Toothache Treatment",
            "description": "Upper molar pain requiring root canal",
            "comments": "Patient sensitive to cold. Local anesthesia applied.",
            "appointmentDate": "2025-01-15T10:00:00",
            "cost": 280,
            "treatment": "Root canal therapy with temporary filling",
            "status": "Completed",
            "nextDate": "2025-02-15T10:00:00",
            "files": [],
            "createdAt": "2024-12-20T09:00:00Z",
        },
        {
            "id": "i2",
            "patientId": "p1",
            "title": "Dental Cleaning",
            "description": "Routine dental cleaning and examination",
            "comments": "Regular maintenance. Good oral hygiene.",
            "appointmentDate": "2025-02-01T14:00:00",
            "status": "Scheduled",
            "files": [],
            "createdAt": "2024-12-25T11:00:00Z",
        },
        {
            "id": "i3",
            "patientId": "p2",
            "title": "Cavity Filling",
            "description": "Small cavity in lower left molar",
            "comments": "Minor cavity. Composite filling recommended.",
            "appointmentDate": "2025-01-20T16:00:00",
            "cost": 150,
            "treatment": "Composite filling",
            "status": "Completed",
            "files": [],
            "createdAt": "2024-12-18T13:00:00Z",
        },
    ],
    "currentUser": None,
}


def seed_state() -> AppState:
    """Return a fresh copy of the seed snapshot."""

    return AppState.model_validate(_SEED_SNAPSHOT)
