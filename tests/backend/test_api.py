from fastapi import status

from src.dental_center.config import settings

ADMIN_CREDENTIALS = {"email": "admin@entnt.in", "password": "admin123"}
JOHN_CREDENTIALS = {"email": "john@entnt.in", "password": "patient123"}


NEW_PATIENT = {
    "name": "Maria Garcia",
    "dob": "1992-03-04",
    "contact": "5551234",
    "email": "maria@example.com",
    "address": "9 Elm St",
    "healthInfo": "Allergic to penicillin",
    "emergencyContact": "Luis Garcia - 5559876",
}


async def _login(client, credentials):
    response = await client.post("/api/v1/auth/login", json=credentials)
    assert response.status_code == status.HTTP_200_OK
    return response.json()


async def test_login_rejects_unknown_credentials(client):
    response = await client.post("/api/v1/auth/login", json={"email": "admin@entnt.in", "password": "wrong"})
    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json()["detail"] == "No matching user found"


async def test_login_session_and_logout(client, store, storage):
    body = await _login(client, ADMIN_CREDENTIALS)
    assert body["role"] == "Admin"
    assert "password" not in body
    assert storage.get_item("dental-center-user") is not None

    session = await client.get("/api/v1/auth/session")
    assert session.status_code == status.HTTP_200_OK
    assert session.json()["email"] == "admin@entnt.in"

    logout = await client.post("/api/v1/auth/logout")
    assert logout.status_code == status.HTTP_200_OK
    assert store.select_state().current_user is None
    assert storage.get_item("dental-center-user") is None

    after = await client.get("/api/v1/auth/session")
    assert after.status_code == status.HTTP_401_UNAUTHORIZED


async def test_requires_login(client):
    response = await client.get("/api/v1/patients/")
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


async def test_admin_patient_crud(client, store):
    await _login(client, ADMIN_CREDENTIALS)

    create = await client.post("/api/v1/patients/", json=NEW_PATIENT)
    assert create.status_code == status.HTTP_201_CREATED
    created = create.json()
    patient_id = created["id"]
    assert patient_id.startswith("p")
    assert created["healthInfo"] == "Allergic to penicillin"
    assert store.select_state().find_patient(patient_id) is not None

    search = await client.get("/api/v1/patients/", params={"q": "garcia"})
    assert [p["id"] for p in search.json()] == [patient_id]

    update = await client.put(f"/api/v1/patients/{patient_id}", json={**NEW_PATIENT, "contact": "5550000"})
    assert update.status_code == status.HTTP_200_OK
    assert update.json()["contact"] == "5550000"
    assert update.json()["createdAt"] == created["createdAt"]

    missing = await client.put("/api/v1/patients/nope", json=NEW_PATIENT)
    assert missing.status_code == status.HTTP_404_NOT_FOUND


async def test_delete_patient_cascades_over_api(client, store):
    await _login(client, ADMIN_CREDENTIALS)

    response = await client.delete("/api/v1/patients/p1")
    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"id": "p1", "removedIncidentIds": ["i1", "i2"]}

    state = store.select_state()
    assert [p.id for p in state.patients] == ["p2"]
    assert [i.id for i in state.incidents] == ["i3"]

    again = await client.delete("/api/v1/patients/p1")
    assert again.status_code == status.HTTP_404_NOT_FOUND


async def test_patient_stats(client):
    await _login(client, ADMIN_CREDENTIALS)
    response = await client.get("/api/v1/patients/p1/stats")
    assert response.json() == {"total": 2, "completed": 1, "pending": 1, "totalSpent": 280.0}


async def test_incident_lifecycle(client, store):
    await _login(client, ADMIN_CREDENTIALS)

    bad = await client.post(
        "/api/v1/incidents/",
        json={"patientId": "ghost", "title": "Checkup", "appointmentDate": "2025-03-01T09:00:00"},
    )
    assert bad.status_code == status.HTTP_400_BAD_REQUEST

    create = await client.post(
        "/api/v1/incidents/",
        json={"patientId": "p2", "title": "Checkup", "appointmentDate": "2025-03-01T09:00:00", "cost": 75},
    )
    assert create.status_code == status.HTTP_201_CREATED
    incident = create.json()
    assert incident["status"] == "Scheduled"
    assert incident["appointmentDate"] == "2025-03-01T09:00:00"

    update = await client.put(
        f"/api/v1/incidents/{incident['id']}",
        json={
            "patientId": "p2",
            "title": "Checkup",
            "appointmentDate": "2025-03-01T09:00:00",
            "cost": 75,
            "status": "Completed",
            "treatment": "Scaling",
        },
    )
    assert update.status_code == status.HTTP_200_OK
    assert update.json()["status"] == "Completed"
    assert update.json()["createdAt"] == incident["createdAt"]

    listing = await client.get("/api/v1/incidents/", params={"tab": "completed"})
    assert [i["id"] for i in listing.json()] == ["i1", "i3", incident["id"]]

    delete = await client.delete(f"/api/v1/incidents/{incident['id']}")
    assert delete.status_code == status.HTTP_204_NO_CONTENT
    assert store.select_state().find_incident(incident["id"]) is None

    missing = await client.delete(f"/api/v1/incidents/{incident['id']}")
    assert missing.status_code == status.HTTP_404_NOT_FOUND


async def test_upload_attachments_skips_oversized(client, store, monkeypatch):
    monkeypatch.setattr(settings, "max_attachment_bytes", 8)
    await _login(client, ADMIN_CREDENTIALS)

    files = [
        ("files", ("xray.png", b"tiny", "image/png")),
        ("files", ("scan.pdf", b"far too large", "application/pdf")),
    ]
    response = await client.post("/api/v1/incidents/i1/attachments", files=files)

    assert response.status_code == status.HTTP_200_OK
    body = response.json()
    assert body["accepted"] == ["xray.png"]
    assert len(body["warnings"]) == 1
    assert "scan.pdf" in body["warnings"][0]

    saved = store.select_state().find_incident("i1").files
    assert [f.name for f in saved] == ["xray.png"]
    assert saved[0].url.startswith("data:image/png;base64,")


async def test_patient_role_is_scoped(client):
    await _login(client, JOHN_CREDENTIALS)

    assert (await client.get("/api/v1/patients/")).status_code == status.HTTP_403_FORBIDDEN
    assert (await client.get("/api/v1/patients/p2")).status_code == status.HTTP_403_FORBIDDEN
    assert (await client.get("/api/v1/patients/p1")).status_code == status.HTTP_200_OK
    assert (await client.get("/api/v1/incidents/i3")).status_code == status.HTTP_403_FORBIDDEN
    assert (await client.get("/api/v1/calendar/")).status_code == status.HTTP_403_FORBIDDEN

    own = await client.get("/api/v1/incidents/")
    assert [i["id"] for i in own.json()] == ["i1", "i2"]

    records = await client.get("/api/v1/me/records")
    assert records.status_code == status.HTTP_200_OK
    assert [i["id"] for i in records.json()["completedTreatments"]] == ["i1"]
    assert records.json()["totalSpent"] == 280

    appointments = await client.get("/api/v1/me/appointments")
    assert appointments.status_code == status.HTTP_200_OK


async def test_dashboard_by_role(client):
    await _login(client, ADMIN_CREDENTIALS)
    admin = (await client.get("/api/v1/dashboard/")).json()
    assert admin["totalPatients"] == 2
    assert admin["revenue"] == 430
    assert [r["patient"]["id"] for r in admin["topPatients"]] == ["p1", "p2"]

    await client.post("/api/v1/auth/logout")
    await _login(client, JOHN_CREDENTIALS)
    patient = (await client.get("/api/v1/dashboard/")).json()
    assert patient["patientId"] == "p1"
    assert patient["totalAppointments"] == 2
    assert patient["completedCount"] == 1
    assert patient["totalSpent"] == 280


async def test_calendar_endpoint(client):
    await _login(client, ADMIN_CREDENTIALS)

    response = await client.get("/api/v1/calendar/", params={"year": 2025, "month": 1, "selected": "2025-01-20"})
    assert response.status_code == status.HTTP_200_OK
    grid = response.json()

    assert len(grid["weeks"]) == 5
    days = [d for week in grid["weeks"] for d in week["days"]]
    assert days[0]["day"] == "2024-12-29"
    assert days[-1]["day"] == "2025-02-01"
    selected = [d for d in days if d["isSelected"]]
    assert [d["day"] for d in selected] == ["2025-01-20"]
    assert [i["id"] for i in selected[0]["appointments"]] == ["i3"]
    assert grid["summary"] == {
        "year": 2025,
        "month": 1,
        "total": 2,
        "completed": 2,
        "scheduled": 0,
        "revenue": 430.0,
    }

    day = await client.get("/api/v1/calendar/day/2025-02-01")
    assert [i["id"] for i in day.json()] == ["i2"]


async def test_calendar_rejects_months_at_the_edge_of_the_date_range(client):
    await _login(client, ADMIN_CREDENTIALS)

    for year, month in [(9999, 12), (1, 1)]:
        response = await client.get("/api/v1/calendar/", params={"year": year, "month": month})
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    summary = await client.get("/api/v1/calendar/summary", params={"year": 9999, "month": 12})
    assert summary.status_code == status.HTTP_200_OK
    assert summary.json()["total"] == 0


async def test_login_ignores_email_case(client):
    response = await client.post("/api/v1/auth/login", json={"email": "Admin@ENTNT.in", "password": "admin123"})
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["email"] == "admin@entnt.in"
