from datetime import datetime, timedelta

from src.dental_center.domain.models.incident import IncidentStatus
from src.dental_center.services.analytics.service import (
    analytics_service,
    patient_stats,
    revenue,
    top_patients,
    upcoming_appointments,
)
from src.dental_center.services.store.seed import seed_state


def test_revenue_counts_completed_incidents_with_cost(incident_factory):
    incidents = [
        incident_factory(status=IncidentStatus.COMPLETED, cost=280),
        incident_factory(status=IncidentStatus.SCHEDULED, cost=None),
        incident_factory(status=IncidentStatus.COMPLETED, cost=150),
    ]
    assert revenue(incidents) == 430


def test_completed_without_cost_contributes_nothing(incident_factory):
    incidents = [
        incident_factory(status=IncidentStatus.COMPLETED),
        incident_factory(status=IncidentStatus.CANCELLED, cost=500),
    ]
    assert revenue(incidents) == 0


def test_revenue_date_range_is_half_open(incident_factory):
    incidents = [
        incident_factory(appointment_date=datetime(2025, 1, 1), status=IncidentStatus.COMPLETED, cost=1),
        incident_factory(appointment_date=datetime(2025, 1, 15), status=IncidentStatus.COMPLETED, cost=10),
        incident_factory(appointment_date=datetime(2025, 2, 1), status=IncidentStatus.COMPLETED, cost=100),
    ]
    assert revenue(incidents, start=datetime(2025, 1, 1), end=datetime(2025, 2, 1)) == 11
    assert revenue(incidents, start=datetime(2025, 1, 2)) == 110


def test_patient_stats_on_seed():
    stats = patient_stats(seed_state().incidents, "p1")
    assert stats.total == 2
    assert stats.completed == 1
    assert stats.pending == 1
    assert stats.total_spent == 280


def test_top_patients_stable_on_ties(patient_factory, incident_factory):
    patients = [patient_factory(pid) for pid in ("a", "b", "c", "d")]
    spent = {"a": 100, "b": 300, "c": 300, "d": 50}
    incidents = [
        incident_factory(patient_id=pid, status=IncidentStatus.COMPLETED, cost=amount)
        for pid, amount in spent.items()
    ]

    ranked = top_patients(patients, incidents)

    assert [r.patient.id for r in ranked] == ["b", "c", "a", "d"]
    assert [r.total_spent for r in ranked] == [300, 300, 100, 50]
    assert [r.patient.id for r in top_patients(patients, incidents, limit=2)] == ["b", "c"]


def test_upcoming_window_is_open_on_both_ends(incident_factory):
    now = datetime(2025, 1, 10, 12, 0)
    at_now = incident_factory(appointment_date=now)
    soon = incident_factory(appointment_date=now + timedelta(hours=1))
    edge = incident_factory(appointment_date=now + timedelta(days=7))
    inside = incident_factory(appointment_date=now + timedelta(days=6, hours=23))
    past = incident_factory(appointment_date=now - timedelta(days=1))

    result = upcoming_appointments([inside, edge, past, soon, at_now], now=now)

    assert [i.id for i in result] == [soon.id, inside.id]


def test_upcoming_is_capped(incident_factory):
    now = datetime(2025, 1, 10, 12, 0)
    incidents = [incident_factory(appointment_date=now + timedelta(hours=n + 1)) for n in range(15)]

    result = upcoming_appointments(list(reversed(incidents)), now=now)

    assert len(result) == 10
    assert [i.id for i in result] == [i.id for i in incidents[:10]]


def test_admin_dashboard_on_seed():
    state = seed_state()
    dashboard = analytics_service.compute_admin_dashboard(state, now=datetime(2025, 1, 28, 9, 0))

    assert dashboard.total_patients == 2
    assert dashboard.completed_treatments == 2
    assert dashboard.pending_treatments == 1
    assert dashboard.revenue == 430
    assert [i.id for i in dashboard.upcoming_appointments] == ["i2"]
    assert [r.patient.id for r in dashboard.top_patients] == ["p1", "p2"]
    assert dashboard.top_patients[0].appointment_count == 2


def test_patient_dashboard_on_seed():
    state = seed_state()
    dashboard = analytics_service.compute_patient_dashboard(state, "p1", now=datetime(2025, 1, 1))

    assert dashboard.total_appointments == 2
    assert dashboard.upcoming_count == 2
    assert dashboard.completed_count == 1
    assert dashboard.total_spent == 280
    assert [i.id for i in dashboard.upcoming_appointments] == ["i1", "i2"]
