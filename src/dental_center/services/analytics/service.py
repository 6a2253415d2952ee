from __future__ import annotations

from datetime import datetime, timedelta
from typing import Iterable, List, Optional

from src.dental_center.config import settings
from src.dental_center.domain.clock import local_now, to_local_naive
from src.dental_center.domain.models.analytics import (
    AdminDashboard,
    PatientDashboard,
    PatientStats,
    RankedPatient,
)
from src.dental_center.domain.models.app_state import AppState
from src.dental_center.domain.models.incident import Incident, IncidentStatus
from src.dental_center.domain.models.patient import Patient


def _appointment_at(incident: Incident) -> datetime:
    return to_local_naive(incident.appointment_date)


def revenue(
    incidents: Iterable[Incident],
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
) -> float:
    """Sum of cost over completed incidents that carry a cost.

    ``start``/``end`` optionally restrict by appointment date to the half-open
    range ``[start, end)``.
    """

    lower = to_local_naive(start) if start is not None else None
    upper = to_local_naive(end) if end is not None else None
    total = 0.0
    for incident in incidents:
        when = _appointment_at(incident)
        if lower is not None and when < lower:
            continue
        if upper is not None and when >= upper:
            continue
        total += incident.billable_cost
    return total


def patient_stats(incidents: Iterable[Incident], patient_id: str) -> PatientStats:
    own = [i for i in incidents if i.patient_id == patient_id]
    completed = sum(1 for i in own if i.status == IncidentStatus.COMPLETED)
    return PatientStats(
        total=len(own),
        completed=completed,
        pending=len(own) - completed,
        total_spent=revenue(own),
    )


def top_patients(
    patients: Iterable[Patient],
    incidents: Iterable[Incident],
    limit: Optional[int] = None,
) -> List[RankedPatient]:
    """Patients ranked by total spent, highest first.

    ``sorted`` is stable, so equal totals keep their original list order.
    """

    incidents = list(incidents)
    ranked = []
    for patient in patients:
        own = [i for i in incidents if i.patient_id == patient.id]
        ranked.append(RankedPatient(patient=patient, appointment_count=len(own), total_spent=revenue(own)))
    ranked = sorted(ranked, key=lambda r: r.total_spent, reverse=True)
    if limit is not None:
        ranked = ranked[:limit]
    return ranked


def upcoming_appointments(
    incidents: Iterable[Incident],
    now: Optional[datetime] = None,
    days: Optional[int] = None,
    limit: Optional[int] = None,
) -> List[Incident]:
    """Incidents strictly after ``now`` and strictly before ``now + days``, ascending."""

    now = to_local_naive(now) if now is not None else local_now()
    window = timedelta(days=settings.upcoming_window_days if days is None else days)
    limit = settings.upcoming_limit if limit is None else limit
    horizon = now + window
    upcoming = [i for i in incidents if now < _appointment_at(i) < horizon]
    upcoming.sort(key=_appointment_at)
    return upcoming[:limit]


class AnalyticsService:
    def compute_admin_dashboard(self, state: AppState, now: Optional[datetime] = None) -> AdminDashboard:
        incidents = state.incidents
        completed = sum(1 for i in incidents if i.status == IncidentStatus.COMPLETED)
        return AdminDashboard(
            total_patients=len(state.patients),
            pending_treatments=len(incidents) - completed,
            completed_treatments=completed,
            revenue=revenue(incidents),
            upcoming_appointments=upcoming_appointments(incidents, now=now),
            top_patients=top_patients(state.patients, incidents, limit=settings.top_patients_limit),
        )

    def compute_patient_dashboard(
        self,
        state: AppState,
        patient_id: str,
        now: Optional[datetime] = None,
    ) -> PatientDashboard:
        now = to_local_naive(now) if now is not None else local_now()
        own = state.incidents_for_patient(patient_id)
        # Unlike the admin view, a patient sees every future appointment.
        upcoming = sorted((i for i in own if _appointment_at(i) > now), key=_appointment_at)
        stats = patient_stats(own, patient_id)
        return PatientDashboard(
            patient_id=patient_id,
            total_appointments=stats.total,
            upcoming_count=len(upcoming),
            completed_count=stats.completed,
            total_spent=stats.total_spent,
            upcoming_appointments=upcoming,
        )


analytics_service = AnalyticsService()
