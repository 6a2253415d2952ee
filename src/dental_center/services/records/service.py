from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Dict, Iterable, List, Optional

from src.dental_center.domain.clock import local_now, to_local_naive
from src.dental_center.domain.models.analytics import PatientAppointments, PatientRecords
from src.dental_center.domain.models.app_state import AppState
from src.dental_center.domain.models.incident import Incident, IncidentStatus
from src.dental_center.domain.models.patient import Patient
from src.dental_center.services.analytics.service import revenue


class IncidentTab(str, Enum):
    ALL = "all"
    SCHEDULED = "scheduled"
    COMPLETED = "completed"
    PENDING = "pending"


_TAB_STATUSES: Dict[IncidentTab, set[IncidentStatus]] = {
    IncidentTab.SCHEDULED: {IncidentStatus.SCHEDULED},
    IncidentTab.COMPLETED: {IncidentStatus.COMPLETED},
    IncidentTab.PENDING: {IncidentStatus.SCHEDULED, IncidentStatus.IN_PROGRESS},
}


def search_patients(patients: Iterable[Patient], term: Optional[str] = None) -> List[Patient]:
    """Case-insensitive match on name or email; plain substring match on contact."""

    if not term:
        return list(patients)
    needle = term.lower()
    return [
        p
        for p in patients
        if needle in p.name.lower() or needle in p.email.lower() or term in p.contact
    ]


def filter_incidents(
    incidents: Iterable[Incident],
    patients: Iterable[Patient],
    term: Optional[str] = None,
    tab: IncidentTab = IncidentTab.ALL,
) -> List[Incident]:
    names = {p.id: p.name.lower() for p in patients}
    needle = (term or "").lower()
    allowed = _TAB_STATUSES.get(tab)

    results: List[Incident] = []
    for incident in incidents:
        if allowed is not None and incident.status not in allowed:
            continue
        if needle and not (
            needle in incident.title.lower()
            or needle in incident.description.lower()
            or needle in names.get(incident.patient_id, "")
        ):
            continue
        results.append(incident)
    return results


class PatientRecordsService:
    """Read-only views backing a patient's own screens."""

    def appointments(self, state: AppState, patient_id: str, now: Optional[datetime] = None) -> PatientAppointments:
        now = to_local_naive(now) if now is not None else local_now()
        own = state.incidents_for_patient(patient_id)
        upcoming = [i for i in own if to_local_naive(i.appointment_date) > now]
        past = [i for i in own if to_local_naive(i.appointment_date) <= now]
        upcoming.sort(key=lambda i: to_local_naive(i.appointment_date))
        past.sort(key=lambda i: to_local_naive(i.appointment_date), reverse=True)
        return PatientAppointments(upcoming=upcoming, past=past)

    def records(self, state: AppState, patient_id: str) -> Optional[PatientRecords]:
        patient = state.find_patient(patient_id)
        if patient is None:
            return None
        completed = [i for i in state.incidents_for_patient(patient_id) if i.status == IncidentStatus.COMPLETED]
        completed.sort(key=lambda i: to_local_naive(i.appointment_date), reverse=True)
        return PatientRecords(patient=patient, completed_treatments=completed, total_spent=revenue(completed))


patient_records_service = PatientRecordsService()
