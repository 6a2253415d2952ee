from __future__ import annotations

from typing import List, Optional

from pydantic import Field

from src.dental_center.domain.models.base import DomainModel
from src.dental_center.domain.models.incident import Incident
from src.dental_center.domain.models.patient import Patient
from src.dental_center.domain.models.user import User


class AppState(DomainModel):
    """Full authoritative snapshot held by the store.

    ``current_user`` is a by-value copy of the logged-in user taken at login
    time; later edits to ``users`` are not reflected until the next login.
    """

    users: List[User] = Field(default_factory=list)
    patients: List[Patient] = Field(default_factory=list)
    incidents: List[Incident] = Field(default_factory=list)
    current_user: Optional[User] = None

    def find_patient(self, patient_id: str) -> Optional[Patient]:
        for patient in self.patients:
            if patient.id == patient_id:
                return patient
        return None

    def find_incident(self, incident_id: str) -> Optional[Incident]:
        for incident in self.incidents:
            if incident.id == incident_id:
                return incident
        return None

    def incidents_for_patient(self, patient_id: str) -> List[Incident]:
        return [i for i in self.incidents if i.patient_id == patient_id]
