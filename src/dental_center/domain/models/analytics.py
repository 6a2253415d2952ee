from __future__ import annotations

from typing import List

from pydantic import Field

from src.dental_center.domain.models.base import DomainModel
from src.dental_center.domain.models.incident import Incident
from src.dental_center.domain.models.patient import Patient


class PatientStats(DomainModel):
    total: int
    completed: int
    pending: int
    total_spent: float


class RankedPatient(DomainModel):
    patient: Patient
    appointment_count: int
    total_spent: float


class AdminDashboard(DomainModel):
    total_patients: int
    pending_treatments: int
    completed_treatments: int
    revenue: float
    upcoming_appointments: List[Incident] = Field(default_factory=list)
    top_patients: List[RankedPatient] = Field(default_factory=list)


class PatientDashboard(DomainModel):
    patient_id: str
    total_appointments: int
    upcoming_count: int
    completed_count: int
    total_spent: float
    upcoming_appointments: List[Incident] = Field(default_factory=list)


class PatientAppointments(DomainModel):
    upcoming: List[Incident] = Field(default_factory=list)
    past: List[Incident] = Field(default_factory=list)


class PatientRecords(DomainModel):
    patient: Patient
    completed_treatments: List[Incident] = Field(default_factory=list)
    total_spent: float
