from __future__ import annotations

from datetime import date, datetime

from src.dental_center.domain.models.base import DomainModel


class Patient(DomainModel):
    """A person receiving care; incidents reference it via ``patient_id``."""

    id: str
    name: str
    dob: date
    contact: str
    email: str
    address: str
    health_info: str
    emergency_contact: str
    created_at: datetime
