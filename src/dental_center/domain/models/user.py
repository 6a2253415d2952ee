from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import EmailStr, model_validator

from src.dental_center.domain.models.base import DomainModel


class UserRole(str, Enum):
    ADMIN = "Admin"
    PATIENT = "Patient"


class User(DomainModel):
    id: str
    role: UserRole
    email: EmailStr
    # Plaintext credential, checked client-side only. Not a security boundary.
    password: str
    # Set for Patient users only; links the account to exactly one Patient.
    patient_id: Optional[str] = None

    @model_validator(mode="after")
    def _check_patient_link(self) -> "User":
        if self.role == UserRole.PATIENT and not self.patient_id:
            raise ValueError("Patient users must reference a patientId")
        if self.role == UserRole.ADMIN and self.patient_id:
            raise ValueError("Admin users cannot reference a patientId")
        return self
