from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import Field, field_validator

from src.dental_center.domain.clock import to_local_naive
from src.dental_center.domain.models.base import DomainModel


class IncidentStatus(str, Enum):
    # Any status may move to any other; there is no enforced transition graph.
    SCHEDULED = "Scheduled"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"
    IN_PROGRESS = "In Progress"


class FileAttachment(DomainModel):
    name: str
    # data: URL carrying the base64-encoded payload.
    url: str
    type: str
    size: int = Field(ge=0)


class Incident(DomainModel):
    """A single dental appointment / treatment record for a patient."""

    id: str
    patient_id: str
    title: str
    description: str = ""
    comments: str = ""
    appointment_date: datetime
    cost: Optional[float] = Field(default=None, ge=0)
    treatment: Optional[str] = None
    status: IncidentStatus = IncidentStatus.SCHEDULED
    next_date: Optional[datetime] = None
    files: List[FileAttachment] = Field(default_factory=list)
    created_at: datetime

    @field_validator("appointment_date", "next_date")
    @classmethod
    def _normalize_local(cls, value: Optional[datetime]) -> Optional[datetime]:
        if value is None:
            return None
        return to_local_naive(value)

    @property
    def is_completed(self) -> bool:
        return self.status == IncidentStatus.COMPLETED

    @property
    def billable_cost(self) -> float:
        """Cost counted towards revenue: completed incidents with a cost only."""

        if self.is_completed and self.cost:
            return self.cost
        return 0.0
