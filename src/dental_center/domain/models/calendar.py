from __future__ import annotations

from datetime import date
from typing import List

from pydantic import Field, computed_field

from src.dental_center.domain.models.base import DomainModel
from src.dental_center.domain.models.incident import Incident

# How many appointments a day cell shows before collapsing into "+N more".
DEFAULT_VISIBLE_APPOINTMENTS = 3


class CalendarDay(DomainModel):
    day: date
    in_current_month: bool
    is_today: bool = False
    is_selected: bool = False
    # Full list, ascending by time of day. The visible cap is display-only.
    appointments: List[Incident] = Field(default_factory=list)
    visible_limit: int = DEFAULT_VISIBLE_APPOINTMENTS

    @computed_field(alias="visibleAppointments")  # type: ignore[prop-decorator]
    @property
    def visible_appointments(self) -> List[Incident]:
        return self.appointments[: self.visible_limit]

    @computed_field(alias="overflowCount")  # type: ignore[prop-decorator]
    @property
    def overflow_count(self) -> int:
        return max(len(self.appointments) - self.visible_limit, 0)


class CalendarWeek(DomainModel):
    # Always seven days, Sunday through Saturday.
    days: List[CalendarDay]


class MonthSummary(DomainModel):
    year: int
    month: int
    total: int
    completed: int
    scheduled: int
    revenue: float


class CalendarGrid(DomainModel):
    year: int
    month: int
    weeks: List[CalendarWeek]
    summary: MonthSummary

    @property
    def days(self) -> List[CalendarDay]:
        return [day for week in self.weeks for day in week.days]
