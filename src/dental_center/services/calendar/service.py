from __future__ import annotations

import calendar
from collections import defaultdict
from datetime import date, datetime, timedelta
from typing import Dict, Iterable, List, Optional, Union

from src.dental_center.config import settings
from src.dental_center.domain.clock import local_today, to_local_naive
from src.dental_center.domain.models.calendar import CalendarDay, CalendarGrid, CalendarWeek, MonthSummary
from src.dental_center.domain.models.incident import Incident, IncidentStatus

DateLike = Union[date, datetime]


def _as_date(value: DateLike) -> date:
    if isinstance(value, datetime):
        return to_local_naive(value).date()
    return value


def month_bounds(reference_date: DateLike) -> tuple[date, date]:
    """Return the first and last day of the month containing ``reference_date``."""

    ref = _as_date(reference_date)
    last_day = calendar.monthrange(ref.year, ref.month)[1]
    return ref.replace(day=1), ref.replace(day=last_day)


def grid_bounds(reference_date: DateLike) -> tuple[date, date]:
    """Sunday on/before the 1st through Saturday on/after the month end."""

    first, last = month_bounds(reference_date)
    # date.weekday(): Monday=0 ... Saturday=5, Sunday=6.
    start = first - timedelta(days=(first.weekday() + 1) % 7)
    end = last + timedelta(days=(5 - last.weekday()) % 7)
    return start, end


def shift_month(reference_date: DateLike, months: int) -> date:
    """Move by whole months, clamping the day to the target month's length."""

    ref = _as_date(reference_date)
    index = ref.year * 12 + (ref.month - 1) + months
    year, month = divmod(index, 12)
    month += 1
    day = min(ref.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def _appointment_day(incident: Incident) -> date:
    return to_local_naive(incident.appointment_date).date()


def appointments_for_day(incidents: Iterable[Incident], day: DateLike) -> List[Incident]:
    """All incidents on ``day``, ascending by time of day."""

    target = _as_date(day)
    matches = [i for i in incidents if _appointment_day(i) == target]
    return sorted(matches, key=lambda i: to_local_naive(i.appointment_date))


def month_summary(reference_date: DateLike, incidents: Iterable[Incident]) -> MonthSummary:
    ref = _as_date(reference_date)
    in_month = [
        i
        for i in incidents
        if _appointment_day(i).year == ref.year and _appointment_day(i).month == ref.month
    ]
    return MonthSummary(
        year=ref.year,
        month=ref.month,
        total=len(in_month),
        completed=sum(1 for i in in_month if i.status == IncidentStatus.COMPLETED),
        scheduled=sum(1 for i in in_month if i.status == IncidentStatus.SCHEDULED),
        revenue=sum(i.billable_cost for i in in_month),
    )


def build_calendar_grid(
    reference_date: DateLike,
    incidents: Iterable[Incident],
    selected_date: Optional[DateLike] = None,
    *,
    today: Optional[date] = None,
    visible_limit: Optional[int] = None,
) -> CalendarGrid:
    """Build the month view containing ``reference_date``.

    Rows always hold seven days, Sunday through Saturday; leading and trailing
    days from adjacent months fill the first and last rows. Depending on the
    month this yields four, five or six rows.
    """

    incidents = list(incidents)
    ref = _as_date(reference_date)
    today = today or local_today()
    selected = _as_date(selected_date) if selected_date is not None else None
    limit = settings.calendar_visible_appointments if visible_limit is None else visible_limit

    by_day: Dict[date, List[Incident]] = defaultdict(list)
    for incident in incidents:
        by_day[_appointment_day(incident)].append(incident)

    start, end = grid_bounds(ref)
    weeks: List[CalendarWeek] = []
    current = start
    while current <= end:
        days: List[CalendarDay] = []
        for _ in range(7):
            days.append(
                CalendarDay(
                    day=current,
                    in_current_month=(current.year, current.month) == (ref.year, ref.month),
                    is_today=current == today,
                    is_selected=selected is not None and current == selected,
                    appointments=sorted(by_day.get(current, []), key=lambda i: to_local_naive(i.appointment_date)),
                    visible_limit=limit,
                )
            )
            current += timedelta(days=1)
        weeks.append(CalendarWeek(days=days))

    return CalendarGrid(
        year=ref.year,
        month=ref.month,
        weeks=weeks,
        summary=month_summary(ref, incidents),
    )
