from __future__ import annotations

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from src.dental_center.dependencies import get_store
from src.dental_center.domain.clock import local_today
from src.dental_center.domain.models.calendar import CalendarGrid, MonthSummary
from src.dental_center.domain.models.incident import Incident
from src.dental_center.domain.models.user import User
from src.dental_center.security import require_admin
from src.dental_center.services.calendar.service import appointments_for_day, build_calendar_grid, month_summary
from src.dental_center.services.store.service import AppStore


router = APIRouter(prefix="/calendar", tags=["calendar"])


def _reference_date(year: Optional[int], month: Optional[int]) -> date:
    today = local_today()
    if year is None and month is None:
        return today
    try:
        return date(year or today.year, month or today.month, 1)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc


@router.get("/", response_model=CalendarGrid)
async def get_calendar(
    year: Optional[int] = None,
    month: Optional[int] = Query(None, ge=1, le=12),
    selected: Optional[date] = None,
    store: AppStore = Depends(get_store),
    current_user: User = Depends(require_admin),
) -> CalendarGrid:
    reference = _reference_date(year, month)
    try:
        return build_calendar_grid(reference, store.select_state().incidents, selected)
    except OverflowError as exc:
        # Padding weeks of January 1 and December 9999 fall outside the date range.
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Calendar grid is outside the supported date range",
        ) from exc


@router.get("/summary", response_model=MonthSummary)
async def get_month_summary(
    year: Optional[int] = None,
    month: Optional[int] = Query(None, ge=1, le=12),
    store: AppStore = Depends(get_store),
    current_user: User = Depends(require_admin),
) -> MonthSummary:
    return month_summary(_reference_date(year, month), store.select_state().incidents)


@router.get("/day/{day}", response_model=List[Incident])
async def get_day_appointments(
    day: date,
    store: AppStore = Depends(get_store),
    current_user: User = Depends(require_admin),
) -> List[Incident]:
    return appointments_for_day(store.select_state().incidents, day)
