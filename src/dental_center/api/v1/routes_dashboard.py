from __future__ import annotations

from datetime import datetime
from typing import Optional, Union

from fastapi import APIRouter, Depends

from src.dental_center.dependencies import get_store
from src.dental_center.domain.models.analytics import AdminDashboard, PatientDashboard
from src.dental_center.domain.models.user import User, UserRole
from src.dental_center.security import ensure_is_patient, get_current_user, require_admin
from src.dental_center.services.analytics.service import analytics_service, revenue
from src.dental_center.services.store.service import AppStore


router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("/", response_model=Union[AdminDashboard, PatientDashboard])
async def get_dashboard(
    store: AppStore = Depends(get_store),
    current_user: User = Depends(get_current_user),
) -> Union[AdminDashboard, PatientDashboard]:
    state = store.select_state()
    if current_user.role == UserRole.ADMIN:
        return analytics_service.compute_admin_dashboard(state)
    return analytics_service.compute_patient_dashboard(state, ensure_is_patient(current_user))


@router.get("/revenue")
async def get_revenue(
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
    store: AppStore = Depends(get_store),
    current_user: User = Depends(require_admin),
) -> dict:
    return {"revenue": revenue(store.select_state().incidents, start, end)}
