from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status

from src.dental_center.dependencies import get_store
from src.dental_center.domain.models.analytics import PatientAppointments, PatientRecords
from src.dental_center.domain.models.user import User
from src.dental_center.security import ensure_is_patient, get_current_user
from src.dental_center.services.records.service import patient_records_service
from src.dental_center.services.store.service import AppStore


router = APIRouter(prefix="/me", tags=["me"])


@router.get("/appointments", response_model=PatientAppointments)
async def my_appointments(
    store: AppStore = Depends(get_store),
    current_user: User = Depends(get_current_user),
) -> PatientAppointments:
    patient_id = ensure_is_patient(current_user)
    return patient_records_service.appointments(store.select_state(), patient_id)


@router.get("/records", response_model=PatientRecords)
async def my_records(
    store: AppStore = Depends(get_store),
    current_user: User = Depends(get_current_user),
) -> PatientRecords:
    patient_id = ensure_is_patient(current_user)
    records = patient_records_service.records(store.select_state(), patient_id)
    if records is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Patient not found")
    return records
