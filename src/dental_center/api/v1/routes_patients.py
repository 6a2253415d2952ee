from __future__ import annotations

from datetime import date, datetime, timezone
from typing import List, Optional
from uuid import uuid4

from fastapi import APIRouter, Depends, HTTPException, status

from src.dental_center.dependencies import get_store
from src.dental_center.domain.models.analytics import PatientStats
from src.dental_center.domain.models.base import DomainModel
from src.dental_center.domain.models.patient import Patient
from src.dental_center.domain.models.user import User
from src.dental_center.domain.store.actions import AddPatient, DeletePatient, UpdatePatient
from src.dental_center.security import ensure_can_view_patient, get_current_user, require_admin
from src.dental_center.services.analytics.service import patient_stats
from src.dental_center.services.audit.service import audit_service
from src.dental_center.services.records.service import search_patients
from src.dental_center.services.store.reducer import TransitionOutcome
from src.dental_center.services.store.service import AppStore


router = APIRouter(prefix="/patients", tags=["patients"])


class PatientWriteRequest(DomainModel):
    name: str
    dob: date
    contact: str
    email: str
    address: str = ""
    health_info: str = ""
    emergency_contact: str = ""


class PatientDeleteResponse(DomainModel):
    id: str
    removed_incident_ids: List[str]


def _new_patient_id() -> str:
    return f"p{uuid4().hex[:12]}"


@router.get("/", response_model=List[Patient])
async def list_patients(
    q: Optional[str] = None,
    store: AppStore = Depends(get_store),
    current_user: User = Depends(require_admin),
) -> List[Patient]:
    return search_patients(store.select_state().patients, q)


@router.post("/", response_model=Patient, status_code=status.HTTP_201_CREATED)
async def create_patient(
    payload: PatientWriteRequest,
    store: AppStore = Depends(get_store),
    current_user: User = Depends(require_admin),
) -> Patient:
    patient = Patient(
        id=_new_patient_id(),
        created_at=datetime.now(timezone.utc),
        **payload.model_dump(),
    )
    result = store.dispatch(AddPatient(patient=patient))

    audit_service.log_event(
        action="ADD_PATIENT",
        resource_type="patient",
        resource_id=patient.id,
        subject=current_user.id,
        outcome=result.outcome.value,
    )
    return patient


@router.get("/{patient_id}", response_model=Patient)
async def get_patient(
    patient_id: str,
    store: AppStore = Depends(get_store),
    current_user: User = Depends(get_current_user),
) -> Patient:
    ensure_can_view_patient(current_user, patient_id)
    patient = store.select_state().find_patient(patient_id)
    if patient is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Patient not found")
    return patient


@router.put("/{patient_id}", response_model=Patient)
async def update_patient(
    patient_id: str,
    payload: PatientWriteRequest,
    store: AppStore = Depends(get_store),
    current_user: User = Depends(require_admin),
) -> Patient:
    existing = store.select_state().find_patient(patient_id)
    if existing is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Patient not found")

    updated = existing.model_copy(update=payload.model_dump())
    result = store.dispatch(UpdatePatient(patient=updated))

    audit_service.log_event(
        action="UPDATE_PATIENT",
        resource_type="patient",
        resource_id=patient_id,
        subject=current_user.id,
        outcome=result.outcome.value,
    )
    # Deleted between the read and the dispatch.
    if result.outcome == TransitionOutcome.NOT_FOUND:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Patient not found")
    return updated


@router.delete("/{patient_id}", response_model=PatientDeleteResponse)
async def delete_patient(
    patient_id: str,
    store: AppStore = Depends(get_store),
    current_user: User = Depends(require_admin),
) -> PatientDeleteResponse:
    removed = [i.id for i in store.select_state().incidents_for_patient(patient_id)]
    result = store.dispatch(DeletePatient(id=patient_id))

    audit_service.log_event(
        action="DELETE_PATIENT",
        resource_type="patient",
        resource_id=patient_id,
        subject=current_user.id,
        outcome=result.outcome.value,
        extra={"removed_incidents": len(removed) if result.applied else 0},
    )
    if result.outcome == TransitionOutcome.NOT_FOUND:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Patient not found")
    return PatientDeleteResponse(id=patient_id, removed_incident_ids=removed)


@router.get("/{patient_id}/stats", response_model=PatientStats)
async def get_patient_stats(
    patient_id: str,
    store: AppStore = Depends(get_store),
    current_user: User = Depends(get_current_user),
) -> PatientStats:
    ensure_can_view_patient(current_user, patient_id)
    state = store.select_state()
    if state.find_patient(patient_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Patient not found")
    return patient_stats(state.incidents, patient_id)
