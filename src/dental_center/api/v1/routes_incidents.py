from __future__ import annotations

from datetime import datetime, timezone
from typing import List, Optional
from uuid import uuid4

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status
from pydantic import Field

from src.dental_center.dependencies import get_store
from src.dental_center.domain.models.base import DomainModel
from src.dental_center.domain.models.incident import FileAttachment, Incident, IncidentStatus
from src.dental_center.domain.models.user import User, UserRole
from src.dental_center.domain.store.actions import AddIncident, DeleteIncident, UpdateIncident
from src.dental_center.security import ensure_can_view_patient, get_current_user, require_admin
from src.dental_center.services.attachments.service import read_attachments
from src.dental_center.services.audit.service import audit_service
from src.dental_center.services.records.service import IncidentTab, filter_incidents
from src.dental_center.services.store.reducer import TransitionOutcome
from src.dental_center.services.store.service import AppStore


router = APIRouter(prefix="/incidents", tags=["incidents"])


class IncidentWriteRequest(DomainModel):
    patient_id: str
    title: str
    description: str = ""
    comments: str = ""
    appointment_date: datetime
    cost: Optional[float] = Field(default=None, ge=0)
    treatment: Optional[str] = None
    status: IncidentStatus = IncidentStatus.SCHEDULED
    next_date: Optional[datetime] = None
    # Newly staged files. On update these are appended to the saved ones.
    files: List[FileAttachment] = Field(default_factory=list)


class AttachmentUploadResponse(DomainModel):
    incident: Incident
    accepted: List[str]
    warnings: List[str]


def _new_incident_id() -> str:
    return f"i{uuid4().hex[:12]}"


def _get_incident_or_404(store: AppStore, incident_id: str) -> Incident:
    incident = store.select_state().find_incident(incident_id)
    if incident is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Incident not found")
    return incident


@router.get("/", response_model=List[Incident])
async def list_incidents(
    q: Optional[str] = None,
    tab: IncidentTab = IncidentTab.ALL,
    store: AppStore = Depends(get_store),
    current_user: User = Depends(get_current_user),
) -> List[Incident]:
    state = store.select_state()
    incidents = state.incidents
    if current_user.role != UserRole.ADMIN:
        incidents = [i for i in incidents if i.patient_id == current_user.patient_id]
    return filter_incidents(incidents, state.patients, q, tab)


@router.post("/", response_model=Incident, status_code=status.HTTP_201_CREATED)
async def create_incident(
    payload: IncidentWriteRequest,
    store: AppStore = Depends(get_store),
    current_user: User = Depends(require_admin),
) -> Incident:
    # The store does not check references; creation does.
    if store.select_state().find_patient(payload.patient_id) is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Unknown patientId")

    incident = Incident(
        id=_new_incident_id(),
        created_at=datetime.now(timezone.utc),
        **payload.model_dump(),
    )
    result = store.dispatch(AddIncident(incident=incident))

    audit_service.log_event(
        action="ADD_INCIDENT",
        resource_type="incident",
        resource_id=incident.id,
        subject=current_user.id,
        outcome=result.outcome.value,
        extra={"patient_id": incident.patient_id, "files": len(incident.files)},
    )
    return incident


@router.get("/{incident_id}", response_model=Incident)
async def get_incident(
    incident_id: str,
    store: AppStore = Depends(get_store),
    current_user: User = Depends(get_current_user),
) -> Incident:
    incident = _get_incident_or_404(store, incident_id)
    ensure_can_view_patient(current_user, incident.patient_id)
    return incident


@router.put("/{incident_id}", response_model=Incident)
async def update_incident(
    incident_id: str,
    payload: IncidentWriteRequest,
    store: AppStore = Depends(get_store),
    current_user: User = Depends(require_admin),
) -> Incident:
    existing = _get_incident_or_404(store, incident_id)

    changes = payload.model_dump(exclude={"files"})
    changes["files"] = [*existing.files, *payload.files]
    # Re-validate so date normalization applies to the new values.
    updated = Incident.model_validate({**existing.model_dump(), **changes})
    result = store.dispatch(UpdateIncident(incident=updated))

    audit_service.log_event(
        action="UPDATE_INCIDENT",
        resource_type="incident",
        resource_id=incident_id,
        subject=current_user.id,
        outcome=result.outcome.value,
        extra={"status": updated.status.value, "files": len(updated.files)},
    )
    if result.outcome == TransitionOutcome.NOT_FOUND:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Incident not found")
    return updated


@router.delete("/{incident_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_incident(
    incident_id: str,
    store: AppStore = Depends(get_store),
    current_user: User = Depends(require_admin),
) -> None:
    result = store.dispatch(DeleteIncident(id=incident_id))

    audit_service.log_event(
        action="DELETE_INCIDENT",
        resource_type="incident",
        resource_id=incident_id,
        subject=current_user.id,
        outcome=result.outcome.value,
    )
    if result.outcome == TransitionOutcome.NOT_FOUND:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Incident not found")


@router.post("/{incident_id}/attachments", response_model=AttachmentUploadResponse)
async def upload_attachments(
    incident_id: str,
    files: List[UploadFile] = File(...),
    store: AppStore = Depends(get_store),
    current_user: User = Depends(require_admin),
) -> AttachmentUploadResponse:
    """Attach uploaded files to an incident as data URLs.

    Oversized files are skipped with a warning; the rest of the batch is
    still attached.
    """

    existing = _get_incident_or_404(store, incident_id)
    buffer = await read_attachments(files)

    updated = existing.model_copy(update={"files": [*existing.files, *buffer.files]})
    result = store.dispatch(UpdateIncident(incident=updated))

    audit_service.log_event(
        action="UPDATE_INCIDENT",
        resource_type="incident",
        resource_id=incident_id,
        subject=current_user.id,
        outcome=result.outcome.value,
        extra={"accepted_files": len(buffer.files), "rejected_files": len(buffer.warnings)},
    )
    if result.outcome == TransitionOutcome.NOT_FOUND:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Incident not found")
    return AttachmentUploadResponse(
        incident=updated,
        accepted=[f.name for f in buffer.files],
        warnings=buffer.warnings,
    )
