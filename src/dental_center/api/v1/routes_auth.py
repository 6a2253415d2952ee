from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status

from src.dental_center.dependencies import get_store
from src.dental_center.domain.models.base import DomainModel
from src.dental_center.domain.models.user import User, UserRole
from src.dental_center.security import get_current_user
from src.dental_center.services.audit.service import audit_service
from src.dental_center.services.auth.service import InvalidCredentialsError, auth_service
from src.dental_center.services.store.service import AppStore


router = APIRouter(prefix="/auth", tags=["auth"])


class LoginRequest(DomainModel):
    email: str
    password: str


class SessionUser(DomainModel):
    """Session view of a user; never echoes the credential back."""

    id: str
    role: UserRole
    email: str
    patient_id: Optional[str] = None

    @classmethod
    def from_user(cls, user: User) -> "SessionUser":
        return cls(id=user.id, role=user.role, email=user.email, patient_id=user.patient_id)


@router.post("/login", response_model=SessionUser)
async def login(payload: LoginRequest, store: AppStore = Depends(get_store)) -> SessionUser:
    try:
        user = auth_service.login(store, email=payload.email, password=payload.password)
    except InvalidCredentialsError as exc:
        audit_service.log_event(action="login", resource_type="session", outcome="rejected")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(exc)) from exc

    audit_service.log_event(
        action="LOGIN",
        resource_type="session",
        resource_id=user.id,
        subject=user.id,
        outcome="applied",
        extra={"role": user.role.value},
    )
    return SessionUser.from_user(user)


@router.post("/logout")
async def logout(store: AppStore = Depends(get_store)) -> dict:
    current = store.select_state().current_user
    auth_service.logout(store)
    audit_service.log_event(
        action="LOGOUT",
        resource_type="session",
        subject=current.id if current else None,
        outcome="applied",
    )
    return {"status": "logged_out"}


@router.get("/session", response_model=SessionUser)
async def current_session(current_user: User = Depends(get_current_user)) -> SessionUser:
    return SessionUser.from_user(current_user)
