from __future__ import annotations

from fastapi import Depends, HTTPException, status

from src.dental_center.dependencies import get_store
from src.dental_center.domain.models.user import User, UserRole
from src.dental_center.services.store.service import AppStore


async def get_current_user(store: AppStore = Depends(get_store)) -> User:
    """Resolve the logged-in user from the store's session.

    Role tagging only: the session is whatever the last ``Login`` action put
    in the store. There is no token or server-side credential check here.
    """

    user = store.select_state().current_user
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not logged in",
        )
    return user


def ensure_is_admin(user: User) -> None:
    """Raise HTTP 403 unless the user is an Admin."""

    if user.role == UserRole.ADMIN:
        return
    raise HTTPException(
        status_code=status.HTTP_403_FORBIDDEN,
        detail="Admin role required",
    )


def ensure_can_view_patient(user: User, patient_id: str) -> None:
    """Raise HTTP 403 if the user may not read this patient's data.

    Admins can read every patient. Patient users can only read the record
    linked to their own account.
    """

    if user.role == UserRole.ADMIN:
        return

    if user.patient_id != patient_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not authorized to view this patient",
        )


def ensure_is_patient(user: User) -> str:
    """Return the linked patient id, or raise HTTP 403 for non-patient users."""

    if user.role == UserRole.PATIENT and user.patient_id:
        return user.patient_id
    raise HTTPException(
        status_code=status.HTTP_403_FORBIDDEN,
        detail="Patient role required",
    )


async def require_admin(current_user: User = Depends(get_current_user)) -> User:
    ensure_is_admin(current_user)
    return current_user
