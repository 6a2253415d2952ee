from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field, TypeAdapter

from src.dental_center.domain.models.app_state import AppState
from src.dental_center.domain.models.incident import Incident
from src.dental_center.domain.models.patient import Patient
from src.dental_center.domain.models.user import User


class Login(BaseModel):
    type: Literal["LOGIN"] = "LOGIN"
    # Credentials must already have been matched by the caller.
    user: User


class Logout(BaseModel):
    type: Literal["LOGOUT"] = "LOGOUT"


class AddPatient(BaseModel):
    type: Literal["ADD_PATIENT"] = "ADD_PATIENT"
    patient: Patient


class UpdatePatient(BaseModel):
    type: Literal["UPDATE_PATIENT"] = "UPDATE_PATIENT"
    patient: Patient


class DeletePatient(BaseModel):
    type: Literal["DELETE_PATIENT"] = "DELETE_PATIENT"
    id: str


class AddIncident(BaseModel):
    type: Literal["ADD_INCIDENT"] = "ADD_INCIDENT"
    incident: Incident


class UpdateIncident(BaseModel):
    type: Literal["UPDATE_INCIDENT"] = "UPDATE_INCIDENT"
    incident: Incident


class DeleteIncident(BaseModel):
    type: Literal["DELETE_INCIDENT"] = "DELETE_INCIDENT"
    id: str


class LoadData(BaseModel):
    type: Literal["LOAD_DATA"] = "LOAD_DATA"
    snapshot: AppState


Action = Annotated[
    Union[
        Login,
        Logout,
        AddPatient,
        UpdatePatient,
        DeletePatient,
        AddIncident,
        UpdateIncident,
        DeleteIncident,
        LoadData,
    ],
    Field(discriminator="type"),
]

action_adapter: TypeAdapter[Action] = TypeAdapter(Action)


def parse_action(payload: dict) -> Action:
    """Validate a tagged JSON payload into one of the known actions."""

    return action_adapter.validate_python(payload)
