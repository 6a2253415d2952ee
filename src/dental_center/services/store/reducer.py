from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, List, Tuple, TypeVar

from src.dental_center.domain.models.app_state import AppState
from src.dental_center.domain.store.actions import (
    AddIncident,
    AddPatient,
    DeleteIncident,
    DeletePatient,
    LoadData,
    Login,
    Logout,
    UpdateIncident,
    UpdatePatient,
)

T = TypeVar("T")


class TransitionOutcome(str, Enum):
    APPLIED = "applied"
    # Update/delete targeted an id that does not exist; state is unchanged.
    NOT_FOUND = "not_found"
    # Unrecognized action; state is unchanged.
    IGNORED = "ignored"


@dataclass(frozen=True)
class Transition:
    state: AppState
    outcome: TransitionOutcome


def _replace_by_id(items: List[T], replacement: T) -> Tuple[List[T], bool]:
    found = False
    result: List[T] = []
    for item in items:
        if item.id == replacement.id:  # type: ignore[attr-defined]
            result.append(replacement)
            found = True
        else:
            result.append(item)
    return result, found


def _remove_by_id(items: List[T], item_id: str) -> Tuple[List[T], bool]:
    result = [item for item in items if item.id != item_id]  # type: ignore[attr-defined]
    return result, len(result) != len(items)


def apply_action(state: AppState, action: Any) -> Transition:
    """Compute the next state for ``action`` without touching ``state``.

    Every branch builds new collections with ``model_copy``; entity objects
    are shared between snapshots but never mutated. Misses on update/delete
    keep the previous state and report ``NOT_FOUND``. No uniqueness or
    referential checks are made on add.
    """

    if isinstance(action, Login):
        return Transition(state.model_copy(update={"current_user": action.user.model_copy()}), TransitionOutcome.APPLIED)

    if isinstance(action, Logout):
        return Transition(state.model_copy(update={"current_user": None}), TransitionOutcome.APPLIED)

    if isinstance(action, AddPatient):
        patients = [*state.patients, action.patient]
        return Transition(state.model_copy(update={"patients": patients}), TransitionOutcome.APPLIED)

    if isinstance(action, UpdatePatient):
        patients, found = _replace_by_id(state.patients, action.patient)
        if not found:
            return Transition(state, TransitionOutcome.NOT_FOUND)
        return Transition(state.model_copy(update={"patients": patients}), TransitionOutcome.APPLIED)

    if isinstance(action, DeletePatient):
        patients, found = _remove_by_id(state.patients, action.id)
        if not found:
            return Transition(state, TransitionOutcome.NOT_FOUND)
        # Cascade in the same transition so no dangling incident is observable.
        incidents = [i for i in state.incidents if i.patient_id != action.id]
        return Transition(
            state.model_copy(update={"patients": patients, "incidents": incidents}),
            TransitionOutcome.APPLIED,
        )

    if isinstance(action, AddIncident):
        incidents = [*state.incidents, action.incident]
        return Transition(state.model_copy(update={"incidents": incidents}), TransitionOutcome.APPLIED)

    if isinstance(action, UpdateIncident):
        incidents, found = _replace_by_id(state.incidents, action.incident)
        if not found:
            return Transition(state, TransitionOutcome.NOT_FOUND)
        return Transition(state.model_copy(update={"incidents": incidents}), TransitionOutcome.APPLIED)

    if isinstance(action, DeleteIncident):
        incidents, found = _remove_by_id(state.incidents, action.id)
        if not found:
            return Transition(state, TransitionOutcome.NOT_FOUND)
        return Transition(state.model_copy(update={"incidents": incidents}), TransitionOutcome.APPLIED)

    if isinstance(action, LoadData):
        return Transition(action.snapshot.model_copy(deep=True), TransitionOutcome.APPLIED)

    return Transition(state, TransitionOutcome.IGNORED)


def app_reducer(state: AppState, action: Any) -> AppState:
    return apply_action(state, action).state
