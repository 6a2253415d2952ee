from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Any, Callable, List, Optional

from pydantic import ValidationError

from src.dental_center.config import settings
from src.dental_center.domain.models.app_state import AppState
from src.dental_center.domain.models.user import User
from src.dental_center.domain.store.actions import LoadData, Login, Logout
from src.dental_center.infra.storage.kv import KeyValueStorage
from src.dental_center.services.store.reducer import TransitionOutcome, apply_action
from src.dental_center.services.store.seed import seed_state

logger = logging.getLogger(__name__)

Listener = Callable[[AppState], None]


@dataclass(frozen=True)
class DispatchResult:
    outcome: TransitionOutcome
    state: AppState

    @property
    def applied(self) -> bool:
        return self.outcome == TransitionOutcome.APPLIED


class AppStore:
    """Single authoritative holder of the application state.

    Every dispatch runs the reducer to completion under a lock, so readers
    only ever see whole snapshots. Applied transitions are mirrored to the
    key/value medium; write failures are logged and the in-memory state stays
    authoritative for the rest of the process.

    The snapshot key and the session key are written separately and not
    atomically; a crash between the two writes can leave them inconsistent.
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        *,
        seed: Optional[AppState] = None,
        data_key: Optional[str] = None,
        session_key: Optional[str] = None,
    ) -> None:
        self._storage = storage
        self._state = seed if seed is not None else seed_state()
        self._data_key = data_key or settings.data_key
        self._session_key = session_key or settings.session_key
        self._lock = threading.RLock()
        self._listeners: List[Listener] = []

    # Startup

    def hydrate(self) -> AppState:
        """Load persisted data and session once, before any other action.

        Missing or malformed data leaves the seed in place. The session key is
        the only source of the logged-in user: whatever ``currentUser`` the
        snapshot carries is dropped, and a session that cannot be parsed is
        removed so the store stays logged out.
        """

        with self._lock:
            snapshot = self._read_snapshot()
            if snapshot is not None:
                self.dispatch(LoadData(snapshot=snapshot.model_copy(update={"current_user": None})))

            user = self._read_session()
            if user is not None:
                self.dispatch(Login(user=user))

            # First run: make sure the seed itself is persisted.
            self._write_snapshot()
            return self._state

    def _read_snapshot(self) -> Optional[AppState]:
        raw = self._read_key(self._data_key)
        if raw is None:
            return None
        try:
            return AppState.model_validate_json(raw)
        except ValidationError:
            logger.warning("Discarding malformed persisted data under %r", self._data_key)
            return None

    def _read_session(self) -> Optional[User]:
        raw = self._read_key(self._session_key)
        if raw is None:
            return None
        try:
            return User.model_validate_json(raw)
        except ValidationError:
            logger.warning("Discarding unparseable session under %r", self._session_key)
            self._remove_key(self._session_key)
            return None

    # Public surface

    def select_state(self) -> AppState:
        return self._state

    def dispatch(self, action: Any) -> DispatchResult:
        with self._lock:
            transition = apply_action(self._state, action)
            if transition.outcome != TransitionOutcome.APPLIED:
                logger.debug("Action %s left state unchanged (%s)", _action_tag(action), transition.outcome.value)
                return DispatchResult(outcome=transition.outcome, state=self._state)

            self._state = transition.state
            self._write_snapshot()
            if isinstance(action, Login):
                self._write_key(self._session_key, action.user.model_dump_json(by_alias=True))
            elif isinstance(action, Logout):
                self._remove_key(self._session_key)

            self._notify()
            return DispatchResult(outcome=transition.outcome, state=self._state)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener`` for applied transitions; returns an unsubscribe callable."""

        with self._lock:
            self._listeners.append(listener)

        def _unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return _unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self._state)
            except Exception:
                logger.exception("Store listener failed")

    # Storage helpers. Failures never propagate to callers.

    def _write_snapshot(self) -> None:
        self._write_key(self._data_key, self._state.model_dump_json(by_alias=True))

    def _read_key(self, key: str) -> Optional[str]:
        try:
            return self._storage.get_item(key)
        except Exception:
            logger.exception("Failed to read %r from storage", key)
            return None

    def _write_key(self, key: str, value: str) -> None:
        try:
            self._storage.set_item(key, value)
        except Exception:
            logger.exception("Failed to persist %r; keeping in-memory state", key)

    def _remove_key(self, key: str) -> None:
        try:
            self._storage.remove_item(key)
        except Exception:
            logger.exception("Failed to remove %r from storage", key)


def _action_tag(action: Any) -> str:
    return getattr(action, "type", type(action).__name__)
