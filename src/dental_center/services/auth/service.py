from __future__ import annotations

from typing import Optional

from src.dental_center.domain.models.app_state import AppState
from src.dental_center.domain.models.user import User
from src.dental_center.domain.store.actions import Login, Logout
from src.dental_center.services.store.service import AppStore


class InvalidCredentialsError(Exception):
    def __init__(self) -> None:
        super().__init__("No matching user found")


class AuthService:
    """Plaintext credential matching against the seeded users.

    This is role tagging for a single-tenant front-end, not a security
    boundary: no hashing, lockout or rate limiting.
    """

    def find_user(self, state: AppState, email: str, password: str) -> Optional[User]:
        # EmailStr lowercases the stored domain.
        wanted = email.strip().lower()
        for user in state.users:
            if user.email.lower() == wanted and user.password == password:
                return user
        return None

    def login(self, store: AppStore, *, email: str, password: str) -> User:
        user = self.find_user(store.select_state(), email, password)
        if user is None:
            raise InvalidCredentialsError()
        store.dispatch(Login(user=user))
        return user

    def logout(self, store: AppStore) -> None:
        store.dispatch(Logout())


auth_service = AuthService()
