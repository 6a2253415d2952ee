from __future__ import annotations

from typing import Optional

from src.dental_center.services.store.service import AppStore


# Set once at startup by ``init_store``. Route handlers receive the store via
# the ``get_store`` dependency; services take it as an argument.
_store: Optional[AppStore] = None


def init_store(store: AppStore) -> AppStore:
    global _store
    _store = store
    return store


def get_store() -> AppStore:
    """FastAPI dependency returning the process-wide store.

    Tests override this dependency with a fresh store per test.
    """

    if _store is None:
        raise RuntimeError("Store is not initialized; the startup hook must run init_store first")
    return _store
