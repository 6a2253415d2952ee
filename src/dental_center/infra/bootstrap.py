from __future__ import annotations

import logging
from typing import Optional

from src.dental_center.config import Settings, settings as default_settings
from src.dental_center.infra.db.session import create_sqlalchemy_engine, create_sqlalchemy_session_factory
from src.dental_center.infra.db.sql_kv import SqlKeyValueStorage
from src.dental_center.infra.storage.kv import FileKeyValueStorage, InMemoryKeyValueStorage, KeyValueStorage
from src.dental_center.services.store.service import AppStore

logger = logging.getLogger(__name__)


def build_storage(settings: Optional[Settings] = None) -> KeyValueStorage:
    """Select the key/value medium from configuration.

    A request for the SQL backend without DATABASE_URL is a misconfiguration;
    fall back to the in-memory medium rather than failing startup.
    """

    settings = settings or default_settings
    backend = settings.storage_backend.lower()

    if backend == "file":
        return FileKeyValueStorage(settings.storage_dir)

    if backend == "sql":
        if not settings.database_url:
            logger.warning("STORAGE_BACKEND=sql but DATABASE_URL is not set; using in-memory storage")
            return InMemoryKeyValueStorage()
        engine = create_sqlalchemy_engine(settings.database_url)
        return SqlKeyValueStorage(create_sqlalchemy_session_factory(engine))

    if backend != "memory":
        logger.warning("Unknown STORAGE_BACKEND %r; using in-memory storage", settings.storage_backend)
    return InMemoryKeyValueStorage()


def build_store(settings: Optional[Settings] = None) -> AppStore:
    settings = settings or default_settings
    store = AppStore(build_storage(settings), data_key=settings.data_key, session_key=settings.session_key)
    store.hydrate()
    return store
