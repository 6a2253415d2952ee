from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from src.dental_center.infra.db.models import KeyValueItemORM
from src.dental_center.infra.db.session import SessionFactory
from src.dental_center.infra.storage.kv import KeyValueStorage


class SqlKeyValueStorage(KeyValueStorage):
    """SQL-backed key/value medium, one row per key in ``kv_items``."""

    def __init__(self, session_factory: SessionFactory) -> None:
        self._session_factory = session_factory

    def get_item(self, key: str) -> Optional[str]:
        session = self._session_factory()
        try:
            orm = session.get(KeyValueItemORM, key)
            if orm is None:
                return None
            return orm.value
        finally:
            session.close()

    def set_item(self, key: str, value: str) -> None:
        session = self._session_factory()
        try:
            now = datetime.now(timezone.utc)
            existing = session.get(KeyValueItemORM, key)
            if existing is None:
                session.add(KeyValueItemORM(key=key, value=value, updated_at=now))
            else:
                existing.value = value
                existing.updated_at = now
            session.commit()
        finally:
            session.close()

    def remove_item(self, key: str) -> None:
        session = self._session_factory()
        try:
            existing = session.get(KeyValueItemORM, key)
            if existing is not None:
                session.delete(existing)
                session.commit()
        finally:
            session.close()
