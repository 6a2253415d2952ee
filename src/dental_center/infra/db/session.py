from __future__ import annotations

from collections.abc import Callable

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from src.dental_center.infra.db.models import Base


SessionFactory = Callable[[], Session]


def create_sqlalchemy_engine(database_url: str) -> Engine:
    """Create an engine and make sure the key/value table exists.

    Single-table schema, so ``create_all`` stands in for migrations.
    """

    engine = create_engine(database_url, future=True)
    Base.metadata.create_all(engine)
    return engine


def create_sqlalchemy_session_factory(engine: Engine) -> SessionFactory:
    SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, expire_on_commit=False, class_=Session)

    def _factory() -> Session:
        return SessionLocal()

    return _factory
