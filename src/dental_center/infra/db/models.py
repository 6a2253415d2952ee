from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


class KeyValueItemORM(Base):
    __tablename__ = "kv_items"

    key: Mapped[str] = mapped_column(String(255), primary_key=True)
    # Serialized JSON document (full snapshot or session user).
    value: Mapped[str] = mapped_column(Text, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
