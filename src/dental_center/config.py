from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional


@dataclass
class Settings:
    """Centralized application settings.

    This keeps environment-variable handling in one place so other modules can
    depend on strongly-typed attributes instead of calling os.getenv
    directly.
    """

    # Key/value medium for the persisted snapshot: "memory" (default),
    # "file" or "sql".
    storage_backend: str = os.getenv("STORAGE_BACKEND", "memory")

    # Directory holding one JSON file per key when STORAGE_BACKEND=file.
    storage_dir: Path = Path(os.getenv("STORAGE_DIR", "data"))

    # Database used when STORAGE_BACKEND=sql.
    database_url: Optional[str] = os.getenv("DATABASE_URL")

    # Persisted keys. The domain snapshot and the session are written
    # independently; there is no transaction spanning both.
    data_key: str = os.getenv("DATA_KEY", "dental-center-data")
    session_key: str = os.getenv("SESSION_KEY", "dental-center-user")

    # Per-file cap for incident attachments (in bytes).
    max_attachment_bytes: int = int(os.getenv("MAX_ATTACHMENT_BYTES", str(10 * 1024 * 1024)))

    # Dashboard windows.
    upcoming_window_days: int = int(os.getenv("UPCOMING_WINDOW_DAYS", "7"))
    upcoming_limit: int = int(os.getenv("UPCOMING_LIMIT", "10"))
    top_patients_limit: int = int(os.getenv("TOP_PATIENTS_LIMIT", "5"))

    # Appointments shown per calendar day before "+N more".
    calendar_visible_appointments: int = int(os.getenv("CALENDAR_VISIBLE_APPOINTMENTS", "3"))

    # CORS configuration: comma-separated origins (e.g. "https://app.example.com,https://admin.example.com").
    # Default is "*" (allow all) which is acceptable for local development but
    # should be tightened in production.
    cors_allow_origins: str = os.getenv("CORS_ALLOW_ORIGINS", "*")


settings = Settings()
