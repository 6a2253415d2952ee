from __future__ import annotations

import asyncio
import base64
import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Protocol

from src.dental_center.config import settings
from src.dental_center.domain.models.incident import FileAttachment

logger = logging.getLogger(__name__)


class UploadedFile(Protocol):
    """Subset of ``fastapi.UploadFile`` the reader relies on."""

    filename: Optional[str]
    content_type: Optional[str]

    async def read(self, size: int = -1) -> bytes: ...


class AttachmentTooLargeError(ValueError):
    def __init__(self, name: str, limit_bytes: int) -> None:
        self.name = name
        self.limit_bytes = limit_bytes
        super().__init__(f"File {name} is too large. Maximum size is {_format_limit(limit_bytes)}.")


def _format_limit(limit_bytes: int) -> str:
    megabytes = limit_bytes / (1024 * 1024)
    if megabytes.is_integer():
        return f"{int(megabytes)}MB"
    return f"{megabytes:.2f}MB"


def to_data_url(content: bytes, content_type: str) -> str:
    encoded = base64.b64encode(content).decode("ascii")
    return f"data:{content_type};base64,{encoded}"


def build_attachment(name: str, content: bytes, content_type: Optional[str], *, max_bytes: Optional[int] = None) -> FileAttachment:
    limit = settings.max_attachment_bytes if max_bytes is None else max_bytes
    if len(content) > limit:
        raise AttachmentTooLargeError(name, limit)
    media_type = content_type or "application/octet-stream"
    return FileAttachment(name=name, url=to_data_url(content, media_type), type=media_type, size=len(content))


@dataclass
class AttachmentBuffer:
    """Caller-local staging area for files picked before an incident is saved.

    Attachments are immutable once saved; until then they can only be
    appended or removed here.
    """

    files: List[FileAttachment] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    def append(self, attachment: FileAttachment) -> None:
        self.files.append(attachment)

    def reject(self, message: str) -> None:
        self.warnings.append(message)

    def remove(self, index: int) -> FileAttachment:
        return self.files.pop(index)

    def clear(self) -> None:
        self.files.clear()
        self.warnings.clear()


class AttachmentReadError(Exception):
    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"File {name} could not be read.")


async def _read_one(upload: UploadedFile, max_bytes: int) -> FileAttachment:
    name = upload.filename or "attachment"
    try:
        # One byte past the limit is enough to reject without buffering the rest.
        content = await upload.read(max_bytes + 1)
    except Exception as exc:
        raise AttachmentReadError(name) from exc
    return build_attachment(name, content, upload.content_type, max_bytes=max_bytes)


async def read_attachments(
    uploads: Iterable[UploadedFile],
    buffer: Optional[AttachmentBuffer] = None,
    *,
    max_bytes: Optional[int] = None,
) -> AttachmentBuffer:
    """Read ``uploads`` concurrently into ``buffer``.

    Each finished read appends exactly once, in completion order. An oversized
    or unreadable file is recorded as a warning and does not stop the rest of
    the batch.
    """

    buffer = buffer if buffer is not None else AttachmentBuffer()
    limit = settings.max_attachment_bytes if max_bytes is None else max_bytes
    tasks = [asyncio.ensure_future(_read_one(upload, limit)) for upload in uploads]
    for finished in asyncio.as_completed(tasks):
        try:
            buffer.append(await finished)
        except AttachmentTooLargeError as exc:
            logger.warning("Rejected attachment: %s", exc)
            buffer.reject(str(exc))
        except AttachmentReadError as exc:
            logger.warning("Failed to read attachment %r", exc.name, exc_info=exc.__cause__)
            buffer.reject(str(exc))
    return buffer
