from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class DomainModel(BaseModel):
    """Base for persisted domain records.

    Python code uses snake_case attributes; the persisted snapshot and the
    HTTP payloads use camelCase keys (``patientId``, ``appointmentDate``).
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
