"""
backend/schemas/job_update.py

Schemas for the progress notes attached to a job.
"""

from datetime import datetime
from pydantic import BaseModel, ConfigDict, field_validator

UPDATE_TEXT_MAX = 4000


class JobUpdateCreate(BaseModel):
    update_text: str

    @field_validator("update_text")
    def text_required(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Update text is required")
        if len(v) > UPDATE_TEXT_MAX:
            raise ValueError(f"Update text cannot exceed {UPDATE_TEXT_MAX} characters")
        return v


class JobUpdateRead(BaseModel):
    id: int
    job_id: int
    update_text: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
