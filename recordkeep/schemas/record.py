"""
Record schemas.
"""

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class RecordCreate(BaseModel):
    """Record creation request."""

    model_config = ConfigDict(str_strip_whitespace=True)

    text: str = Field(..., min_length=1, max_length=1000)


class RecordUpdate(BaseModel):
    """Record update request; omitted fields are left unchanged."""

    model_config = ConfigDict(str_strip_whitespace=True)

    text: Optional[str] = Field(None, min_length=1, max_length=1000)
    completed: Optional[bool] = None


class RecordResponse(BaseModel):
    """Record response."""

    id: uuid.UUID
    text: str
    completed: bool
    completed_at: Optional[datetime] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class RecordListResponse(BaseModel):
    records: List[RecordResponse]
