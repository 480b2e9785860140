from datetime import datetime
from enum import Enum
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class SourceType(str, Enum):
    AUDIO = "audio"
    DOCUMENT = "document"
    YOUTUBE = "youtube"


class SessionStatus(str, Enum):
    CREATED = "created"
    TRANSCRIBED = "transcribed"
    SUMMARIZED = "summarized"


class SessionCreate(BaseModel):
    """Metadata for a newly ingested piece of content."""

    title: str = Field(..., min_length=1, max_length=512)
    source_type: SourceType
    source_url: Optional[str] = None
    transcript: Optional[str] = None
    summary: Optional[str] = None
    status: SessionStatus = SessionStatus.CREATED


class SessionRecord(BaseModel):
    model_config = ConfigDict(from_attributes=True, use_enum_values=True)

    id: UUID
    title: str
    source_type: SourceType
    source_url: Optional[str] = None
    transcript: Optional[str] = None
    summary: Optional[str] = None
    status: SessionStatus
    card_count: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
