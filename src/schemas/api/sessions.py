from typing import List, Optional

from pydantic import Base64Bytes, BaseModel, Field
from src.schemas.flashcards import Flashcard
from src.schemas.sessions import SessionRecord
from src.services.notifications import Notification


class SessionResponse(BaseModel):
    session: SessionRecord
    notifications: List[Notification] = Field(default_factory=list)


class TranscriptUpdate(BaseModel):
    transcript: str = Field(..., description="Full transcript text; replaces any previous one")


class SummaryUpdate(BaseModel):
    summary: str = Field(..., description="Summary text; replaces any previous one")


class SaveFlashcardsRequest(BaseModel):
    cards: List[Flashcard] = Field(..., min_length=1)


class SavedFlashcardsResponse(BaseModel):
    session_id: str
    cards: List[Flashcard]
    notifications: List[Notification] = Field(default_factory=list)


class UpdateResult(BaseModel):
    updated: bool
    notifications: List[Notification] = Field(default_factory=list)
    session: Optional[SessionRecord] = None


class SessionTranscriptionRequest(BaseModel):
    audio: Base64Bytes = Field(..., description="Base64-encoded audio of the session's lecture")
    mime_type: str = Field("audio/mpeg")


class YouTubeRequest(BaseModel):
    url: str = Field(..., min_length=1, description="YouTube watch/share URL or bare video id")

    class Config:
        json_schema_extra = {"example": {"url": "https://www.youtube.com/watch?v=dQw4w9WgXcQ"}}


class SessionListResponse(BaseModel):
    sessions: List[SessionRecord]
    count: int
