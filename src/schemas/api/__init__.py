from src.schemas.api.ai import (
    ChatRequest,
    ChatResponse,
    CompletionRequest,
    CompletionResponse,
    ContentRequest,
    FlashcardGenerationRequest,
    FlashcardsResponse,
    SummaryFlashcardsRequest,
    TranscriptionRequest,
    TranscriptionResponse,
)
from src.schemas.api.flashcards import ExportRequest, FlashcardUpdate
from src.schemas.api.sessions import (
    SaveFlashcardsRequest,
    SavedFlashcardsResponse,
    SessionListResponse,
    SessionResponse,
    SessionTranscriptionRequest,
    SummaryUpdate,
    TranscriptUpdate,
    UpdateResult,
    YouTubeRequest,
)
from src.schemas.api.settings import AISettingsResponse, AISettingsUpdate, KeyValidationRequest, KeyValidationResponse

__all__ = [
    "ChatRequest",
    "ChatResponse",
    "CompletionRequest",
    "CompletionResponse",
    "ContentRequest",
    "FlashcardGenerationRequest",
    "FlashcardsResponse",
    "SummaryFlashcardsRequest",
    "TranscriptionRequest",
    "TranscriptionResponse",
    "ExportRequest",
    "FlashcardUpdate",
    "SaveFlashcardsRequest",
    "SavedFlashcardsResponse",
    "SessionListResponse",
    "SessionResponse",
    "SessionTranscriptionRequest",
    "SummaryUpdate",
    "TranscriptUpdate",
    "UpdateResult",
    "YouTubeRequest",
    "AISettingsResponse",
    "AISettingsUpdate",
    "KeyValidationRequest",
    "KeyValidationResponse",
]
