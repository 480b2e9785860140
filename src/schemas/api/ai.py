from typing import List, Optional

from pydantic import Base64Bytes, BaseModel, Field
from src.schemas.ai import AIProvider
from src.schemas.flashcards import Flashcard
from src.services.ai.prompts import CardFormat, FlashcardLevel


class CompletionRequest(BaseModel):
    """Raw prompt forwarded to the active (or given) provider."""

    prompt: str = Field(..., min_length=1, description="User prompt")
    system_prompt: Optional[str] = Field(None, description="Optional system instruction")
    provider: Optional[AIProvider] = Field(None, description="Override the selected provider")
    model: Optional[str] = Field(None, description="Override the provider's model")

    class Config:
        json_schema_extra = {
            "example": {
                "prompt": "Explain photosynthesis in two sentences.",
                "system_prompt": "You are a biology tutor.",
                "provider": "gemini",
            }
        }


class CompletionResponse(BaseModel):
    text: str = Field(..., description="Generated text")


class ContentRequest(BaseModel):
    content: str = Field(..., min_length=1, description="Transcript or document text")


class FlashcardGenerationRequest(BaseModel):
    content: str = Field(..., min_length=1, description="Transcript or document text")
    level: FlashcardLevel = Field(FlashcardLevel.BASIC, description="basic (10), advanced (15) or comprehensive (25) cards")


class SummaryFlashcardsRequest(BaseModel):
    summary: str = Field(..., min_length=1)
    key_points: List[str] = Field(default_factory=list)
    card_format: CardFormat = Field(CardFormat.QA, description="qa, cloze, mcq or true_false")


class FlashcardsResponse(BaseModel):
    cards: List[Flashcard]
    count: int


class ChatRequest(BaseModel):
    message: str = Field(..., min_length=1)
    context: Optional[str] = Field(None, description="Study material the question refers to")


class ChatResponse(BaseModel):
    reply: str


class TranscriptionRequest(BaseModel):
    audio: Base64Bytes = Field(..., description="Base64-encoded audio file")
    mime_type: str = Field("audio/mpeg", description="MIME type of the audio, e.g. audio/wav")


class TranscriptionResponse(BaseModel):
    text: str
