from datetime import datetime
from enum import Enum
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class FlashcardType(str, Enum):
    BASIC = "basic"
    CLOZE = "cloze"
    MCQ = "mcq"


class Difficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class Flashcard(BaseModel):
    """Flashcard as generated, edited, persisted and exported.

    ``id`` stays empty until the card has been saved; the database assigns it.
    """

    model_config = ConfigDict(from_attributes=True, use_enum_values=True, validate_default=True)

    id: Optional[UUID] = None
    front: str
    back: str = ""
    type: FlashcardType = FlashcardType.BASIC
    difficulty: Difficulty = Difficulty.MEDIUM
    tags: Optional[List[str]] = None
    category: Optional[str] = None
    source: Optional[str] = None
    session_id: Optional[UUID] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class GeneratedFlashcard(BaseModel):
    """Card shape requested from the LLM. Normalized into ``Flashcard`` by the generator."""

    front: str = ""
    back: Optional[str] = None
    difficulty: Optional[str] = None
    category: Optional[str] = None
    tags: Optional[List[str]] = None
    explanation: Optional[str] = None
    examples: List[str] = Field(default_factory=list)
    source: Optional[str] = None
