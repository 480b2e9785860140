from typing import List, Optional

from pydantic import BaseModel, Field
from src.schemas.flashcards import Difficulty, Flashcard, FlashcardType


class FlashcardUpdate(BaseModel):
    """Full replacement of an existing card's editable fields."""

    front: str = Field(..., min_length=1, description="Question / prompt side")
    back: str = Field("", description="Answer side")
    type: FlashcardType = Field(FlashcardType.BASIC, description="basic, cloze or mcq")
    difficulty: Difficulty = Field(Difficulty.MEDIUM, description="easy, medium or hard")
    tags: Optional[List[str]] = Field(None, description="Free-form tags")
    category: Optional[str] = None
    source: Optional[str] = None


class ExportRequest(BaseModel):
    """Cards to render as a downloadable deck."""

    cards: List[Flashcard] = Field(default_factory=list)
    deck_name: Optional[str] = Field(
        None, description="Deck name; also used to derive the file name"
    )
