from src.models.flashcard import FlashcardModel
from src.models.session import StudySession

__all__ = ["FlashcardModel", "StudySession"]
