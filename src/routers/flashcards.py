import logging
from uuid import UUID

from fastapi import APIRouter, HTTPException, status

from src.dependencies import NotifierDep, SessionServiceDep
from src.routers.sessions import persistence_failure
from src.schemas.api.flashcards import FlashcardUpdate
from src.schemas.api.sessions import UpdateResult
from src.schemas.flashcards import Flashcard
from src.services.sessions import SessionService

router = APIRouter(prefix="/flashcards", tags=["flashcards"])
logger = logging.getLogger(__name__)


def require_flashcard(service: SessionService, card_id: UUID) -> Flashcard:
    card = service.get_flashcard(card_id)
    if card is None:
        if service.notifier.has_errors:
            raise persistence_failure(service.notifier, f"Flashcard {card_id} could not be loaded")
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Flashcard {card_id} not found")
    return card


@router.get("/{card_id}", response_model=Flashcard)
def get_flashcard(card_id: UUID, service: SessionServiceDep):
    return require_flashcard(service, card_id)


@router.put("/{card_id}", response_model=UpdateResult)
def update_flashcard(card_id: UUID, update: FlashcardUpdate, service: SessionServiceDep, notifier: NotifierDep):
    """Replace an edited card's fields."""
    existing = require_flashcard(service, card_id)

    card = Flashcard(id=card_id, session_id=existing.session_id, **update.model_dump())
    if not service.update_flashcard(card):
        logger.error(f"Flashcard {card_id} update failed")
        raise persistence_failure(notifier, "Flashcard could not be updated")
    return UpdateResult(updated=True, notifications=notifier.notifications)
