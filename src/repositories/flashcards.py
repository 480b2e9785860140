from datetime import datetime, timezone
from typing import List, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session
from src.exceptions import PersistenceError
from src.models.flashcard import FlashcardModel
from src.models.session import StudySession
from src.schemas.flashcards import Flashcard, FlashcardType


class FlashcardsRepository:
    """Data access layer for flashcards."""

    def __init__(self, session: Session):
        self.session = session

    def get_by_id(self, card_id: UUID) -> Optional[FlashcardModel]:
        stmt = select(FlashcardModel).where(FlashcardModel.id == card_id)
        return self.session.scalar(stmt)

    def list_for_session(self, session_id: UUID) -> List[FlashcardModel]:
        stmt = (
            select(FlashcardModel)
            .where(FlashcardModel.session_id == session_id)
            .order_by(FlashcardModel.created_at, FlashcardModel.id)
        )
        return list(self.session.scalars(stmt))

    def bulk_create(self, cards: List[Flashcard], session_id: UUID) -> List[FlashcardModel]:
        """Insert all cards for a session and bump its card count in one commit."""
        study_session = self.session.get(StudySession, session_id)
        if study_session is None:
            raise PersistenceError(f"Session {session_id} not found")

        now = datetime.now(timezone.utc)
        rows = [
            FlashcardModel(
                session_id=session_id,
                front=card.front,
                back=card.back,
                type=card.type or FlashcardType.BASIC.value,
                difficulty=card.difficulty,
                tags=list(card.tags or []),
                category=card.category,
                source=card.source,
                created_at=now,
                updated_at=now,
            )
            for card in cards
        ]
        self.session.add_all(rows)
        study_session.card_count = (study_session.card_count or 0) + len(rows)
        self.session.commit()
        for row in rows:
            self.session.refresh(row)
        return rows

    def update(self, card: Flashcard) -> FlashcardModel:
        """Full-record update by id."""
        if card.id is None:
            raise PersistenceError("Cannot update a flashcard without an id")
        row = self.get_by_id(card.id)
        if row is None:
            raise PersistenceError(f"Flashcard {card.id} not found")

        row.front = card.front
        row.back = card.back
        row.difficulty = card.difficulty
        row.type = card.type
        row.tags = list(card.tags) if card.tags is not None else None
        row.category = card.category
        row.source = card.source
        row.updated_at = datetime.now(timezone.utc)
        self.session.commit()
        self.session.refresh(row)
        return row
