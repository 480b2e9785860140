"""Persistence of ingested sessions and their flashcards.

Every operation reports its outcome to the notifier and returns a sentinel
(``None``/``False``) on failure instead of raising. Nothing is retried and
multi-step flows are not compensated: a session created before a failed
flashcard insert stays behind with zero cards.
"""

import logging
from typing import List, Optional
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError

from src.exceptions import PersistenceError
from src.repositories.flashcards import FlashcardsRepository
from src.repositories.sessions import SessionRepository
from src.schemas.flashcards import Flashcard
from src.schemas.sessions import SessionCreate, SessionRecord, SessionStatus, SourceType
from src.services.notifications import Notifier

logger = logging.getLogger(__name__)

PERSISTENCE_ERRORS = (SQLAlchemyError, PersistenceError)


class SessionService:
    def __init__(self, sessions: SessionRepository, flashcards: FlashcardsRepository, notifier: Notifier):
        self.sessions = sessions
        self.flashcards = flashcards
        self.notifier = notifier

    def _rollback(self) -> None:
        try:
            self.sessions.session.rollback()
        except SQLAlchemyError as e:
            logger.error(f"Rollback failed: {e}")

    def _read_failed(self, what: str, error: SQLAlchemyError, message: str) -> None:
        self._rollback()
        logger.error(f"Error loading {what}: {error}")
        self.notifier.error(message)

    def create_session(self, meta: SessionCreate) -> Optional[UUID]:
        try:
            db_session = self.sessions.create(meta)
        except PERSISTENCE_ERRORS as e:
            self._rollback()
            logger.error(f"Error creating session '{meta.title}': {e}")
            self.notifier.error(f"Failed to create a session for {meta.source_type.value} content.")
            return None

        self.notifier.success(f"Session created: {meta.title}")
        return db_session.id

    def create_file_session(self, file_name: str) -> Optional[UUID]:
        return self.create_session(SessionCreate(title=file_name, source_type=SourceType.AUDIO))

    def create_document_session(self, content: str, name: str) -> Optional[UUID]:
        return self.create_session(
            SessionCreate(
                title=name,
                source_type=SourceType.DOCUMENT,
                transcript=content,
                status=SessionStatus.TRANSCRIBED,
            )
        )

    def create_youtube_session(self, title: str, url: str, transcript: str, summary: str) -> Optional[UUID]:
        return self.create_session(
            SessionCreate(
                title=title,
                source_type=SourceType.YOUTUBE,
                source_url=url,
                transcript=transcript,
                summary=summary,
                status=SessionStatus.SUMMARIZED,
            )
        )

    def get_session(self, session_id: UUID) -> Optional[SessionRecord]:
        """The session, or ``None`` when it does not exist or could not be read."""
        try:
            db_session = self.sessions.get_by_id(session_id)
        except SQLAlchemyError as e:
            self._read_failed(f"session {session_id}", e, "Failed to load the session.")
            return None
        return SessionRecord.model_validate(db_session) if db_session else None

    def list_sessions(self, limit: int = 50, offset: int = 0) -> Optional[List[SessionRecord]]:
        try:
            rows = self.sessions.get_all(limit=limit, offset=offset)
        except SQLAlchemyError as e:
            self._read_failed("sessions", e, "Failed to load the sessions.")
            return None
        return [SessionRecord.model_validate(row) for row in rows]

    def update_session_transcript(self, session_id: UUID, transcript: str) -> bool:
        try:
            self.sessions.update_transcript(session_id, transcript)
        except PERSISTENCE_ERRORS as e:
            self._rollback()
            logger.error(f"Error updating session {session_id} with transcript: {e}")
            self.notifier.error("Failed to save the transcript.")
            return False

        self.notifier.success("Transcript saved to the session.")
        return True

    def update_session_summary(self, session_id: UUID, summary: str) -> bool:
        try:
            self.sessions.update_summary(session_id, summary)
        except PERSISTENCE_ERRORS as e:
            self._rollback()
            logger.error(f"Error updating session {session_id} with summary: {e}")
            self.notifier.error("Failed to save the summary.")
            return False

        self.notifier.success("Summary saved to the session.")
        return True

    def save_flashcards(self, cards: List[Flashcard], session_id: UUID) -> Optional[List[Flashcard]]:
        try:
            rows = self.flashcards.bulk_create(cards, session_id)
        except PERSISTENCE_ERRORS as e:
            self._rollback()
            logger.error(f"Error saving {len(cards)} flashcards for session {session_id}: {e}")
            self.notifier.error("An error occurred while saving the flashcards.")
            return None

        self.notifier.success(f"Created and saved {len(rows)} flashcards!")
        return [Flashcard.model_validate(row) for row in rows]

    def update_flashcard(self, card: Flashcard) -> bool:
        try:
            self.flashcards.update(card)
        except PERSISTENCE_ERRORS as e:
            self._rollback()
            logger.error(f"Error updating flashcard {card.id}: {e}")
            self.notifier.error("Failed to update the flashcard.")
            return False

        self.notifier.success("Flashcard updated successfully!")
        return True

    def get_flashcard(self, card_id: UUID) -> Optional[Flashcard]:
        try:
            row = self.flashcards.get_by_id(card_id)
        except SQLAlchemyError as e:
            self._read_failed(f"flashcard {card_id}", e, "Failed to load the flashcard.")
            return None
        return Flashcard.model_validate(row) if row else None

    def list_flashcards(self, session_id: UUID) -> Optional[List[Flashcard]]:
        try:
            rows = self.flashcards.list_for_session(session_id)
        except SQLAlchemyError as e:
            self._read_failed(f"flashcards of session {session_id}", e, "Failed to load the flashcards.")
            return None
        return [Flashcard.model_validate(row) for row in rows]
