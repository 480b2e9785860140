from typing import List, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session
from src.exceptions import PersistenceError
from src.models.session import StudySession
from src.schemas.sessions import SessionCreate, SessionStatus


class SessionRepository:
    def __init__(self, session: Session):
        self.session = session

    def create(self, meta: SessionCreate) -> StudySession:
        db_session = StudySession(**meta.model_dump(mode="json"))
        self.session.add(db_session)
        self.session.commit()
        self.session.refresh(db_session)
        return db_session

    def get_by_id(self, session_id: UUID) -> Optional[StudySession]:
        stmt = select(StudySession).where(StudySession.id == session_id)
        return self.session.scalar(stmt)

    def get_all(self, limit: int = 50, offset: int = 0) -> List[StudySession]:
        stmt = select(StudySession).order_by(
            StudySession.created_at.desc()).limit(limit).offset(offset)
        return list(self.session.scalars(stmt))

    def require(self, session_id: UUID) -> StudySession:
        db_session = self.get_by_id(session_id)
        if db_session is None:
            raise PersistenceError(f"Session {session_id} not found")
        return db_session

    def update_transcript(self, session_id: UUID, transcript: str) -> StudySession:
        db_session = self.require(session_id)
        db_session.transcript = transcript
        db_session.status = SessionStatus.TRANSCRIBED.value
        return self.update(db_session)

    def update_summary(self, session_id: UUID, summary: str) -> StudySession:
        db_session = self.require(session_id)
        db_session.summary = summary
        db_session.status = SessionStatus.SUMMARIZED.value
        return self.update(db_session)

    def update(self, db_session: StudySession) -> StudySession:
        self.session.add(db_session)
        self.session.commit()
        self.session.refresh(db_session)
        return db_session
