import uuid
from datetime import datetime, timezone

from sqlalchemy import JSON, Column, DateTime, ForeignKey, String, Text, Uuid
from sqlalchemy.orm import relationship
from src.db.interfaces.postgresql import Base


class FlashcardModel(Base):
    __tablename__ = "flashcards"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    session_id = Column(Uuid(as_uuid=True), ForeignKey("sessions.id"), nullable=True, index=True)

    front = Column(Text, nullable=False)
    back = Column(Text, nullable=True)
    type = Column(String(16), nullable=False, default="basic")
    difficulty = Column(String(16), nullable=True)
    tags = Column(JSON, nullable=True)
    category = Column(String(255), nullable=True)
    source = Column(String(255), nullable=True)

    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at = Column(DateTime(timezone=True), default=lambda: datetime.now(
        timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    session = relationship("StudySession", back_populates="flashcards")
