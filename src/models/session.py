import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Integer, String, Text, Uuid
from sqlalchemy.orm import relationship
from src.db.interfaces.postgresql import Base


class StudySession(Base):
    __tablename__ = "sessions"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    title = Column(String(512), nullable=False)
    source_type = Column(String(32), nullable=False, index=True)
    source_url = Column(String, nullable=True)

    # Ingested content
    transcript = Column(Text, nullable=True)
    summary = Column(Text, nullable=True)

    # created -> transcribed -> summarized
    status = Column(String(32), nullable=False, default="created")
    card_count = Column(Integer, nullable=False, default=0)

    # Timestamps
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at = Column(DateTime(timezone=True), default=lambda: datetime.now(
        timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    flashcards = relationship("FlashcardModel", back_populates="session", order_by="FlashcardModel.created_at")
