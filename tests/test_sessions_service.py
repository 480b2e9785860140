import uuid
from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import OperationalError

from src.models.flashcard import FlashcardModel
from src.repositories.flashcards import FlashcardsRepository
from src.repositories.sessions import SessionRepository
from src.schemas.flashcards import Flashcard
from src.services.notifications import CollectingNotifier
from src.services.sessions import SessionService


@pytest.fixture
def notifier():
    return CollectingNotifier()


@pytest.fixture
def service(db_session, notifier):
    return SessionService(SessionRepository(db_session), FlashcardsRepository(db_session), notifier)


def make_cards(count):
    return [
        Flashcard(front=f"Question {i}", back=f"Answer {i}", tags=["biology"], difficulty="easy")
        for i in range(count)
    ]


@pytest.mark.integration
class TestSessionCreation:
    def test_file_session(self, service, notifier):
        session_id = service.create_file_session("lecture-01.mp3")

        record = service.get_session(session_id)
        assert record.title == "lecture-01.mp3"
        assert record.source_type == "audio"
        assert record.status == "created"
        assert record.card_count == 0
        assert notifier.notifications[-1].level == "success"

    def test_document_session_is_transcribed(self, service):
        session_id = service.create_document_session("Chapter 3 text", "chapter3.pdf")

        record = service.get_session(session_id)
        assert record.source_type == "document"
        assert record.status == "transcribed"
        assert record.transcript == "Chapter 3 text"

    def test_youtube_session_is_summarized(self, service):
        session_id = service.create_youtube_session(
            "Intro to Physics", "https://youtube.com/watch?v=abc", "transcript", "summary"
        )

        record = service.get_session(session_id)
        assert record.source_type == "youtube"
        assert record.status == "summarized"
        assert record.source_url == "https://youtube.com/watch?v=abc"
        assert record.summary == "summary"

    def test_backend_failure_returns_none_and_notifies(self, service, notifier):
        service.sessions.create = MagicMock(side_effect=OperationalError("INSERT", {}, Exception("db down")))

        assert service.create_file_session("lecture.mp3") is None
        assert notifier.has_errors
        assert notifier.notifications[-1].message == "Failed to create a session for audio content."


@pytest.mark.integration
class TestSessionUpdates:
    def test_transcript_update_is_idempotent(self, service):
        session_id = service.create_file_session("lecture.mp3")

        assert service.update_session_transcript(session_id, "same text") is True
        assert service.update_session_transcript(session_id, "same text") is True

        record = service.get_session(session_id)
        assert record.transcript == "same text"
        assert record.status == "transcribed"

    def test_summary_update(self, service):
        session_id = service.create_document_session("text", "notes.txt")

        assert service.update_session_summary(session_id, "short summary") is True
        assert service.get_session(session_id).status == "summarized"

    def test_missing_session(self, service, notifier):
        assert service.update_session_transcript(uuid.uuid4(), "text") is False
        assert notifier.notifications[-1].message == "Failed to save the transcript."


@pytest.mark.integration
class TestSaveFlashcards:
    def test_cards_are_saved_with_ids(self, service, notifier, db_session):
        session_id = service.create_document_session("text", "notes.txt")

        saved = service.save_flashcards(make_cards(3), session_id)

        assert len(saved) == 3
        assert all(card.id is not None for card in saved)
        assert all(card.session_id == session_id for card in saved)
        assert {card.front for card in saved} == {"Question 0", "Question 1", "Question 2"}
        assert service.get_session(session_id).card_count == 3
        assert notifier.notifications[-1].message == "Created and saved 3 flashcards!"
        assert {card.front for card in service.list_flashcards(session_id)} == {c.front for c in saved}

    def test_unknown_session_saves_nothing(self, service, notifier, db_session):
        assert service.save_flashcards(make_cards(2), uuid.uuid4()) is None

        assert notifier.has_errors
        assert db_session.query(FlashcardModel).count() == 0

    def test_failed_insert_leaves_session_behind(self, service, db_session):
        session_id = service.create_document_session("text", "notes.txt")
        service.flashcards.bulk_create = MagicMock(side_effect=OperationalError("INSERT", {}, Exception("db down")))

        assert service.save_flashcards(make_cards(2), session_id) is None

        record = service.get_session(session_id)
        assert record is not None
        assert record.card_count == 0


@pytest.mark.integration
class TestUpdateFlashcard:
    def test_update(self, service):
        session_id = service.create_document_session("text", "notes.txt")
        card = service.save_flashcards(make_cards(1), session_id)[0]

        edited = card.model_copy(update={"front": "Edited question", "difficulty": "hard", "tags": None})
        assert service.update_flashcard(edited) is True

        stored = service.get_flashcard(card.id)
        assert stored.front == "Edited question"
        assert stored.difficulty == "hard"
        assert stored.tags is None

    def test_unknown_card(self, service, notifier):
        assert service.update_flashcard(Flashcard(id=uuid.uuid4(), front="Q")) is False
        assert notifier.notifications[-1].message == "Failed to update the flashcard."

    def test_card_without_id(self, service):
        assert service.update_flashcard(Flashcard(front="Q")) is False


def db_down(statement="SELECT"):
    return MagicMock(side_effect=OperationalError(statement, {}, Exception("db down")))


@pytest.mark.integration
class TestSessionReads:
    def test_list_sessions_pages(self, service):
        for name in ("a.pdf", "b.pdf", "c.pdf"):
            service.create_document_session("text", name)

        assert {record.title for record in service.list_sessions()} == {"a.pdf", "b.pdf", "c.pdf"}
        assert len(service.list_sessions(limit=2)) == 2
        assert len(service.list_sessions(limit=2, offset=2)) == 1

    def test_unknown_session_is_not_an_error(self, service, notifier):
        assert service.get_session(uuid.uuid4()) is None
        assert not notifier.has_errors

    def test_session_read_failure_notifies(self, service, notifier):
        service.sessions.get_by_id = db_down()

        assert service.get_session(uuid.uuid4()) is None
        assert notifier.has_errors
        assert notifier.notifications[-1].message == "Failed to load the session."

    def test_session_list_failure_notifies(self, service, notifier):
        service.sessions.get_all = db_down()

        assert service.list_sessions() is None
        assert notifier.notifications[-1].message == "Failed to load the sessions."

    def test_flashcard_read_failure_notifies(self, service, notifier):
        service.flashcards.get_by_id = db_down()

        assert service.get_flashcard(uuid.uuid4()) is None
        assert notifier.notifications[-1].message == "Failed to load the flashcard."

    def test_flashcard_list_failure_notifies(self, service, notifier):
        session_id = service.create_document_session("text", "notes.txt")
        service.flashcards.list_for_session = db_down()

        assert service.list_flashcards(session_id) is None
        assert notifier.has_errors
        assert notifier.notifications[-1].message == "Failed to load the flashcards."
