import logging
from typing import List, Literal, Optional
from uuid import UUID

from fastapi import APIRouter, HTTPException, Query, status

from src.dependencies import AIClientDep, GeneratorDep, NotifierDep, SessionServiceDep, SettingsDep, YouTubeDep
from src.exceptions import StudyCardsError
from src.routers.ai import to_http_exception
from src.routers.export import download_response
from src.schemas.api.sessions import (
    SaveFlashcardsRequest,
    SavedFlashcardsResponse,
    SessionListResponse,
    SessionResponse,
    SessionTranscriptionRequest,
    SummaryUpdate,
    TranscriptUpdate,
    UpdateResult,
    YouTubeRequest,
)
from src.schemas.flashcards import Flashcard
from src.schemas.sessions import SessionCreate, SessionRecord
from src.services.export import export_to_anki, export_to_anki_json
from src.services.notifications import CollectingNotifier
from src.services.sessions import SessionService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/sessions", tags=["sessions"])


def persistence_failure(notifier: CollectingNotifier, message: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail={
            "message": message,
            "notifications": [n.model_dump() for n in notifier.notifications],
        },
    )


def require_session(service: SessionService, session_id: UUID) -> SessionRecord:
    record = service.get_session(session_id)
    if record is None:
        if service.notifier.has_errors:
            raise persistence_failure(service.notifier, f"Session {session_id} could not be loaded")
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Session {session_id} not found",
        )
    return record


def require_flashcards(service: SessionService, session_id: UUID) -> List[Flashcard]:
    cards = service.list_flashcards(session_id)
    if cards is None:
        raise persistence_failure(service.notifier, f"Flashcards of session {session_id} could not be loaded")
    return cards


@router.post("", response_model=SessionResponse, status_code=status.HTTP_201_CREATED)
def create_session(meta: SessionCreate, service: SessionServiceDep, notifier: NotifierDep):
    """Record a newly ingested audio file, document or YouTube video."""
    session_id = service.create_session(meta)
    if session_id is None:
        raise persistence_failure(notifier, "Session could not be created")
    return SessionResponse(session=require_session(service, session_id), notifications=notifier.notifications)


@router.get("", response_model=SessionListResponse)
def list_sessions(
    service: SessionServiceDep,
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
):
    """Most recent sessions first."""
    records = service.list_sessions(limit=limit, offset=offset)
    if records is None:
        raise persistence_failure(service.notifier, "Sessions could not be loaded")
    return SessionListResponse(sessions=records, count=len(records))


@router.post("/youtube", response_model=SessionResponse, status_code=status.HTTP_201_CREATED)
def create_youtube_session(
    request: YouTubeRequest,
    youtube: YouTubeDep,
    generator: GeneratorDep,
    service: SessionServiceDep,
    notifier: NotifierDep,
):
    """Fetch a video's captions, summarize them and store the result as a session."""
    try:
        video = youtube.fetch(request.url)
        result = generator.summarize(video.transcript)
    except StudyCardsError as e:
        raise to_http_exception(e)

    session_id = service.create_youtube_session(video.title, video.url, video.transcript, result.summary)
    if session_id is None:
        raise persistence_failure(notifier, "Session could not be created")
    return SessionResponse(session=require_session(service, session_id), notifications=notifier.notifications)


@router.get("/{session_id}", response_model=SessionRecord)
def get_session(session_id: UUID, service: SessionServiceDep):
    return require_session(service, session_id)


@router.put("/{session_id}/transcript", response_model=UpdateResult)
def update_transcript(session_id: UUID, update: TranscriptUpdate, service: SessionServiceDep, notifier: NotifierDep):
    require_session(service, session_id)
    if not service.update_session_transcript(session_id, update.transcript):
        raise persistence_failure(notifier, "Transcript could not be saved")
    return UpdateResult(
        updated=True,
        notifications=notifier.notifications,
        session=service.get_session(session_id),
    )


@router.post("/{session_id}/transcribe", response_model=UpdateResult)
def transcribe_session(
    session_id: UUID,
    request: SessionTranscriptionRequest,
    client: AIClientDep,
    service: SessionServiceDep,
    notifier: NotifierDep,
):
    """Transcribe the session's audio and store the text as its transcript."""
    require_session(service, session_id)
    try:
        transcript = client.transcribe_audio(request.audio, request.mime_type)
    except StudyCardsError as e:
        raise to_http_exception(e)

    if not service.update_session_transcript(session_id, transcript):
        raise persistence_failure(notifier, "Transcript could not be saved")
    return UpdateResult(
        updated=True,
        notifications=notifier.notifications,
        session=service.get_session(session_id),
    )


@router.put("/{session_id}/summary", response_model=UpdateResult)
def update_summary(session_id: UUID, update: SummaryUpdate, service: SessionServiceDep, notifier: NotifierDep):
    require_session(service, session_id)
    if not service.update_session_summary(session_id, update.summary):
        raise persistence_failure(notifier, "Summary could not be saved")
    return UpdateResult(
        updated=True,
        notifications=notifier.notifications,
        session=service.get_session(session_id),
    )


@router.post(
    "/{session_id}/flashcards",
    response_model=SavedFlashcardsResponse,
    status_code=status.HTTP_201_CREATED,
)
def save_flashcards(
    session_id: UUID,
    request: SaveFlashcardsRequest,
    service: SessionServiceDep,
    notifier: NotifierDep,
):
    """Attach a batch of cards to a session in one transaction."""
    require_session(service, session_id)
    saved = service.save_flashcards(request.cards, session_id)
    if saved is None:
        raise persistence_failure(notifier, "Flashcards could not be saved")
    return SavedFlashcardsResponse(session_id=str(session_id), cards=saved, notifications=notifier.notifications)


@router.get("/{session_id}/flashcards", response_model=List[Flashcard])
def list_flashcards(session_id: UUID, service: SessionServiceDep):
    require_session(service, session_id)
    return require_flashcards(service, session_id)


@router.get("/{session_id}/export")
def export_session(
    session_id: UUID,
    service: SessionServiceDep,
    settings: SettingsDep,
    format: Literal["csv", "json"] = Query("csv", description="csv (Anki import) or json"),
    deck_name: Optional[str] = Query(None, description="Defaults to the session title"),
):
    """Download a session's saved cards as an Anki deck."""
    record = require_session(service, session_id)
    cards = require_flashcards(service, session_id)
    deck = deck_name or record.title
    if format == "json":
        export = export_to_anki_json(
            cards,
            deck,
            default_tag=settings.export.default_tag,
            source_label=settings.export.source_label,
        )
    else:
        export = export_to_anki(cards, deck, default_tag=settings.export.default_tag)
    return download_response(export)
