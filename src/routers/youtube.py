from fastapi import APIRouter

from src.dependencies import YouTubeDep
from src.exceptions import StudyCardsError
from src.routers.ai import to_http_exception
from src.schemas.api.sessions import YouTubeRequest
from src.services.youtube import YouTubeTranscript

router = APIRouter(prefix="/youtube", tags=["youtube"])


@router.post("/transcript", response_model=YouTubeTranscript)
def fetch_transcript(request: YouTubeRequest, youtube: YouTubeDep):
    """Captions of a video, preferring Arabic, with its title."""
    try:
        return youtube.fetch(request.url)
    except StudyCardsError as e:
        raise to_http_exception(e)
