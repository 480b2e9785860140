"""Caption retrieval for YouTube videos."""

import logging
import re
from typing import Any, Optional

import requests
from pydantic import BaseModel
from youtube_transcript_api import CouldNotRetrieveTranscript, YouTubeTranscriptApi

from src.config import YouTubeSettings
from src.exceptions import TranscriptUnavailableError, ValidationError, YouTubeError

logger = logging.getLogger(__name__)

VIDEO_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]{11}$")
VIDEO_URL_PATTERN = re.compile(r"(?:[?&]v=|/(?:embed|shorts|live|v)/|youtu\.be/)([A-Za-z0-9_-]{11})")


class YouTubeTranscript(BaseModel):
    video_id: str
    url: str
    title: str
    language: str
    transcript: str


def extract_video_id(value: str) -> str:
    """Accepts a bare video id or any common watch/share/embed URL."""
    value = (value or "").strip()
    if VIDEO_ID_PATTERN.match(value):
        return value
    match = VIDEO_URL_PATTERN.search(value)
    if not match:
        raise ValidationError(f"Not a YouTube video URL or id: {value!r}")
    return match.group(1)


def watch_url(video_id: str) -> str:
    return f"https://www.youtube.com/watch?v={video_id}"


class YouTubeTranscriptClient:
    """Fetches a video's captions, preferring the configured languages."""

    def __init__(
        self,
        settings: YouTubeSettings,
        http: Optional[requests.Session] = None,
        transcript_api: Optional[Any] = None,
    ):
        self.settings = settings
        self.http = http or requests.Session()
        self.transcript_api = transcript_api or YouTubeTranscriptApi(http_client=self.http)

    def fetch(self, video: str) -> YouTubeTranscript:
        video_id = extract_video_id(video)
        language, text = self._captions(video_id)
        if not text:
            raise TranscriptUnavailableError(f"The captions of video {video_id} are empty")

        logger.info(f"Fetched {len(text)} characters of '{language}' captions for video {video_id}")
        return YouTubeTranscript(
            video_id=video_id,
            url=watch_url(video_id),
            title=self.fetch_title(video_id),
            language=language,
            transcript=text,
        )

    def _captions(self, video_id: str) -> tuple[str, str]:
        try:
            transcripts = list(self.transcript_api.list(video_id))
            chosen = self._pick(transcripts)
            if chosen is None:
                raise TranscriptUnavailableError(f"No captions found for video {video_id}")
            snippets = chosen.fetch()
        except CouldNotRetrieveTranscript as e:
            logger.warning(f"No transcript for video {video_id}: {type(e).__name__}")
            raise TranscriptUnavailableError(
                f"No captions found for video {video_id}. The creator may have disabled them."
            ) from e
        except requests.RequestException as e:
            raise YouTubeError(f"Could not reach YouTube for video {video_id}") from e

        text = " ".join(snippet.text.strip() for snippet in snippets if snippet.text and snippet.text.strip())
        return chosen.language_code, text

    def _pick(self, transcripts: list) -> Optional[Any]:
        for language in self.settings.preferred_languages:
            for transcript in transcripts:
                if transcript.language_code == language:
                    return transcript
        return transcripts[0] if transcripts else None

    def fetch_title(self, video_id: str) -> str:
        """Video title from the oEmbed endpoint; a placeholder when it is unavailable."""
        try:
            response = self.http.get(
                self.settings.oembed_url,
                params={"url": watch_url(video_id)},
                timeout=self.settings.timeout,
            )
            data = response.json() if response.ok else {}
        except (requests.RequestException, ValueError) as e:
            logger.warning(f"Could not fetch the title of video {video_id}: {type(e).__name__}")
            data = {}
        title = data.get("title") if isinstance(data, dict) else None
        return title or self.settings.unknown_title
