from unittest.mock import MagicMock

import pytest
import requests
from youtube_transcript_api import TranscriptsDisabled

from src.config import YouTubeSettings
from src.exceptions import TranscriptUnavailableError, ValidationError, YouTubeError
from src.services.youtube import YouTubeTranscriptClient, extract_video_id, watch_url

VIDEO_ID = "dQw4w9WgXcQ"


def track(language_code, *lines):
    transcript = MagicMock()
    transcript.language_code = language_code
    transcript.fetch.return_value = [MagicMock(text=line) for line in lines]
    return transcript


def oembed(title=None, ok=True):
    response = MagicMock()
    response.ok = ok
    response.json.return_value = {"title": title} if title else {"error": "no such video"}
    return response


def make_client(tracks=None, error=None, title="Cell biology, lecture 1"):
    api = MagicMock()
    if error is not None:
        api.list.side_effect = error
    else:
        api.list.return_value = tracks or []
    http = MagicMock()
    http.get.return_value = oembed(title)
    return YouTubeTranscriptClient(YouTubeSettings(), http=http, transcript_api=api), api, http


@pytest.mark.unit
@pytest.mark.parametrize(
    "value",
    [
        VIDEO_ID,
        f"https://www.youtube.com/watch?v={VIDEO_ID}",
        f"https://www.youtube.com/watch?feature=share&v={VIDEO_ID}&t=42",
        f"https://youtu.be/{VIDEO_ID}?si=abc",
        f"https://www.youtube.com/embed/{VIDEO_ID}",
        f"https://www.youtube.com/shorts/{VIDEO_ID}",
    ],
)
def test_extract_video_id(value):
    assert extract_video_id(value) == VIDEO_ID


@pytest.mark.unit
@pytest.mark.parametrize("value", ["", "https://example.com/watch", "not a video"])
def test_extract_video_id_rejects_other_input(value):
    with pytest.raises(ValidationError):
        extract_video_id(value)


@pytest.mark.unit
class TestYouTubeTranscriptClient:
    def test_prefers_arabic_track(self):
        client, api, _ = make_client([track("en", "Hello"), track("ar", "مرحبا", "بكم")])

        result = client.fetch(f"https://youtu.be/{VIDEO_ID}")

        assert result.language == "ar"
        assert result.transcript == "مرحبا بكم"
        assert result.video_id == VIDEO_ID
        assert result.url == watch_url(VIDEO_ID)
        assert result.title == "Cell biology, lecture 1"
        api.list.assert_called_once_with(VIDEO_ID)

    def test_falls_back_to_first_track(self):
        client, _, _ = make_client([track("en", "Tom & Jerry", " explained "), track("fr", "Bonjour")])

        result = client.fetch(VIDEO_ID)

        assert result.language == "en"
        assert result.transcript == "Tom & Jerry explained"

    def test_disabled_captions(self):
        client, _, _ = make_client(error=TranscriptsDisabled(VIDEO_ID))

        with pytest.raises(TranscriptUnavailableError, match="No captions found"):
            client.fetch(VIDEO_ID)

    def test_no_tracks(self):
        client, _, _ = make_client([])

        with pytest.raises(TranscriptUnavailableError):
            client.fetch(VIDEO_ID)

    def test_blank_captions(self):
        client, _, _ = make_client([track("ar", " ", "")])

        with pytest.raises(TranscriptUnavailableError, match="empty"):
            client.fetch(VIDEO_ID)

    def test_network_failure(self):
        client, _, _ = make_client(error=requests.ConnectionError("offline"))

        with pytest.raises(YouTubeError) as exc:
            client.fetch(VIDEO_ID)
        assert not isinstance(exc.value, TranscriptUnavailableError)

    def test_title_lookup(self):
        client, _, http = make_client(title="Photosynthesis")

        assert client.fetch_title(VIDEO_ID) == "Photosynthesis"
        assert http.get.call_args.kwargs["params"] == {"url": watch_url(VIDEO_ID)}

    def test_title_falls_back_when_missing(self):
        client, _, http = make_client(title=None)

        assert client.fetch_title(VIDEO_ID) == "Unknown title"

        http.get.side_effect = requests.Timeout("slow")
        assert client.fetch_title(VIDEO_ID) == "Unknown title"
