from typing import List, Optional
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from src.config import AISettings, Settings, YouTubeSettings
from src.db.interfaces.postgresql import PostgreSQLDatabase
from src.dependencies import get_ai_client, get_youtube_client
from src.schemas.ai import AIProvider
from src.services.ai.client import AIClient
from src.services.ai.config import AIConfigResolver, InMemoryPreferenceStore
from src.services.youtube import YouTubeTranscriptClient


class FakeProvider:
    """Stands in for a provider adapter; records every call it receives."""

    def __init__(self, responses: Optional[List[str]] = None, error: Optional[Exception] = None):
        self.responses = list(responses or [])
        self.error = error
        self.calls = []

    def send(self, config, prompt, system_prompt):
        self.calls.append({"config": config, "prompt": prompt, "system_prompt": system_prompt})
        if self.error is not None:
            raise self.error
        if self.responses:
            return self.responses.pop(0)
        return "ok"

    def transcribe(self, config, audio, mime_type, instruction):
        self.calls.append({"config": config, "audio": audio, "mime_type": mime_type, "instruction": instruction})
        if self.error is not None:
            raise self.error
        if self.responses:
            return self.responses.pop(0)
        return "transcript"


@pytest.fixture
def ai_settings():
    return AISettings()


@pytest.fixture
def store():
    return InMemoryPreferenceStore()


@pytest.fixture
def resolver(store):
    return AIConfigResolver(store)


@pytest.fixture
def providers():
    return {provider: FakeProvider() for provider in AIProvider}


@pytest.fixture
def ai_client(resolver, providers, ai_settings):
    return AIClient(resolver=resolver, providers=providers, settings=ai_settings)


@pytest.fixture
def youtube_api():
    """Stands in for youtube_transcript_api.YouTubeTranscriptApi."""
    return MagicMock()


@pytest.fixture
def youtube(youtube_api):
    http = MagicMock()
    http.get.return_value.ok = False
    return YouTubeTranscriptClient(YouTubeSettings(), http=http, transcript_api=youtube_api)


@pytest.fixture
def database():
    db = PostgreSQLDatabase("sqlite://")
    db.startup()
    yield db
    db.teardown()


@pytest.fixture
def db_session(database):
    with database.get_session() as session:
        yield session


@pytest.fixture
def client(database, store, ai_client, youtube, tmp_path):
    from src.main import app

    app.state.settings = Settings(
        postgres_database_url="sqlite://",
        preferences_path=str(tmp_path / "preferences.json"),
    )
    app.state.database = database
    app.state.preference_store = store
    app.dependency_overrides[get_ai_client] = lambda: ai_client
    app.dependency_overrides[get_youtube_client] = lambda: youtube

    yield TestClient(app)

    app.dependency_overrides.clear()
