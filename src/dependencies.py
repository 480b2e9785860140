from typing import Annotated, Dict, Generator

from fastapi import Depends, Request
from sqlalchemy.orm import Session
from src.config import Settings
from src.db.interfaces.postgresql import PostgreSQLDatabase
from src.repositories.flashcards import FlashcardsRepository
from src.repositories.sessions import SessionRepository
from src.schemas.ai import AIProvider
from src.services.ai.client import AIClient
from src.services.ai.config import AIConfigResolver, PreferenceStore
from src.services.ai.factory import make_ai_client
from src.services.ai.providers import BaseProvider
from src.services.generation import StudyGenerator
from src.services.notifications import CollectingNotifier
from src.services.sessions import SessionService
from src.services.youtube import YouTubeTranscriptClient


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_database(request: Request) -> PostgreSQLDatabase:
    return request.app.state.database


def get_db_session(database: Annotated[PostgreSQLDatabase, Depends(get_database)]) -> Generator[Session, None, None]:
    with database.get_session() as session:
        yield session


def get_preference_store(request: Request) -> PreferenceStore:
    return request.app.state.preference_store


def get_providers(request: Request) -> Dict[AIProvider, BaseProvider]:
    return request.app.state.providers


def get_ai_client(
    store: Annotated[PreferenceStore, Depends(get_preference_store)],
    providers: Annotated[Dict[AIProvider, BaseProvider], Depends(get_providers)],
) -> AIClient:
    return make_ai_client(store, providers)


def get_youtube_client(request: Request) -> YouTubeTranscriptClient:
    return request.app.state.youtube


def get_config_resolver(client: Annotated[AIClient, Depends(get_ai_client)]) -> AIConfigResolver:
    return client.resolver


def get_generator(client: Annotated[AIClient, Depends(get_ai_client)]) -> StudyGenerator:
    return StudyGenerator(client)


def get_notifier() -> CollectingNotifier:
    return CollectingNotifier()


def get_session_service(
    session: Annotated[Session, Depends(get_db_session)],
    notifier: Annotated[CollectingNotifier, Depends(get_notifier)],
) -> SessionService:
    return SessionService(SessionRepository(session), FlashcardsRepository(session), notifier)


SettingsDep = Annotated[Settings, Depends(get_settings)]
DatabaseDep = Annotated[PostgreSQLDatabase, Depends(get_database)]
SessionDep = Annotated[Session, Depends(get_db_session)]
PreferenceStoreDep = Annotated[PreferenceStore, Depends(get_preference_store)]
AIClientDep = Annotated[AIClient, Depends(get_ai_client)]
ResolverDep = Annotated[AIConfigResolver, Depends(get_config_resolver)]
GeneratorDep = Annotated[StudyGenerator, Depends(get_generator)]
NotifierDep = Annotated[CollectingNotifier, Depends(get_notifier)]
SessionServiceDep = Annotated[SessionService, Depends(get_session_service)]
YouTubeDep = Annotated[YouTubeTranscriptClient, Depends(get_youtube_client)]
