import logging
from contextlib import asynccontextmanager

import requests
import uvicorn
from fastapi import FastAPI
from src.config import get_settings
from src.db.factory import make_database
from src.middlewares import logging_middleware
from src.routers import ai, export, flashcards, ping, sessions, settings, youtube
from src.services.ai.factory import make_preference_store, make_provider_registry
from src.services.ai.providers import close_providers
from src.services.youtube import YouTubeTranscriptClient

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan for the API.
    """
    logger.info("Starting StudyCards API...")

    app_settings = get_settings()
    logging.getLogger().setLevel(app_settings.log_level.upper())
    app.state.settings = app_settings

    database = make_database()
    app.state.database = database
    logger.info("Database connected")

    app.state.preference_store = make_preference_store()
    logger.info(f"AI preferences loaded from {app_settings.preferences_path}")

    http = requests.Session()
    app.state.providers = make_provider_registry(http)
    app.state.youtube = YouTubeTranscriptClient(app_settings.youtube, http=http)
    logger.info("Services initialized: AI providers, YouTube captions")

    logger.info("API ready")
    yield

    # Cleanup
    close_providers(app.state.providers)
    http.close()
    database.teardown()
    logger.info("API shutdown complete")


app = FastAPI(
    title="StudyCards",
    description="Turn lectures, documents and videos into summaries and Anki-ready flashcards.",
    version=get_settings().app_version,
    lifespan=lifespan,
)

app.middleware("http")(logging_middleware)

app.include_router(ping.router, prefix="/api/v1")
app.include_router(settings.router, prefix="/api/v1")
app.include_router(ai.router, prefix="/api/v1")
app.include_router(sessions.router, prefix="/api/v1")
app.include_router(flashcards.router, prefix="/api/v1")
app.include_router(export.router, prefix="/api/v1")
app.include_router(youtube.router, prefix="/api/v1")


if __name__ == "__main__":
    uvicorn.run(app, port=8000, host="0.0.0.0")
