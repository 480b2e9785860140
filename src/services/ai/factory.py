from functools import lru_cache
from typing import Dict, Optional

import requests
from src.config import get_settings
from src.schemas.ai import AIProvider
from src.services.ai.client import AIClient
from src.services.ai.config import AIConfigResolver, FilePreferenceStore, PreferenceStore
from src.services.ai.providers import BaseProvider, make_providers


@lru_cache(maxsize=1)
def make_preference_store() -> FilePreferenceStore:
    """
    Singleton file-backed preference store, consistent with
    other service factories in the codebase.
    """
    settings = get_settings()
    return FilePreferenceStore(settings.preferences_path)


def make_provider_registry(http: Optional[requests.Session] = None) -> Dict[AIProvider, BaseProvider]:
    """
    Build the provider adapters once per process; they share one HTTP session.

    Returns:
        Dict[AIProvider, BaseProvider]: Adapter per provider
    """
    settings = get_settings()
    return make_providers(settings.ai, http=http or requests.Session())


def make_ai_client(store: PreferenceStore, providers: Dict[AIProvider, BaseProvider]) -> AIClient:
    """
    Bind the shared adapters to the given preference store.

    Returns:
        AIClient: Configured dispatcher
    """
    settings = get_settings()
    resolver = AIConfigResolver(store, default_provider=settings.ai.default_provider)
    return AIClient(resolver=resolver, providers=providers, settings=settings.ai)
