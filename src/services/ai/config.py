import json
import logging
import threading
from pathlib import Path
from typing import Any, Dict, List, Optional, Protocol

from pydantic import ValidationError as PydanticValidationError
from src.schemas.ai import DEFAULT_MODELS, AIProvider, AIProviderConfig, ProviderStatus

logger = logging.getLogger(__name__)

PROVIDER_KEY = "ai_provider"
MODELS_KEY = "ai_models"


def api_key_name(provider: AIProvider) -> str:
    return f"{provider.value}_api_key"


class PreferenceStore(Protocol):
    """Persisted key/value preferences (selected provider, keys, model overrides)."""

    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> None: ...


class InMemoryPreferenceStore:
    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)


class FilePreferenceStore:
    """Preferences kept in a single JSON document on local disk."""

    def __init__(self, path: str | Path):
        self.path = Path(path).expanduser()
        self._lock = threading.Lock()

    def _load(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Ignoring unreadable preferences file {self.path}: {e}")
            return {}
        return data if isinstance(data, dict) else {}

    def _dump(self, data: Dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(".tmp")
        tmp.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")
        tmp.replace(self.path)

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            value = self._load().get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        with self._lock:
            data = self._load()
            data[key] = value
            self._dump(data)

    def delete(self, key: str) -> None:
        with self._lock:
            data = self._load()
            if key in data:
                del data[key]
                self._dump(data)


def mask_key(api_key: str) -> str:
    if len(api_key) <= 8:
        return "*" * len(api_key)
    return f"{api_key[:4]}...{api_key[-4:]}"


class AIConfigResolver:
    """Resolves the active provider configuration from a preference store.

    Pure reads of local state; callers treat ``None`` as "not configured".
    """

    def __init__(self, store: PreferenceStore, default_provider: AIProvider | str = AIProvider.GEMINI):
        self.store = store
        self.default_provider = AIProvider(default_provider)

    def selected_provider(self) -> AIProvider:
        raw = self.store.get(PROVIDER_KEY)
        if not raw:
            return self.default_provider
        try:
            return AIProvider(raw)
        except ValueError:
            logger.warning(f"Unknown stored provider '{raw}', using {self.default_provider.value}")
            return self.default_provider

    def model_overrides(self) -> Dict[str, str]:
        raw = self.store.get(MODELS_KEY)
        if not raw:
            return {}
        try:
            models = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Stored model overrides are not valid JSON, ignoring them")
            return {}
        if not isinstance(models, dict):
            return {}
        return {k: v for k, v in models.items() if isinstance(v, str) and v}

    def model_for(self, provider: AIProvider) -> str:
        return self.model_overrides().get(provider.value) or DEFAULT_MODELS[provider]

    def get_config(self, provider: AIProvider | str | None = None) -> Optional[AIProviderConfig]:
        active = AIProvider(provider) if provider else self.selected_provider()
        api_key = self.store.get(api_key_name(active))
        if not api_key or not api_key.strip():
            return None
        try:
            return AIProviderConfig(provider=active, api_key=api_key, model=self.model_for(active))
        except PydanticValidationError:
            return None

    # Settings surface

    def select_provider(self, provider: AIProvider | str) -> None:
        self.store.set(PROVIDER_KEY, AIProvider(provider).value)

    def set_api_key(self, provider: AIProvider | str, api_key: str) -> None:
        provider = AIProvider(provider)
        api_key = api_key.strip()
        if api_key:
            self.store.set(api_key_name(provider), api_key)
        else:
            self.clear_api_key(provider)

    def clear_api_key(self, provider: AIProvider | str) -> None:
        self.store.delete(api_key_name(AIProvider(provider)))

    def set_model(self, provider: AIProvider | str, model: Optional[str]) -> None:
        provider = AIProvider(provider)
        models: Dict[str, Any] = self.model_overrides()
        if model:
            models[provider.value] = model
        else:
            models.pop(provider.value, None)
        self.store.set(MODELS_KEY, json.dumps(models))

    def describe(self) -> List[ProviderStatus]:
        selected = self.selected_provider()
        statuses = []
        for provider in AIProvider:
            key = self.store.get(api_key_name(provider))
            configured = bool(key and key.strip())
            statuses.append(
                ProviderStatus(
                    provider=provider,
                    configured=configured,
                    masked_key=mask_key(key.strip()) if configured else None,
                    model=self.model_for(provider),
                    selected=provider == selected,
                )
            )
        return statuses
