import logging
from typing import Dict, Optional

from src.config import AISettings
from src.exceptions import ConfigurationError, ProviderError, ValidationError
from src.schemas.ai import DEFAULT_MODELS, AIProvider, AIProviderConfig
from src.services.ai.config import AIConfigResolver
from src.services.ai.providers import BaseProvider, redact

logger = logging.getLogger(__name__)

VALIDATION_PROMPT = "Hello"
VALIDATION_SYSTEM_PROMPT = 'Reply with the single word "yes".'

TRANSCRIPTION_INSTRUCTION = "Transcribe this audio file into text. Reply with the transcribed text only."
# Gemini rejects inline request payloads above 20 MB
MAX_AUDIO_BYTES = 20 * 1024 * 1024


class AIClient:
    """Single entry point for LLM calls across OpenAI, Gemini and Anthropic."""

    def __init__(
        self,
        resolver: AIConfigResolver,
        providers: Dict[AIProvider, BaseProvider],
        settings: AISettings,
    ):
        self.resolver = resolver
        self.providers = providers
        self.settings = settings

    @property
    def default_system_prompt(self) -> str:
        return (
            "You are a smart and helpful assistant. "
            f"Answer in {self.settings.response_language} unless asked otherwise."
        )

    def make_request(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        provider: AIProvider | str | None = None,
        model: Optional[str] = None,
    ) -> str:
        """Send one prompt to the configured provider and return the generated text.

        Raises:
            ConfigurationError: no API key is stored for the resolved provider
            ProviderError: the upstream call failed or its reply was unusable
        """
        config = self.resolver.get_config(provider)
        if config is None:
            target = AIProvider(provider).value if provider else self.resolver.selected_provider().value
            raise ConfigurationError(
                f"No API key configured for {target}. Add one in the AI provider settings."
            )
        if not prompt or not prompt.strip():
            raise ValidationError("Prompt must not be empty")

        if model:
            config = config.model_copy(update={"model": model})
        return self._dispatch(config, prompt, system_prompt or self.default_system_prompt)

    def _dispatch(self, config: AIProviderConfig, prompt: str, system_prompt: str) -> str:
        adapter = self.providers.get(config.provider)
        if adapter is None:
            raise ConfigurationError(f"Provider {config.provider.value} is not available")

        logger.info(f"Making AI request: provider={config.provider.value}, model={config.model}")
        try:
            return adapter.send(config, prompt, system_prompt)
        except ProviderError as e:
            logger.error(
                f"AI request failed: provider={config.provider.value}, model={config.model}: "
                f"{redact(str(e), config.api_key)}"
            )
            raise

    def validate_api_key(self, provider: AIProvider | str, api_key: str, model: Optional[str] = None) -> bool:
        """Check a key with one tiny request. Never raises for upstream failures."""
        provider = AIProvider(provider)
        if not api_key or not api_key.strip():
            return False
        config = AIProviderConfig(
            provider=provider,
            api_key=api_key,
            model=model or DEFAULT_MODELS[provider],
        )
        try:
            self._dispatch(config, VALIDATION_PROMPT, VALIDATION_SYSTEM_PROMPT)
            return True
        except ProviderError as e:
            logger.warning(f"API key validation failed for {provider.value}: {redact(str(e), config.api_key)}")
            return False

    def transcribe_audio(self, audio: bytes, mime_type: str) -> str:
        """Turn an audio recording into text with Gemini's multimodal endpoint.

        Only Gemini accepts inline audio, so its key is required whichever
        provider is selected for text tasks.
        """
        if not audio:
            raise ValidationError("Audio data must not be empty")
        if not mime_type or not mime_type.startswith("audio/"):
            raise ValidationError(f"Unsupported audio type: {mime_type or 'missing'}")
        if len(audio) > MAX_AUDIO_BYTES:
            raise ValidationError(f"Audio too large ({len(audio)} > {MAX_AUDIO_BYTES} bytes)")

        config = self.resolver.get_config(AIProvider.GEMINI)
        if config is None:
            raise ConfigurationError("Audio transcription needs a Gemini API key. Add one in the AI provider settings.")
        adapter = self.providers.get(AIProvider.GEMINI)
        if adapter is None or not hasattr(adapter, "transcribe"):
            raise ConfigurationError("Gemini provider is not available for audio transcription")

        logger.info(f"Transcribing {len(audio)} bytes of {mime_type} with model={config.model}")
        try:
            text = adapter.transcribe(config, audio, mime_type, TRANSCRIPTION_INSTRUCTION)
        except ProviderError as e:
            logger.error(f"Audio transcription failed: model={config.model}: {redact(str(e), config.api_key)}")
            raise
        return text.strip()
