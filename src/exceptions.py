class StudyCardsError(Exception):
    """Base exception for the application."""


class ConfigurationError(StudyCardsError):
    """No usable AI provider configuration (missing API key)."""


class ProviderError(StudyCardsError):
    """Upstream LLM call failed or returned an unusable response."""

    def __init__(self, message: str, provider: str | None = None):
        super().__init__(message)
        self.provider = provider


class ProviderConnectionError(ProviderError):
    pass


class ProviderTimeoutError(ProviderError):
    pass


class QuotaExceededError(ProviderError):
    pass


class SafetyBlockError(ProviderError):
    """The provider refused to answer for safety reasons."""

    def __init__(self, message: str, provider: str | None = None, block_reason: str | None = None, safety_ratings: list | None = None):
        super().__init__(message, provider=provider)
        self.block_reason = block_reason
        self.safety_ratings = safety_ratings or []


class PersistenceError(StudyCardsError):
    """Backend write or lookup failed."""


class ValidationError(StudyCardsError):
    """Malformed AI output or unusable input content."""


class YouTubeError(StudyCardsError):
    """Fetching video captions or metadata failed."""


class TranscriptUnavailableError(YouTubeError):
    """The video has no captions that can be retrieved."""
