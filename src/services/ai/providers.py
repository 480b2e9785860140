"""Provider adapters: build the wire request, send it once, flatten the reply to text."""

import base64
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

import requests
from openai import APIConnectionError, APIStatusError, APITimeoutError, OpenAI, OpenAIError, RateLimitError

from src.config import AISettings
from src.exceptions import (
    ProviderConnectionError,
    ProviderError,
    ProviderTimeoutError,
    QuotaExceededError,
    SafetyBlockError,
)
from src.schemas.ai import AIProvider, AIProviderConfig

logger = logging.getLogger(__name__)

GEMINI_SAFETY_CATEGORIES = (
    "HARM_CATEGORY_HARASSMENT",
    "HARM_CATEGORY_HATE_SPEECH",
    "HARM_CATEGORY_SEXUALLY_EXPLICIT",
    "HARM_CATEGORY_DANGEROUS_CONTENT",
)
GEMINI_SAFETY_THRESHOLD = "BLOCK_MEDIUM_AND_ABOVE"

REDACTED = "***"


def wants_json(*texts: Optional[str]) -> bool:
    """True when any of the texts mentions json, case-insensitively."""
    return any(text and "json" in text.lower() for text in texts)


def redact(message: str, secret: Optional[str]) -> str:
    """Remove an API key from text that may end up in logs or responses."""
    if not secret:
        return message
    return message.replace(secret, REDACTED)


@dataclass
class ProviderRequest:
    url: str
    body: Dict[str, Any]
    headers: Dict[str, str] = field(default_factory=dict)
    params: Dict[str, str] = field(default_factory=dict)
    api_key: Optional[str] = field(default=None, repr=False)


class BaseProvider:
    provider: AIProvider

    def __init__(self, settings: AISettings):
        self.settings = settings

    def build_request(self, config: AIProviderConfig, prompt: str, system_prompt: str) -> ProviderRequest:
        raise NotImplementedError

    def parse_response(self, data: Dict[str, Any]) -> str:
        raise NotImplementedError

    def send(self, config: AIProviderConfig, prompt: str, system_prompt: str) -> str:
        raise NotImplementedError

    def close(self) -> None:
        pass

    def _error(self, message: str) -> ProviderError:
        return ProviderError(message, provider=self.provider.value)


class HTTPProvider(BaseProvider):
    """Provider reached through plain JSON-over-HTTPS with ``requests``.

    The ``requests.Session`` is shared by the process and closed at shutdown.
    """

    def __init__(self, settings: AISettings, http: Optional[requests.Session] = None):
        super().__init__(settings)
        self.http = http or requests.Session()

    def send(self, config: AIProviderConfig, prompt: str, system_prompt: str) -> str:
        request = self.build_request(config, prompt, system_prompt)
        return self.parse_response(self._post(request))

    def close(self) -> None:
        self.http.close()

    def _post(self, request: ProviderRequest) -> Dict[str, Any]:
        name = self.provider.value
        # requests errors carry the full URL, so their text never leaves this method
        try:
            response = self.http.post(
                request.url,
                params=request.params or None,
                headers={"Content-Type": "application/json", **request.headers},
                json=request.body,
                timeout=self.settings.timeout,
            )
        except requests.Timeout:
            raise ProviderTimeoutError(
                f"{name} request timed out after {self.settings.timeout:g}s", provider=name
            ) from None
        except requests.ConnectionError:
            raise ProviderConnectionError(f"Cannot connect to the {name} API", provider=name) from None
        except requests.RequestException as e:
            raise ProviderError(f"{name} request failed ({type(e).__name__})", provider=name) from None

        if not response.ok:
            raise self._error(redact(self._upstream_message(response), request.api_key))

        try:
            data = response.json()
        except ValueError:
            raise self._error(f"{name} returned a non-JSON body") from None
        if not isinstance(data, dict):
            raise self._error(f"Invalid response from {name} API")
        return data

    def _upstream_message(self, response: requests.Response) -> str:
        fallback = f"{self.provider.value} API error (HTTP {response.status_code})"
        try:
            payload = response.json()
        except ValueError:
            return fallback
        error = payload.get("error") if isinstance(payload, dict) else None
        if isinstance(error, dict) and error.get("message"):
            return error["message"]
        return fallback


class GeminiProvider(HTTPProvider):
    provider = AIProvider.GEMINI

    def _request(self, config: AIProviderConfig, body: Dict[str, Any]) -> ProviderRequest:
        # key goes in a header, not the query string, so it never appears in URLs
        return ProviderRequest(
            url=f"{self.settings.gemini_base_url}/models/{config.model}:generateContent",
            body=body,
            headers={"x-goog-api-key": config.api_key},
            api_key=config.api_key,
        )

    def build_request(self, config: AIProviderConfig, prompt: str, system_prompt: str) -> ProviderRequest:
        body: Dict[str, Any] = {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "generationConfig": {
                "temperature": self.settings.temperature,
                "maxOutputTokens": self.settings.max_output_tokens,
                "topK": 40,
                "topP": 0.95,
            },
            "safetySettings": [
                {"category": category, "threshold": GEMINI_SAFETY_THRESHOLD}
                for category in GEMINI_SAFETY_CATEGORIES
            ],
        }
        if system_prompt:
            body["systemInstruction"] = {"parts": [{"text": system_prompt}]}
        if wants_json(prompt, system_prompt):
            body["generationConfig"]["responseMimeType"] = "application/json"
        return self._request(config, body)

    def build_audio_request(
        self, config: AIProviderConfig, audio: bytes, mime_type: str, instruction: str
    ) -> ProviderRequest:
        body = {
            "contents": [
                {
                    "role": "user",
                    "parts": [
                        {"text": instruction},
                        {
                            "inlineData": {
                                "mimeType": mime_type,
                                "data": base64.b64encode(audio).decode("ascii"),
                            }
                        },
                    ],
                }
            ],
        }
        return self._request(config, body)

    def transcribe(self, config: AIProviderConfig, audio: bytes, mime_type: str, instruction: str) -> str:
        request = self.build_audio_request(config, audio, mime_type, instruction)
        return self.parse_response(self._post(request))

    def parse_response(self, data: Dict[str, Any]) -> str:
        candidates = data.get("candidates") or []
        candidate = candidates[0] if candidates and isinstance(candidates[0], dict) else None
        content = candidate.get("content") if candidate else None

        if not content:
            feedback = data.get("promptFeedback") or {}
            if feedback.get("blockReason"):
                raise self._blocked(feedback["blockReason"], feedback.get("safetyRatings"))
            if candidate and candidate.get("finishReason") == "SAFETY":
                raise self._blocked("SAFETY", candidate.get("safetyRatings"))
            raise self._error("Invalid response from Gemini API")

        parts = content.get("parts") or []
        text = "".join(part.get("text", "") for part in parts if isinstance(part, dict))
        if not text:
            raise self._error("Gemini returned an empty response")
        return text

    def _blocked(self, reason: str, ratings: Optional[List[Dict[str, Any]]]) -> SafetyBlockError:
        ratings = ratings or []
        details = ", ".join(f"{r.get('category')}: {r.get('probability')}" for r in ratings)
        return SafetyBlockError(
            f"Request blocked by Gemini: {reason}. Details: {details or 'none provided'}",
            provider=self.provider.value,
            block_reason=reason,
            safety_ratings=ratings,
        )


class AnthropicProvider(HTTPProvider):
    provider = AIProvider.ANTHROPIC

    def build_request(self, config: AIProviderConfig, prompt: str, system_prompt: str) -> ProviderRequest:
        body: Dict[str, Any] = {
            "model": config.model,
            "max_tokens": self.settings.max_output_tokens,
            "temperature": self.settings.temperature,
            "messages": [{"role": "user", "content": prompt}],
        }
        # Anthropic takes the system instruction outside the message list
        if system_prompt:
            body["system"] = system_prompt

        return ProviderRequest(
            url=f"{self.settings.anthropic_base_url}/messages",
            body=body,
            headers={
                "x-api-key": config.api_key,
                "anthropic-version": self.settings.anthropic_version,
            },
            api_key=config.api_key,
        )

    def parse_response(self, data: Dict[str, Any]) -> str:
        blocks = data.get("content")
        if not isinstance(blocks, list) or not blocks:
            raise self._error("Invalid response from Anthropic API")
        text = "".join(
            block.get("text", "")
            for block in blocks
            if isinstance(block, dict) and block.get("type") == "text"
        )
        if not text:
            raise self._error("Anthropic returned an empty response")
        return text


class OpenAIProvider(BaseProvider):
    """OpenAI chat completions through the official SDK.

    The SDK client is bound to one key, so a client is opened per call and
    closed with it.
    """

    provider = AIProvider.OPENAI

    def __init__(self, settings: AISettings, client_factory: Optional[Callable[[str], OpenAI]] = None):
        super().__init__(settings)
        self._client_factory = client_factory or self._make_client

    def _make_client(self, api_key: str) -> OpenAI:
        # Single-attempt semantics: the SDK would otherwise retry on its own
        return OpenAI(
            api_key=api_key,
            base_url=self.settings.openai_base_url,
            timeout=self.settings.timeout,
            max_retries=0,
        )

    def build_request(self, config: AIProviderConfig, prompt: str, system_prompt: str) -> ProviderRequest:
        messages = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": prompt})
        return ProviderRequest(
            url=f"{self.settings.openai_base_url}/chat/completions",
            body={
                "model": config.model,
                "messages": messages,
                "temperature": self.settings.temperature,
                "max_tokens": self.settings.max_output_tokens,
            },
            api_key=config.api_key,
        )

    def send(self, config: AIProviderConfig, prompt: str, system_prompt: str) -> str:
        request = self.build_request(config, prompt, system_prompt)
        name = self.provider.value
        try:
            with self._client_factory(config.api_key) as client:
                completion = client.chat.completions.create(**request.body)
        except APITimeoutError:
            raise ProviderTimeoutError("OpenAI request timed out", provider=name) from None
        except APIConnectionError:
            raise ProviderConnectionError("Cannot connect to the OpenAI API", provider=name) from None
        except RateLimitError as e:
            if getattr(e, "code", None) == "insufficient_quota":
                raise QuotaExceededError(
                    "Your OpenAI quota is exhausted. Check your plan and billing details, "
                    "or switch to another provider such as Gemini in the settings.",
                    provider=name,
                ) from None
            raise ProviderError(
                f"OpenAI rate limit reached: {redact(e.message, config.api_key)}", provider=name
            ) from None
        except APIStatusError as e:
            raise ProviderError(f"OpenAI API error: {redact(e.message, config.api_key)}", provider=name) from None
        except OpenAIError as e:
            raise ProviderError(f"OpenAI request failed: {redact(str(e), config.api_key)}", provider=name) from None

        return self.parse_response(completion.model_dump())

    def parse_response(self, data: Dict[str, Any]) -> str:
        choices = data.get("choices") or []
        message = choices[0].get("message") if choices and isinstance(choices[0], dict) else None
        content = message.get("content") if isinstance(message, dict) else None
        if not content:
            raise self._error("Invalid response from OpenAI API")
        return content


def make_providers(settings: AISettings, http: Optional[requests.Session] = None) -> Dict[AIProvider, BaseProvider]:
    session = http or requests.Session()
    return {
        AIProvider.OPENAI: OpenAIProvider(settings),
        AIProvider.GEMINI: GeminiProvider(settings, http=session),
        AIProvider.ANTHROPIC: AnthropicProvider(settings, http=session),
    }


def close_providers(providers: Dict[AIProvider, BaseProvider]) -> None:
    for provider in providers.values():
        provider.close()
