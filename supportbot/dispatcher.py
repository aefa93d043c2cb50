"""Dispatch of composed requests to the configured language-model provider."""

import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Any

import openai
from openai import OpenAI

from .config import Config, config
from .fallback import LocalFallbackResponder
from .models import FAQ, AIResponse, Document, ProviderReply, utc_now_iso

logger = config.get_logger(__name__)

APOLOGY_MESSAGE = (
    "I apologize, but I'm experiencing technical difficulties right now. "
    "Please try again in a moment, or contact our support team for immediate "
    "assistance."
)
MAX_LOGGED_BODY_CHARS = 500


class MalformedResponseError(ValueError):
    """Provider payload lacks the required content."""


@dataclass(frozen=True)
class ProviderSettings:
    """Connection settings for the single external provider."""

    api_key: str = ""
    base_url: str | None = None
    model: str = "openai/gpt-4.1"
    provider_name: str = "OpenRouter GPT-4.1"
    max_tokens: int = 500
    temperature: float = 0.7
    timeout: float = 30.0
    max_retries: int = 0
    default_headers: dict[str, str] = field(default_factory=dict)

    @property
    def has_credential(self) -> bool:
        return bool(self.api_key.strip())

    @classmethod
    def from_config(cls, cfg: type[Config] | Config = config) -> "ProviderSettings":
        """Build settings from application configuration.

        Returns:
            ProviderSettings: Snapshot of the provider configuration.
        """
        return cls(
            api_key=cfg.get_openai_api_key(),
            base_url=cfg.OPENAI_BASE_URL or None,
            model=cfg.CHAT_MODEL,
            provider_name=cfg.PROVIDER_NAME,
            max_tokens=cfg.CHAT_MAX_TOKENS,
            temperature=cfg.CHAT_TEMPERATURE,
            timeout=cfg.PROVIDER_TIMEOUT,
            max_retries=cfg.PROVIDER_MAX_RETRIES,
            default_headers=cfg.get_api_headers(),
        )


def _describe_error(error: Exception) -> str:
    """Summarize a provider error with status and a truncated body.

    Returns:
        str: One-line description for operator logs.
    """
    if isinstance(error, openai.APIStatusError):
        body = error.response.text if error.response is not None else ""
        return f"status={error.status_code} body={body[:MAX_LOGGED_BODY_CHARS]}"
    if isinstance(error, openai.APITimeoutError):
        return "timeout"
    return f"{type(error).__name__}: {str(error)[:MAX_LOGGED_BODY_CHARS]}"


class ResponseDispatcher:
    """Sends one request to the provider, or answers locally without a credential.

    ``dispatch`` always returns an ``AIResponse``; provider failures become the
    apology response with ``degraded=True``.
    """

    def __init__(
        self,
        settings: ProviderSettings,
        fallback: LocalFallbackResponder | None = None,
        client: OpenAI | None = None,
        clock: Callable[[], float] = time.perf_counter,
    ) -> None:
        """Initialize the dispatcher.

        Args:
            settings: Provider configuration, including the credential.
            fallback: Responder used when no credential is configured.
            client: Pre-built OpenAI client; created lazily when omitted.
            clock: Monotonic clock in seconds used for response timing.
        """
        self.settings = settings
        self.fallback = fallback or LocalFallbackResponder()
        self._client = client
        self.clock = clock

    @property
    def client(self) -> OpenAI:
        if self._client is None:
            self._client = OpenAI(
                api_key=self.settings.api_key,
                base_url=self.settings.base_url,
                timeout=self.settings.timeout,
                max_retries=self.settings.max_retries,
                default_headers=self.settings.default_headers or None,
            )
        return self._client

    def build_messages(
        self,
        message: str,
        context: str,
        image_url: str | None = None,
    ) -> list[dict[str, Any]]:
        """Build the chat messages for one provider request.

        Returns:
            list[dict[str, Any]]: System context followed by the user turn.
        """
        user_content: list[dict[str, Any]] = [{"type": "text", "text": message}]
        if image_url:
            user_content.append({"type": "image_url", "image_url": {"url": image_url}})
        return [
            {"role": "system", "content": [{"type": "text", "text": context}]},
            {"role": "user", "content": user_content},
        ]

    def call_provider(
        self,
        message: str,
        context: str,
        image_url: str | None = None,
    ) -> ProviderReply:
        """Issue a single completion request.

        Returns:
            ProviderReply: Content and reported token usage.

        Raises:
            MalformedResponseError: If the payload carries no content.
        """
        completion = self.client.chat.completions.create(
            model=self.settings.model,
            messages=self.build_messages(message, context, image_url),  # type: ignore[arg-type]
            max_tokens=self.settings.max_tokens,
            temperature=self.settings.temperature,
        )

        choices = getattr(completion, "choices", None)
        if not choices:
            msg = "Provider response contained no choices"
            raise MalformedResponseError(msg)
        content = getattr(choices[0].message, "content", None)
        if not isinstance(content, str) or not content.strip():
            msg = "Provider response contained no content"
            raise MalformedResponseError(msg)

        usage = getattr(completion, "usage", None)
        total_tokens = getattr(usage, "total_tokens", None) if usage else None
        return ProviderReply(
            content=content.strip(),
            tokens_used=total_tokens if isinstance(total_tokens, int) else None,
        )

    def _elapsed_ms(self, started: float) -> int:
        return max(0, round((self.clock() - started) * 1000))

    def _response(
        self,
        content: str,
        tokens_used: int,
        started: float,
        *,
        degraded: bool = False,
    ) -> AIResponse:
        return AIResponse(
            content=content,
            provider=self.settings.provider_name,
            model=self.settings.model,
            timestamp=utc_now_iso(),
            tokens_used=tokens_used,
            response_time_ms=self._elapsed_ms(started),
            degraded=degraded,
        )

    def dispatch(
        self,
        message: str,
        context: str,
        image_url: str | None = None,
        faqs: Sequence[FAQ] = (),
        documents: Sequence[Document] = (),
    ) -> AIResponse:
        """Produce a response for the user message.

        Args:
            message: Non-empty user message.
            context: Composed system context.
            image_url: Optional image attachment reference.
            faqs: Candidates for the local fallback responder.
            documents: Candidates for the local fallback responder.

        Returns:
            AIResponse: Provider answer, local fallback answer, or the apology.

        Raises:
            ValueError: If the message is empty.
        """
        started = self.clock()
        if not message or not message.strip():
            msg = "Message content is required"
            raise ValueError(msg)

        if not self.settings.has_credential:
            logger.info("No provider credential configured, using local fallback")
            reply = self.fallback.respond(message, faqs, documents)
            return self._response(reply.content, reply.tokens_used, started)

        try:
            provider_reply = self.call_provider(message, context, image_url)
        except Exception as e:  # noqa: BLE001
            logger.exception(
                "%s request failed: %s",
                self.settings.provider_name,
                _describe_error(e),
            )
            return self._response(APOLOGY_MESSAGE, 0, started, degraded=True)

        response = self._response(
            provider_reply.content,
            provider_reply.tokens_used or 0,
            started,
        )
        logger.info(
            "Provider answered in %d ms using %d tokens",
            response.response_time_ms,
            response.tokens_used,
        )
        return response

    def check_health(self) -> dict[str, Any]:
        """Report whether the provider is usable without calling it.

        Returns:
            dict[str, Any]: Status flag, message and provider descriptor.
        """
        if not self.settings.has_credential:
            status, message = False, "API key not configured"
        else:
            status, message = True, "Provider is configured"
        return {
            "status": status,
            "message": message,
            "provider": self.settings.provider_name,
            "model": self.settings.model,
        }

    def available_providers(self) -> list[dict[str, str]]:
        """Describe the single configured provider.

        Returns:
            list[dict[str, str]]: One provider descriptor.
        """
        return [
            {
                "key": self.settings.model,
                "name": self.settings.provider_name,
                "model": self.settings.model,
            }
        ]
