"""Configuration management for SupportBot application."""

import logging
import os
from pathlib import Path

from dotenv import load_dotenv

env_path = Path(__file__).parent.parent / ".env"

if env_path.exists():
    load_dotenv(env_path)


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


def _env_optional_int(name: str) -> int | None:
    value = os.getenv(name)
    if value is None or not value.strip():
        return None
    return int(value)


class Config:
    """Application configuration loaded from environment variables."""

    # Provider Configuration
    @classmethod
    def get_openai_api_key(cls) -> str:
        """Get the provider API key from environment variables.

        Returns:
            API key from environment or empty string if not set.
        """
        return os.getenv("OPENAI_API_KEY", "")

    OPENAI_BASE_URL: str = os.getenv("OPENAI_BASE_URL", "https://openrouter.ai/api/v1")
    PROVIDER_NAME: str = os.getenv("PROVIDER_NAME", "OpenRouter GPT-4.1")
    PROVIDER_TIMEOUT: float = float(os.getenv("PROVIDER_TIMEOUT", "30.0"))
    PROVIDER_MAX_RETRIES: int = int(os.getenv("PROVIDER_MAX_RETRIES", "0"))

    # Logging Configuration
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
    OPENAI_LOG_LEVEL: str = os.getenv("OPENAI_LOG_LEVEL", "WARNING").upper()

    # Chat Model Configuration
    CHAT_MODEL: str = os.getenv("CHAT_MODEL", "openai/gpt-4.1")
    CHAT_MAX_TOKENS: int = int(os.getenv("CHAT_MAX_TOKENS", "500"))
    CHAT_TEMPERATURE: float = float(os.getenv("CHAT_TEMPERATURE", "0.7"))

    # Knowledge Base Configuration
    FAQ_CANDIDATE_LIMIT: int = int(os.getenv("FAQ_CANDIDATE_LIMIT", "20"))
    DOCUMENT_CANDIDATE_LIMIT: int = int(os.getenv("DOCUMENT_CANDIDATE_LIMIT", "10"))
    CHAT_HISTORY_WINDOW: int = int(os.getenv("CHAT_HISTORY_WINDOW", "10"))
    DATABASE_PATH: Path = Path(os.getenv("DATABASE_PATH", "data/supportbot.db"))
    MAX_FILE_SIZE: int = int(os.getenv("MAX_FILE_SIZE", str(10 * 1024 * 1024)))

    # Local Fallback Configuration
    FALLBACK_DELAY_ENABLED: bool = _env_flag("FALLBACK_DELAY_ENABLED", "true")
    FALLBACK_MIN_DELAY: float = float(os.getenv("FALLBACK_MIN_DELAY", "1.0"))
    FALLBACK_MAX_DELAY: float = float(os.getenv("FALLBACK_MAX_DELAY", "3.0"))
    FALLBACK_SEED: int | None = _env_optional_int("FALLBACK_SEED")

    # API Header Configuration
    API_USER_AGENT: str = os.getenv("API_USER_AGENT", "SupportBot/1.0")
    SITE_URL: str = os.getenv("SITE_URL", "")
    SITE_TITLE: str = os.getenv("SITE_TITLE", "")

    @classmethod
    def has_provider_credential(cls) -> bool:
        """Check whether an external provider credential is configured.

        Returns:
            True if an API key is set.
        """
        return bool(cls.get_openai_api_key().strip())

    @classmethod
    def validate(cls) -> None:
        """Validate numeric configuration values.

        A missing API key is not an error: it routes chat turns to the
        local fallback responder.

        Raises:
            ValueError: If a limit or delay setting is out of range.
        """
        if cls.FAQ_CANDIDATE_LIMIT <= 0 or cls.DOCUMENT_CANDIDATE_LIMIT <= 0:
            msg = "FAQ_CANDIDATE_LIMIT and DOCUMENT_CANDIDATE_LIMIT must be positive."
            raise ValueError(msg)
        if cls.CHAT_MAX_TOKENS <= 0:
            msg = "CHAT_MAX_TOKENS must be positive."
            raise ValueError(msg)
        if cls.PROVIDER_TIMEOUT <= 0:
            msg = "PROVIDER_TIMEOUT must be positive."
            raise ValueError(msg)
        if not 0 <= cls.FALLBACK_MIN_DELAY <= cls.FALLBACK_MAX_DELAY:
            msg = "FALLBACK_MIN_DELAY must be between 0 and FALLBACK_MAX_DELAY."
            raise ValueError(msg)

    @classmethod
    def fallback_delay_range(cls) -> tuple[float, float]:
        """Simulated latency bounds for the local fallback responder.

        Returns:
            ``(min, max)`` seconds, or ``(0.0, 0.0)`` when the delay is disabled.
        """
        if not cls.FALLBACK_DELAY_ENABLED:
            return (0.0, 0.0)
        return (cls.FALLBACK_MIN_DELAY, cls.FALLBACK_MAX_DELAY)

    @classmethod
    def setup_logging(cls) -> None:
        """Setup basic logging configuration.

        Configure logging once at application startup with:
        - Console output for all levels
        - Simple, readable format
        - Configurable level via environment variable
        """
        logging.basicConfig(
            level=getattr(logging, cls.LOG_LEVEL, logging.INFO),
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%H:%M:%S",
        )

        # Configure third-party library log levels via environment variables
        logging.getLogger("openai").setLevel(
            getattr(logging, cls.OPENAI_LOG_LEVEL, logging.WARNING)
        )

    @classmethod
    def get_logger(cls, name: str) -> logging.Logger:
        """Get a logger with the specified name.

        Args:
            name: Logger name (typically __name__)

        Returns:
            Logger instance
        """
        return logging.getLogger(name)

    @classmethod
    def get_api_headers(cls) -> dict[str, str]:
        """Build default headers for outbound provider calls.

        Returns:
            Mapping of header names to values used on outbound HTTP requests.
        """
        headers: dict[str, str] = {}

        if cls.API_USER_AGENT:
            headers["User-Agent"] = cls.API_USER_AGENT
        if cls.SITE_URL:
            headers["HTTP-Referer"] = cls.SITE_URL
        if cls.SITE_TITLE:
            headers["X-Title"] = cls.SITE_TITLE

        return headers


config = Config()
