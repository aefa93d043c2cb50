"""Data models for the support assistant."""

import datetime
from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path
from typing import Any

MIN_PRIORITY = 0
MAX_PRIORITY = 10


def utc_now_iso() -> str:
    """Current UTC time as an ISO-8601 string."""  # noqa: DOC201
    return datetime.datetime.now(tz=datetime.UTC).isoformat()


def normalize_tags(tags: object) -> list[str]:
    """Lower-case, strip and de-duplicate tags, keeping first-seen order.

    Returns:
        Normalized tag list.
    """
    if tags is None:
        return []
    if isinstance(tags, str):
        tags = tags.split(",")
    normalized = [str(tag).strip().lower() for tag in tags]  # type: ignore[union-attr]
    return list(dict.fromkeys(tag for tag in normalized if tag))


class DocumentType(StrEnum):
    """Supported knowledge-base document formats."""

    PDF = "pdf"
    TXT = "txt"
    DOC = "doc"
    DOCX = "docx"
    MD = "md"

    @classmethod
    def from_filename(cls, filename: str | Path) -> "DocumentType":
        """Map a file name to its document type by extension.

        Returns:
            The matching DocumentType.

        Raises:
            ValueError: If the extension is not supported.
        """
        suffix = Path(filename).suffix.lower().lstrip(".")
        try:
            return cls(suffix)
        except ValueError:
            msg = f"Unsupported file type: .{suffix}" if suffix else "Missing file type"
            raise ValueError(msg) from None


class Sender(StrEnum):
    """Author of a chat message."""

    USER = "user"
    AI = "ai"


@dataclass
class FAQ:
    """Administrator-curated question/answer pair."""

    question: str
    answer: str
    category: str | None = None
    tags: list[str] = field(default_factory=list)
    active: bool = True
    priority: int = 0
    view_count: int = 0
    helpful_count: int = 0
    created_by: str = "admin"
    id: int | None = None
    created_at: str | None = None
    updated_at: str | None = None

    def __post_init__(self) -> None:
        """Validate required text and the priority range.

        Raises:
            ValueError: If question or answer is blank or priority is out of range.
        """
        self.question = (self.question or "").strip()
        self.answer = (self.answer or "").strip()
        if not self.question or not self.answer:
            msg = "Question and answer are required"
            raise ValueError(msg)
        if not MIN_PRIORITY <= self.priority <= MAX_PRIORITY:
            msg = f"Priority must be between {MIN_PRIORITY} and {MAX_PRIORITY}"
            raise ValueError(msg)
        self.category = self.category.strip() if self.category else None
        self.tags = normalize_tags(self.tags)


@dataclass
class Document:
    """Administrator-uploaded text content used for grounding."""

    name: str
    content: str
    type: DocumentType
    size: int | None = None
    category: str | None = None
    tags: list[str] = field(default_factory=list)
    active: bool = True
    original_name: str | None = None
    access_count: int = 0
    uploaded_by: str = "admin"
    last_accessed: str | None = None
    id: int | None = None
    created_at: str | None = None

    def __post_init__(self) -> None:
        """Normalize type and size.

        Raises:
            ValueError: If the name is blank, the type unknown or size negative.
        """
        self.name = (self.name or "").strip()
        if not self.name:
            msg = "Document name is required"
            raise ValueError(msg)
        self.content = self.content or ""
        self.type = DocumentType(str(self.type).lower())
        if self.size is None:
            self.size = len(self.content.encode("utf-8"))
        if self.size < 0:
            msg = "Document size must be non-negative"
            raise ValueError(msg)
        self.original_name = self.original_name or self.name
        self.category = self.category.strip() if self.category else None
        self.tags = normalize_tags(self.tags)


@dataclass
class Message:
    """A single chat message in a session."""

    content: str
    sender: Sender
    timestamp: str = field(default_factory=utc_now_iso)
    provider: str | None = None
    tokens_used: int = 0


@dataclass
class ChatSession:
    """Conversation record owned by the session accumulator."""

    session_id: str
    user_id: str | None = None
    messages: list[Message] = field(default_factory=list)
    active: bool = True
    user_agent: str | None = None
    ip_address: str | None = None
    start_time: str = field(default_factory=utc_now_iso)
    end_time: str | None = None
    created_at: str | None = None
    updated_at: str | None = None

    @property
    def total_messages(self) -> int:
        return len(self.messages)

    @property
    def latest_message(self) -> Message | None:
        return self.messages[-1] if self.messages else None


@dataclass
class ProviderReply:
    """Result of one successful external provider call."""

    content: str
    tokens_used: int | None = None


@dataclass
class FallbackReply:
    """Result produced by the local fallback responder."""

    content: str
    tokens_used: int


@dataclass
class AIResponse:
    """Response object returned by the assistant pipeline."""

    content: str
    provider: str
    model: str
    timestamp: str
    tokens_used: int = 0
    response_time_ms: int = 0
    degraded: bool = False
    session_id: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Serialize for a JSON ``{success, data}`` envelope.

        Returns:
            camelCase mapping of the response fields.
        """
        return {
            "content": self.content,
            "provider": self.provider,
            "model": self.model,
            "timestamp": self.timestamp,
            "tokensUsed": self.tokens_used,
            "responseTimeMs": self.response_time_ms,
            "degraded": self.degraded,
            "sessionId": self.session_id,
        }
