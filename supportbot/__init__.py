"""SupportBot - knowledge-grounded customer support assistant."""

from .context import ContextComposer
from .dispatcher import ProviderSettings, ResponseDispatcher
from .document_processing import BatchUploadResult, DocumentLoader
from .fallback import LocalFallbackResponder, TokenUsageSimulator
from .knowledge import KeywordSelector, KnowledgeSelector, Selection
from .models import (
    FAQ,
    AIResponse,
    ChatSession,
    Document,
    DocumentType,
    FallbackReply,
    Message,
    ProviderReply,
    Sender,
)
from .service import AssistantService
from .sessions import ExchangeResult, SessionAccumulator
from .storage import ChatStore, KnowledgeStore, get_stores

__all__ = [
    "FAQ",
    "AIResponse",
    "AssistantService",
    "BatchUploadResult",
    "ChatSession",
    "ChatStore",
    "ContextComposer",
    "Document",
    "DocumentLoader",
    "DocumentType",
    "ExchangeResult",
    "FallbackReply",
    "KeywordSelector",
    "KnowledgeSelector",
    "KnowledgeStore",
    "LocalFallbackResponder",
    "Message",
    "ProviderReply",
    "ProviderSettings",
    "ResponseDispatcher",
    "Selection",
    "Sender",
    "SessionAccumulator",
    "TokenUsageSimulator",
    "get_stores",
]
