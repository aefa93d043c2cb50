"""Test configuration and fixtures for SupportBot tests.

This module provides reusable test fixtures organized by functionality:
- Constants and test data
- Mock provider responses
- Knowledge-base sample factories
- Fallback responder and dispatcher fixtures
- SQLite store fixtures
"""

from contextlib import contextmanager
from unittest.mock import Mock

import pytest

from supportbot import (
    FAQ,
    AssistantService,
    ChatStore,
    Document,
    DocumentType,
    KnowledgeStore,
    LocalFallbackResponder,
    ProviderSettings,
    ResponseDispatcher,
    SessionAccumulator,
    TokenUsageSimulator,
)


class TestConstants:
    """Centralized test constants to avoid repetition across test files."""

    TEST_API_KEY = "test-key"
    TEST_MODEL = "openai/gpt-4.1"
    TEST_PROVIDER_NAME = "Test Provider"
    TEST_SEED = 1234
    MAX_TOKENS = 500


def create_mock_chat_response(
    content: str | None,
    total_tokens: int | None = 42,
) -> Mock:
    """Create a mock OpenAI chat completion response.

    Args:
        content: The content for the chat completion response.
        total_tokens: Reported usage, or None for a response without usage.

    Returns:
        Mock object representing OpenAI chat completion response.
    """
    mock_response = Mock()
    mock_response.choices = [Mock(message=Mock(content=content))]
    mock_response.usage = None if total_tokens is None else Mock(total_tokens=total_tokens)
    return mock_response


@pytest.fixture
def faq_factory():
    """Factory for FAQ entries with sensible defaults."""

    def _create_faq(
        question: str = "How do I reset my password?",
        answer: str = "Click Forgot Password.",
        **kwargs,
    ) -> FAQ:
        return FAQ(question=question, answer=answer, **kwargs)

    return _create_faq


@pytest.fixture
def document_factory():
    """Factory for Document entries with sensible defaults."""

    def _create_document(
        name: str = "refund-policy.txt",
        content: str = "Refunds are issued within 14 days of purchase.",
        doc_type: DocumentType = DocumentType.TXT,
        **kwargs,
    ) -> Document:
        return Document(name=name, content=content, type=doc_type, **kwargs)

    return _create_document


@pytest.fixture
def sample_faqs(faq_factory):
    """A small FAQ set in priority order."""
    return [
        faq_factory("How do I reset my password?", "Click Forgot Password."),
        faq_factory(
            "What are your opening hours?",
            "We are open 9am to 5pm, Monday to Friday.",
        ),
        faq_factory("Do you ship internationally?", "Yes, to over 40 countries."),
    ]


@pytest.fixture
def sample_documents(document_factory):
    """A small document set."""
    return [
        document_factory(),
        document_factory(
            name="warranty.md",
            content="Hardware carries a two year warranty against defects.",
            doc_type=DocumentType.MD,
        ),
    ]


@pytest.fixture
def token_simulator():
    """Seeded token usage simulator for reproducible counts."""
    return TokenUsageSimulator(seed=TestConstants.TEST_SEED)


@pytest.fixture
def fallback_responder(token_simulator):
    """Local fallback responder without simulated latency."""
    return LocalFallbackResponder(
        token_simulator=token_simulator,
        delay_range=(0.0, 0.0),
        sleep=Mock(),
    )


@pytest.fixture
def provider_settings():
    """Provider settings with a credential configured."""
    return ProviderSettings(
        api_key=TestConstants.TEST_API_KEY,
        base_url="https://provider.example/api/v1",
        model=TestConstants.TEST_MODEL,
        provider_name=TestConstants.TEST_PROVIDER_NAME,
        max_tokens=TestConstants.MAX_TOKENS,
        timeout=5.0,
    )


@pytest.fixture
def offline_settings():
    """Provider settings without a credential."""
    return ProviderSettings(
        api_key="",
        model=TestConstants.TEST_MODEL,
        provider_name=TestConstants.TEST_PROVIDER_NAME,
    )


@pytest.fixture
def mock_openai_client():
    """Mock OpenAI client returning a successful completion by default."""
    client = Mock()
    client.chat.completions.create.return_value = create_mock_chat_response(
        "Test response"
    )
    return client


@pytest.fixture
def dispatcher_factory(fallback_responder):
    """Factory for ResponseDispatcher instances."""

    def _create_dispatcher(settings, client=None, clock=None) -> ResponseDispatcher:
        kwargs = {"fallback": fallback_responder, "client": client}
        if clock is not None:
            kwargs["clock"] = clock
        return ResponseDispatcher(settings, **kwargs)

    return _create_dispatcher


@pytest.fixture
def online_dispatcher(dispatcher_factory, provider_settings, mock_openai_client):
    """Dispatcher with a credential and a mocked provider client."""
    return dispatcher_factory(provider_settings, client=mock_openai_client)


@pytest.fixture
def offline_dispatcher(dispatcher_factory, offline_settings):
    """Dispatcher routing every turn to the local fallback."""
    return dispatcher_factory(offline_settings)


@pytest.fixture
def offline_service(offline_dispatcher):
    """Assistant service answering from the local fallback."""
    return AssistantService(offline_dispatcher)


@pytest.fixture
def knowledge_store(tmp_path) -> KnowledgeStore:
    """Create temporary SQLite knowledge store for testing."""
    return KnowledgeStore(tmp_path / "test_supportbot.db")


@pytest.fixture
def chat_store(tmp_path) -> ChatStore:
    """Create temporary SQLite chat store sharing the knowledge store database."""
    return ChatStore(tmp_path / "test_supportbot.db")


@pytest.fixture
def session_accumulator(offline_service, knowledge_store, chat_store):
    """Session accumulator wired to temporary stores and the offline service."""
    return SessionAccumulator(offline_service, knowledge_store, chat_store)


@pytest.fixture
def provider_failure_factory(mock_openai_client):
    """Factory context manager making the mocked provider raise."""

    @contextmanager
    def _fail_with(error: Exception):
        mock_openai_client.chat.completions.create.side_effect = error
        try:
            yield mock_openai_client.chat.completions.create
        finally:
            mock_openai_client.chat.completions.create.side_effect = None

    return _fail_with


@pytest.fixture
def provider_reply_factory(mock_openai_client):
    """Factory context manager setting the mocked provider's completion."""

    @contextmanager
    def _reply_with(content: str | None, total_tokens: int | None = 42):
        create = mock_openai_client.chat.completions.create
        original = create.return_value
        create.return_value = create_mock_chat_response(content, total_tokens)
        try:
            yield create
        finally:
            create.return_value = original

    return _reply_with
