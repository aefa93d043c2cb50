"""Tests for AssistantService."""

from unittest.mock import create_autospec, patch

import pytest

from supportbot import AIResponse, AssistantService, ContextComposer, ResponseDispatcher
from supportbot.context import FAQ_HEADER, HISTORY_HEADER
from supportbot.fallback import FAQ_PREFIX


def test_fallback_always_answers(offline_service):
    """Zero FAQs, zero documents and an unmatched query still yield an answer."""
    response = offline_service.generate_response("Tell me a riddle", [], [], [])

    assert isinstance(response, AIResponse)
    assert response.content.strip()
    assert '"Tell me a riddle"' in response.content
    assert response.degraded is False
    assert response.tokens_used > 0


@pytest.mark.parametrize("message", ["", "  \n ", None])
def test_empty_message_rejected(offline_service, message):
    with pytest.raises(ValueError, match="Message content is required"):
        offline_service.generate_response(message, [], [], [])


def test_session_id_is_attached(offline_service):
    response = offline_service.generate_response(
        "hello there", [], [], [], session_id="chat-1"
    )

    assert response.session_id == "chat-1"
    assert response.to_dict()["sessionId"] == "chat-1"


def test_context_passed_to_dispatcher(online_dispatcher, mock_openai_client, sample_faqs):
    service = AssistantService(online_dispatcher)

    service.generate_response(
        "reset password", ["previous question", "previous answer"], sample_faqs, []
    )

    kwargs = mock_openai_client.chat.completions.create.call_args.kwargs
    system_text = kwargs["messages"][0]["content"][0]["text"]
    assert FAQ_HEADER in system_text
    assert "1. Q: How do I reset my password?" in system_text
    assert HISTORY_HEADER + "previous question\nprevious answer" in system_text


def test_inactive_candidates_are_excluded(faq_factory, document_factory):
    dispatcher = create_autospec(ResponseDispatcher, instance=True)
    composer = create_autospec(ContextComposer, instance=True)
    composer.compose.return_value = "context"
    service = AssistantService(dispatcher, composer)
    active_faq = faq_factory("Active question", "Yes.")
    inactive_faq = faq_factory("Inactive question", "No.", active=False)
    inactive_doc = document_factory(active=False)

    service.generate_response("question", [], [inactive_faq, active_faq], [inactive_doc])

    composer.compose.assert_called_once_with([active_faq], [], [])
    _, kwargs = dispatcher.dispatch.call_args
    assert kwargs["faqs"] == [active_faq]
    assert kwargs["documents"] == []


def test_candidate_caps_are_enforced(faq_factory, document_factory):
    dispatcher = create_autospec(ResponseDispatcher, instance=True)
    composer = create_autospec(ContextComposer, instance=True)
    service = AssistantService(dispatcher, composer, faq_limit=20, document_limit=10)
    faqs = [faq_factory(f"Question {i}", f"Answer {i}") for i in range(25)]
    documents = [document_factory(name=f"doc{i}.txt") for i in range(12)]

    service.generate_response("question", [], faqs, documents)

    passed_faqs, passed_documents, _ = composer.compose.call_args.args
    assert passed_faqs == faqs[:20]
    assert passed_documents == documents[:10]


def test_image_reference_forwarded():
    dispatcher = create_autospec(ResponseDispatcher, instance=True)
    service = AssistantService(dispatcher)

    service.generate_response(
        "look at this", [], [], [], image_url="https://example.com/a.png"
    )

    _, kwargs = dispatcher.dispatch.call_args
    assert kwargs["image_url"] == "https://example.com/a.png"


def test_provider_failure_is_absorbed(online_dispatcher, provider_failure_factory):
    service = AssistantService(online_dispatcher)

    with provider_failure_factory(TimeoutError("timed out")):
        response = service.generate_response("hello there", [], [], [])

    assert response.degraded is True
    assert response.content


def test_password_reset_scenario(offline_service, faq_factory):
    faq = faq_factory("How do I reset my password?", "Click Forgot Password.")

    response = offline_service.generate_response(
        "How can I reset my password please?", [], [faq], []
    )

    assert response.content == "Based on our FAQ: Click Forgot Password."
    assert response.content.startswith(FAQ_PREFIX)


def test_from_config_without_credential():
    with patch("supportbot.service.ProviderSettings.from_config") as mock_settings:
        mock_settings.return_value.has_credential = False
        service = AssistantService.from_config()

    assert isinstance(service.dispatcher, ResponseDispatcher)
    assert service.dispatcher.check_health()["status"] is False
