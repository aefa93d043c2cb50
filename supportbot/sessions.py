"""Chat session handling: history, knowledge lookup and message appends."""

from dataclasses import dataclass

from .config import config
from .models import AIResponse, ChatSession, Message, Sender
from .service import AssistantService
from .storage import ChatStore, KnowledgeStore

logger = config.get_logger(__name__)


@dataclass
class ExchangeResult:
    """Outcome of one user message and the assistant's reply."""

    user_message: Message
    ai_message: Message
    session_id: str
    total_messages: int
    response: AIResponse


class SessionAccumulator:
    """Appends user/assistant message pairs to stored chat sessions."""

    def __init__(
        self,
        assistant: AssistantService,
        knowledge_store: KnowledgeStore,
        chat_store: ChatStore,
        history_window: int = 10,
    ) -> None:
        """Initialize the accumulator.

        Args:
            assistant: Service generating the assistant replies.
            knowledge_store: Source of FAQ and document candidates.
            chat_store: Persistence for chat sessions.
            history_window: Number of most recent messages passed as context.
        """
        self.assistant = assistant
        self.knowledge_store = knowledge_store
        self.chat_store = chat_store
        self.history_window = history_window

    def history(self, session_id: str) -> ChatSession:
        """Return the stored session, or an empty active one."""  # noqa: DOC201
        return self.chat_store.get_session(session_id) or ChatSession(
            session_id=session_id
        )

    def send_message(  # noqa: PLR0913
        self,
        session_id: str,
        message: str,
        user_id: str | None = None,
        user_agent: str | None = None,
        ip_address: str | None = None,
        image_url: str | None = None,
    ) -> ExchangeResult:
        """Record a user message, generate the reply and save both.

        Knowledge-base read errors propagate and leave the session unchanged.

        Returns:
            ExchangeResult: The appended messages and the raw response.

        Raises:
            ValueError: If the message is empty.
        """
        if not message or not message.strip():
            msg = "Message content is required"
            raise ValueError(msg)

        session = self.chat_store.get_session(session_id)
        if session is None:
            session = ChatSession(
                session_id=session_id,
                user_id=user_id,
                user_agent=user_agent,
                ip_address=ip_address,
            )
            logger.info("Starting chat session %s", session_id)

        faqs = self.knowledge_store.list_active_faqs(self.assistant.faq_limit)
        documents = self.knowledge_store.list_active_documents(
            self.assistant.document_limit
        )

        user_message = Message(content=message.strip(), sender=Sender.USER)
        session.messages.append(user_message)
        history = [msg.content for msg in session.messages[-self.history_window :]]

        response = self.assistant.generate_response(
            message,
            history,
            faqs,
            documents,
            image_url=image_url,
            session_id=session_id,
        )

        ai_message = Message(
            content=response.content,
            sender=Sender.AI,
            provider=response.provider,
            tokens_used=response.tokens_used,
        )
        session.messages.append(ai_message)
        self.chat_store.save_session(session)

        return ExchangeResult(
            user_message=user_message,
            ai_message=ai_message,
            session_id=session.session_id,
            total_messages=session.total_messages,
            response=response,
        )

    def end_session(self, session_id: str) -> ChatSession | None:
        """Deactivate a session.

        Returns:
            ChatSession | None: The deactivated session, or None if unknown.
        """
        return self.chat_store.deactivate_session(session_id)
