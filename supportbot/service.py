"""Context-grounded response generation for chat turns."""

from collections.abc import Sequence

from .config import Config, config
from .context import ContextComposer
from .dispatcher import ProviderSettings, ResponseDispatcher
from .fallback import LocalFallbackResponder
from .models import FAQ, AIResponse, Document

logger = config.get_logger(__name__)


class AssistantService:
    """Composes the grounding context for a turn and dispatches it."""

    def __init__(
        self,
        dispatcher: ResponseDispatcher,
        composer: ContextComposer | None = None,
        faq_limit: int = 20,
        document_limit: int = 10,
    ) -> None:
        """Initialize the service.

        Args:
            dispatcher: Dispatcher bound to the configured provider.
            composer: Context composer; defaults to ContextComposer().
            faq_limit: Maximum FAQs included in one context.
            document_limit: Maximum documents included in one context.
        """
        self.dispatcher = dispatcher
        self.composer = composer or ContextComposer()
        self.faq_limit = faq_limit
        self.document_limit = document_limit

    @classmethod
    def from_config(cls, cfg: type[Config] | Config = config) -> "AssistantService":
        """Wire the default pipeline from application configuration.

        Returns:
            AssistantService: Service with dispatcher, fallback and composer.
        """
        dispatcher = ResponseDispatcher(
            ProviderSettings.from_config(cfg),
            fallback=LocalFallbackResponder.from_config(),
        )
        return cls(
            dispatcher,
            faq_limit=cfg.FAQ_CANDIDATE_LIMIT,
            document_limit=cfg.DOCUMENT_CANDIDATE_LIMIT,
        )

    def generate_response(  # noqa: PLR0913
        self,
        message: str,
        context: Sequence[str],
        faqs: Sequence[FAQ],
        documents: Sequence[Document],
        image_url: str | None = None,
        session_id: str | None = None,
    ) -> AIResponse:
        """Generate an assistant response grounded in the knowledge base.

        Args:
            message: The user's message.
            context: Recent conversation turns, oldest first.
            faqs: Candidate FAQs, already ordered by priority.
            documents: Candidate documents.
            image_url: Optional image attachment reference.
            session_id: Session the response belongs to.

        Returns:
            AIResponse: Never raises for provider failures.

        Raises:
            ValueError: If the message is empty.
        """
        if not message or not message.strip():
            msg = "Message content is required"
            raise ValueError(msg)

        active_faqs = [faq for faq in faqs if faq.active][: self.faq_limit]
        active_documents = [doc for doc in documents if doc.active][
            : self.document_limit
        ]
        logger.info(
            "Generating response with %d FAQs, %d documents, %d history turns",
            len(active_faqs),
            len(active_documents),
            len(context),
        )

        system_context = self.composer.compose(active_faqs, active_documents, context)
        response = self.dispatcher.dispatch(
            message,
            system_context,
            image_url=image_url,
            faqs=active_faqs,
            documents=active_documents,
        )
        response.session_id = session_id
        return response
