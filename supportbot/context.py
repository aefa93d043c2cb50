"""System context composition for provider requests."""

from collections.abc import Sequence

from .knowledge import make_excerpt
from .models import FAQ, Document

DEFAULT_HISTORY_TURNS = 5
DOCUMENT_EXCERPT_CHARS = 800

INSTRUCTION_PREAMBLE = (
    "You are an intelligent customer support assistant. Your goal is to provide "
    "helpful, accurate, and contextual responses to customer queries.\n\n"
    "IMPORTANT GUIDELINES:\n"
    "- Always be polite, professional, and helpful\n"
    "- Use the provided FAQs and company documents to answer questions accurately\n"
    "- If you don't know something, admit it and suggest contacting human support\n"
    "- Provide specific, actionable answers when possible\n"
    "- Keep responses concise but comprehensive\n"
)

CLOSING_INSTRUCTION = (
    "\nBased on the above information, please provide accurate and helpful "
    "responses to customer queries.\n"
    "If the answer is in the FAQs or documents, reference that information.\n"
    "If not, provide general helpful guidance and suggest contacting support "
    "for specific issues.\n"
)

FAQ_HEADER = "\n\n=== COMPANY FAQs ===\n"
DOCUMENT_HEADER = "\n\n=== COMPANY DOCUMENTS & POLICIES ===\n"
HISTORY_HEADER = "\n\n=== RECENT CONVERSATION CONTEXT ===\n"


class ContextComposer:
    """Builds the bounded system context sent alongside the user message.

    The output depends only on the arguments, so identical inputs always
    produce identical text.
    """

    def __init__(
        self,
        max_history_turns: int = DEFAULT_HISTORY_TURNS,
        document_excerpt_chars: int = DOCUMENT_EXCERPT_CHARS,
    ) -> None:
        """Initialize the composer.

        Args:
            max_history_turns: Number of most recent turns kept in the context.
            document_excerpt_chars: Characters of document content included.
        """
        self.max_history_turns = max_history_turns
        self.document_excerpt_chars = document_excerpt_chars

    def format_faqs(self, faqs: Sequence[FAQ]) -> str:
        """Render the FAQ section, keeping the supplied order.

        Returns:
            str: Section text, empty when there are no FAQs.
        """
        if not faqs:
            return ""
        section = FAQ_HEADER
        for i, faq in enumerate(faqs):
            section += f"{i + 1}. Q: {faq.question}\n   A: {faq.answer}\n\n"
        return section

    def format_documents(self, documents: Sequence[Document]) -> str:
        """Render the document section with truncated excerpts.

        Returns:
            str: Section text, empty when there are no documents.
        """
        if not documents:
            return ""
        section = DOCUMENT_HEADER
        for i, document in enumerate(documents):
            excerpt = make_excerpt(document.content, self.document_excerpt_chars)
            section += f"{i + 1}. Document: {document.name}\nContent: {excerpt}\n\n"
        return section

    def format_history(self, recent_turns: Sequence[str]) -> str:
        """Render the most recent conversation turns verbatim.

        Returns:
            str: Section text, empty when there is no history.
        """
        if not recent_turns or self.max_history_turns <= 0:
            return ""
        window = list(recent_turns)[-self.max_history_turns :]
        return HISTORY_HEADER + "\n".join(window) + "\n\n"

    def compose(
        self,
        faqs: Sequence[FAQ],
        documents: Sequence[Document],
        recent_turns: Sequence[str],
    ) -> str:
        """Compose the full system context.

        Returns:
            str: Preamble, knowledge sections, history and closing instruction.
        """
        return (
            INSTRUCTION_PREAMBLE
            + self.format_faqs(faqs)
            + self.format_documents(documents)
            + self.format_history(recent_turns)
            + CLOSING_INSTRUCTION
        )
