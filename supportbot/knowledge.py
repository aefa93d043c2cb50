"""Keyword-based selection of knowledge-base entries."""

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol

from .config import config
from .models import FAQ, Document

logger = config.get_logger(__name__)

MIN_TOKEN_LENGTH = 4
SELECTION_EXCERPT_CHARS = 200
ELLIPSIS = "..."


@dataclass
class Selection:
    """Entries chosen for a query; fields are None when nothing matched."""

    faq: FAQ | None = None
    document: Document | None = None
    excerpt: str | None = None


class KnowledgeSelector(Protocol):
    """Interface for choosing the FAQ and document relevant to a query."""

    def select(
        self,
        query: str,
        faqs: Sequence[FAQ],
        documents: Sequence[Document],
    ) -> Selection: ...


def extract_match_tokens(query: str) -> list[str]:
    """Lower-case the query and keep words longer than three characters.

    Words are split on any run of whitespace, so tabs and newlines separate
    words the same way single spaces do; punctuation stays attached.

    Returns:
        Tokens used for containment matching, in query order.
    """
    return [word for word in query.lower().split() if len(word) >= MIN_TOKEN_LENGTH]


def make_excerpt(content: str | None, limit: int) -> str:
    """Truncate content to ``limit`` characters, marking truncation.

    Returns:
        The content itself, or its first ``limit`` characters plus ``...``.
    """
    if not content:
        return ""
    if len(content) > limit:
        return content[:limit] + ELLIPSIS
    return content


def _contains_any(text: str, tokens: Sequence[str]) -> bool:
    return any(token in text for token in tokens)


class KeywordSelector:
    """First-match keyword containment over FAQs and documents."""

    def __init__(self, excerpt_chars: int = SELECTION_EXCERPT_CHARS) -> None:
        self.excerpt_chars = excerpt_chars

    def find_faq_match(self, query: str, faqs: Sequence[FAQ]) -> FAQ | None:
        """Return the first active FAQ whose text contains any match token.

        Returns:
            The matching FAQ, or None.
        """
        tokens = extract_match_tokens(query)
        if not tokens:
            return None

        for faq in faqs:
            if not faq.active:
                continue
            if _contains_any(f"{faq.question} {faq.answer}".lower(), tokens):
                return faq
        return None

    def find_document_match(
        self,
        query: str,
        documents: Sequence[Document],
    ) -> tuple[Document, str] | None:
        """Return the first active document containing any match token.

        Returns:
            Tuple of (document, excerpt), or None.
        """
        tokens = extract_match_tokens(query)
        if not tokens:
            return None

        for document in documents:
            if not document.active:
                continue
            haystack = f"{document.name} {document.content or ''}".lower()
            if _contains_any(haystack, tokens):
                return document, make_excerpt(document.content, self.excerpt_chars)
        return None

    def select(
        self,
        query: str,
        faqs: Sequence[FAQ],
        documents: Sequence[Document],
    ) -> Selection:
        """Select the first matching FAQ and the first matching document.

        Returns:
            Selection with the matched entries, empty when nothing matched.
        """
        selection = Selection(faq=self.find_faq_match(query, faqs))

        document_match = self.find_document_match(query, documents)
        if document_match is not None:
            selection.document, selection.excerpt = document_match

        logger.debug(
            "Selection for query: faq=%s document=%s",
            selection.faq.question if selection.faq else None,
            selection.document.name if selection.document else None,
        )
        return selection
