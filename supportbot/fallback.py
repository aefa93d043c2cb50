"""Local responder used when no provider credential is configured."""

import time
from collections.abc import Callable, Sequence

import numpy as np

from .config import config
from .knowledge import KeywordSelector, KnowledgeSelector
from .models import FAQ, Document, FallbackReply

logger = config.get_logger(__name__)

# Inclusive bounds of the simulated token usage per answer branch
FAQ_TOKEN_RANGE = (100, 299)
DOCUMENT_TOKEN_RANGE = (150, 399)
GENERIC_TOKEN_RANGE = (100, 299)

FAQ_PREFIX = "Based on our FAQ: "
DOCUMENT_PREFIX = "According to our documentation: "
GENERIC_TEMPLATE = (
    'Thanks for your question about "{message}". I have noted it and can help '
    "further using our knowledge base. Could you share a few more details, or "
    "would you like me to elaborate on a specific aspect of this topic?"
)


class TokenUsageSimulator:
    """Seedable generator of plausible token counts and latencies."""

    def __init__(self, seed: int | None = None) -> None:
        """Initialize the simulator.

        Args:
            seed: Seed for ``numpy.random.default_rng``; None draws fresh entropy.
        """
        self.seed = seed
        self.rng = np.random.default_rng(seed)

    def sample(self, low: int, high: int) -> int:
        """Draw an integer in ``[low, high]``.

        Returns:
            int: Simulated token count.
        """
        return int(self.rng.integers(low, high, endpoint=True))

    def delay(self, low: float, high: float) -> float:
        """Draw a latency in seconds between ``low`` and ``high``.

        Returns:
            float: Seconds to wait, 0.0 when the range is empty.
        """
        if high <= 0:
            return 0.0
        return float(self.rng.uniform(low, high))


class LocalFallbackResponder:
    """Answers from FAQs and documents without calling any external service."""

    def __init__(
        self,
        selector: KnowledgeSelector | None = None,
        token_simulator: TokenUsageSimulator | None = None,
        delay_range: tuple[float, float] = (1.0, 3.0),
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        """Initialize the responder.

        Args:
            selector: Knowledge selector; defaults to KeywordSelector.
            token_simulator: Source of simulated token counts and latency.
            delay_range: Simulated latency bounds in seconds; (0, 0) disables it.
            sleep: Function used to wait out the simulated latency.
        """
        self.selector = selector or KeywordSelector()
        self.token_simulator = token_simulator or TokenUsageSimulator()
        self.delay_range = delay_range
        self.sleep = sleep

    @classmethod
    def from_config(cls) -> "LocalFallbackResponder":
        """Build a responder from application configuration.

        Returns:
            LocalFallbackResponder: Configured responder.
        """
        return cls(
            token_simulator=TokenUsageSimulator(config.FALLBACK_SEED),
            delay_range=config.fallback_delay_range(),
        )

    def _simulate_latency(self) -> None:
        seconds = self.token_simulator.delay(*self.delay_range)
        if seconds > 0:
            self.sleep(seconds)

    def respond(
        self,
        message: str,
        faqs: Sequence[FAQ],
        documents: Sequence[Document],
    ) -> FallbackReply:
        """Answer from the best local source: FAQ, then document, then generic.

        Returns:
            FallbackReply: Answer text and simulated token usage.
        """
        self._simulate_latency()

        selection = self.selector.select(message, faqs, documents)

        if selection.faq is not None:
            logger.info("Fallback answered from FAQ: %s", selection.faq.question)
            return FallbackReply(
                content=f"{FAQ_PREFIX}{selection.faq.answer}",
                tokens_used=self.token_simulator.sample(*FAQ_TOKEN_RANGE),
            )

        if selection.excerpt is not None:
            logger.info(
                "Fallback answered from document: %s",
                selection.document.name if selection.document else "unknown",
            )
            return FallbackReply(
                content=f"{DOCUMENT_PREFIX}{selection.excerpt}",
                tokens_used=self.token_simulator.sample(*DOCUMENT_TOKEN_RANGE),
            )

        logger.info("Fallback found no knowledge-base match")
        return FallbackReply(
            content=GENERIC_TEMPLATE.format(message=message),
            tokens_used=self.token_simulator.sample(*GENERIC_TOKEN_RANGE),
        )
