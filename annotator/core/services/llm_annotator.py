# annotator/core/services/llm_annotator.py
from typing import Optional

import structlog

from annotator.core.domain.exceptions import AnnotationError
from annotator.core.domain.models import LexicalAnnotation
from annotator.core.ports.llm_port import ILanguageModel
from annotator.core.strategies.base import AnnotationStrategy

logger = structlog.get_logger()

DEFAULT_MAX_TOKENS = 100
DEFAULT_TEMPERATURE = 0.2


class LlmAnnotator:
    """
    Asks the language model for word type, gender and syllables.

    - No model / no credential: the strategy fallback, without a request.
    - Unparseable answer: the strategy fallback (handled by the strategy).
    - Transport, auth or quota failure: AnnotationError for the whole word.
    """

    def __init__(
        self,
        llm: Optional[ILanguageModel] = None,
        max_tokens: int = DEFAULT_MAX_TOKENS,
        temperature: float = DEFAULT_TEMPERATURE,
    ):
        self.llm = llm
        self.max_tokens = max_tokens
        self.temperature = temperature

    async def annotate(self, word: str, strategy: AnnotationStrategy) -> LexicalAnnotation:
        logger.debug("llm_annotation_requested", word=word, language=strategy.language.value)

        prompt = strategy.create_prompt(word)

        if self.llm is None or not self.llm.is_available:
            logger.debug("llm_fallback_used", word=word, reason="no language model configured")
            return strategy.fallback(word)

        try:
            raw_text = await self.llm.generate_text(
                prompt,
                max_tokens=self.max_tokens,
                temperature=self.temperature,
            )
        except Exception as e:
            logger.error("llm_annotation_failed", word=word, error=str(e))
            raise AnnotationError(word, f"LLM annotation failed: {e}") from e

        return strategy.parse_response(raw_text, word)
