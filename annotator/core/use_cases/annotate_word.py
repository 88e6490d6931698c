# annotator/core/use_cases/annotate_word.py
import asyncio
from typing import List, Optional

import structlog

from annotator.core.domain.exceptions import AnnotationTimeoutError
from annotator.core.domain.models import (
    DEFAULT_LANGUAGE,
    AnnotatedWord,
    LexicalAnnotation,
    MediaAvailability,
    utc_now,
)
from annotator.core.domain.safe_letters import select_safe_letters
from annotator.core.ports.data_sources import IFrequencySource, IMediaSource
from annotator.core.ports.llm_port import ILanguageModel
from annotator.core.services.frequency import FrequencyEstimator
from annotator.core.services.llm_annotator import LlmAnnotator
from annotator.core.services.media import MediaAvailabilityEstimator
from annotator.core.strategies import get_strategy
from annotator.shared.observability import get_tracer

logger = structlog.get_logger()
tracer = get_tracer(__name__)


class AnnotationOrchestrator:
    """
    Use Case: Annotates a single word.

    Responsibilities:
    1. Selects the language strategy (German for unsupported codes).
    2. Runs LLM annotation, frequency, safe letters and media concurrently.
    3. Waits for all four (join barrier) and merges them into one record.

    The four sub-operations share no state; each only reads the word and
    the language. LLM transport failures and media failures abort the
    word; frequency and safe-letter problems are absorbed.
    """

    def __init__(
        self,
        llm: Optional[ILanguageModel] = None,
        frequency_source: Optional[IFrequencySource] = None,
        media_source: Optional[IMediaSource] = None,
        timeout: Optional[float] = None,
        max_tokens: int = 100,
        temperature: float = 0.2,
    ):
        # We inject the interfaces (Ports), not the concrete implementations
        self.llm_annotator = LlmAnnotator(llm, max_tokens=max_tokens, temperature=temperature)
        self.frequency_estimator = FrequencyEstimator(frequency_source)
        self.media_estimator = MediaAvailabilityEstimator(media_source)
        self.timeout = timeout

    async def annotate(self, word: str, language: str = DEFAULT_LANGUAGE.value) -> AnnotatedWord:
        """
        Synthesises a new annotation for ``word``.

        Args:
            word: The word as submitted; casing is preserved.
            language: ISO 639-1 code. Stored as given on the record.

        Returns:
            AnnotatedWord without an id (the store assigns it).

        Raises:
            AnnotationError: LLM unreachable or the time budget was exceeded.
            MediaAvailabilityError: the configured media service failed.
        """
        with tracer.start_as_current_span("use_case.annotate_word") as span:
            span.set_attribute("app.word", word)
            span.set_attribute("app.language", language)

            logger.info("annotation_started", word=word, language=language)

            if self.timeout is None:
                record = await self._annotate(word, language)
            else:
                try:
                    record = await asyncio.wait_for(self._annotate(word, language), self.timeout)
                except asyncio.TimeoutError as e:
                    logger.error("annotation_timed_out", word=word, timeout=self.timeout)
                    raise AnnotationTimeoutError(word, self.timeout) from e

            span.set_attribute("app.word_type", record.word_type.value)
            logger.debug("annotation_completed", word=word, language=language)
            return record

    async def _annotate(self, word: str, language: str) -> AnnotatedWord:
        strategy = get_strategy(language)

        lexical, frequency, safe_letters, media = await asyncio.gather(
            self.llm_annotator.annotate(word, strategy),
            self.frequency_estimator.estimate(word, language),
            self._safe_letters(word),
            self.media_estimator.estimate(word, language),
        )
        return self._merge(word, language, lexical, frequency, safe_letters, media)

    async def _safe_letters(self, word: str) -> List[str]:
        return select_safe_letters(word)

    @staticmethod
    def _merge(
        word: str,
        language: str,
        lexical: LexicalAnnotation,
        frequency: float,
        safe_letters: List[str],
        media: MediaAvailability,
    ) -> AnnotatedWord:
        now = utc_now()
        return AnnotatedWord(
            word=word,
            language=language,
            word_type=lexical.word_type,
            gender=lexical.gender,
            syllables=list(lexical.syllables),
            safe_letters=safe_letters,
            frequency=frequency,
            has_audio=media.has_audio,
            has_image=media.has_image,
            prooved_by_therapist=False,
            created_at=now,
            updated_at=now,
        )
