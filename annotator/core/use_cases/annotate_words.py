# annotator/core/use_cases/annotate_words.py
from typing import List, Sequence

import structlog

from annotator.core.domain.exceptions import DuplicateWordError, InvalidWordBatchError
from annotator.core.domain.models import DEFAULT_LANGUAGE, AnnotatedWord, WordRequest
from annotator.core.ports.word_repository import IWordRepository
from annotator.core.use_cases.annotate_word import AnnotationOrchestrator
from annotator.shared.observability import get_tracer

logger = structlog.get_logger()
tracer = get_tracer(__name__)

# Starter vocabulary used to seed an empty store.
INITIAL_WORDS = (
    "Haus",
    "Katze",
    "Hund",
    "Buch",
    "Tisch",
    "Stuhl",
    "Auto",
    "Baum",
    "Sonne",
    "Mond",
)


class AnnotateWords:
    """
    Use Case: Annotates a batch of words, reusing stored annotations.

    Words are processed one after another. A word already in the store is
    returned as stored; a miss is annotated and inserted. The batch is
    all-or-nothing: the first unrecovered failure aborts it (words stored
    before the failure stay stored).
    """

    def __init__(
        self,
        orchestrator: AnnotationOrchestrator,
        repository: IWordRepository,
        max_words: int = 50,
    ):
        self.orchestrator = orchestrator
        self.repository = repository
        self.max_words = max_words

    async def execute(self, requests: Sequence[WordRequest]) -> List[AnnotatedWord]:
        with tracer.start_as_current_span("use_case.annotate_words") as span:
            self._validate(requests)
            span.set_attribute("app.batch_size", len(requests))

            results: List[AnnotatedWord] = []
            for request in requests:
                results.append(await self._annotate_one(request))

            logger.info("batch_annotated", count=len(results))
            return results

    async def _annotate_one(self, request: WordRequest) -> AnnotatedWord:
        existing = await self.repository.find_by_word_and_language(request.word, request.language)
        if existing is not None:
            logger.debug("word_already_annotated", word=request.word, language=request.language)
            return existing

        annotated = await self.orchestrator.annotate(request.word, request.language)
        try:
            return await self.repository.insert(annotated)
        except DuplicateWordError:
            # A concurrent request stored the word first
            stored = await self.repository.find_by_word_and_language(request.word, request.language)
            if stored is None:
                raise
            logger.debug("word_stored_concurrently", word=request.word, language=request.language)
            return stored

    def _validate(self, requests: Sequence[WordRequest]) -> None:
        if not requests:
            raise InvalidWordBatchError("No words provided for annotation")
        if len(requests) > self.max_words:
            raise InvalidWordBatchError(
                f"Too many words provided for annotation at once (max: {self.max_words})"
            )


class PopulateWords:
    """Use Case: Seeds the store with the German starter vocabulary."""

    def __init__(self, annotate_words: AnnotateWords):
        self.annotate_words = annotate_words

    async def execute(self) -> List[AnnotatedWord]:
        logger.info("populate_started", count=len(INITIAL_WORDS))
        requests = [WordRequest(word=word, language=DEFAULT_LANGUAGE.value) for word in INITIAL_WORDS]
        return await self.annotate_words.execute(requests)
