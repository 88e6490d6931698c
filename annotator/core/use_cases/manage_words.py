# annotator/core/use_cases/manage_words.py
import asyncio
from typing import List, Optional

import structlog

from annotator.core.domain.exceptions import InvalidWordUpdateError, WordNotFoundError
from annotator.core.domain.models import AnnotatedWord, WordPage, WordStats, WordUpdate
from annotator.core.ports.word_repository import IWordRepository
from annotator.shared.observability import get_tracer

logger = structlog.get_logger()
tracer = get_tracer(__name__)

RECENT_WORDS_LIMIT = 5


class ManageWords:
    """
    Use Case: Therapist review of the stored vocabulary.

    Browsing (search, recent, stats) and corrections of single records,
    including setting the ``prooved_by_therapist`` review flag.
    """

    def __init__(self, repository: IWordRepository, page_size: int = 10):
        self.repository = repository
        self.page_size = page_size

    async def get(self, word_id: str) -> AnnotatedWord:
        record = await self.repository.get_by_id(word_id)
        if record is None:
            raise WordNotFoundError(word_id)
        return record

    async def search(self, query: str = "", language: Optional[str] = None, page: int = 1) -> WordPage:
        """Filtered listing, newest first. Pages are 1-based."""
        page = max(1, page)
        offset = (page - 1) * self.page_size

        items, total = await asyncio.gather(
            self.repository.list_words(query, language, self.page_size, offset),
            self.repository.count_words(query, language),
        )
        logger.debug("words_searched", query=query, language=language, page=page, total=total)
        return WordPage(items=items, total=total, page=page, page_size=self.page_size)

    async def recent(self, limit: int = RECENT_WORDS_LIMIT) -> List[AnnotatedWord]:
        return await self.repository.list_words(limit=limit)

    async def stats(self) -> WordStats:
        total, by_language, media = await asyncio.gather(
            self.repository.count_words(),
            self.repository.count_by_language(),
            self.repository.count_by_media(),
        )
        return WordStats(total_words=total, by_language=by_language, media=media)

    async def update(self, word_id: str, update: WordUpdate) -> AnnotatedWord:
        """
        Applies reviewer corrections.

        Raises:
            WordNotFoundError: unknown id.
            InvalidWordUpdateError: the new syllables do not spell the word.
        """
        with tracer.start_as_current_span("use_case.update_word") as span:
            span.set_attribute("app.word_id", word_id)

            current = await self.get(word_id)
            changes = update.changes()
            if not changes:
                return current

            syllables = changes.get("syllables")
            if syllables is not None and "".join(syllables) != current.word:
                raise InvalidWordUpdateError(
                    f"syllables {syllables!r} do not reconstruct '{current.word}'"
                )

            return await self.repository.update(word_id, changes)

    async def delete(self, word_id: str) -> None:
        if not await self.repository.delete(word_id):
            raise WordNotFoundError(word_id)
        logger.info("word_removed", id=word_id)
