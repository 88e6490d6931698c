# annotator/core/ports/word_repository.py
from typing import Any, Dict, List, Optional, Protocol

from annotator.core.domain.models import AnnotatedWord, MediaStats


class IWordRepository(Protocol):
    """
    Port for the annotated-word store.
    Implementations: FileSystemWordRepository, SqlWordRepository.
    """

    async def initialize(self) -> None:
        """Creates the schema / storage layout if missing. Idempotent."""
        ...

    async def find_by_word_and_language(self, word: str, language: str) -> Optional[AnnotatedWord]:
        """
        Looks up an existing annotation.

        Args:
            word: The word exactly as submitted (case-sensitive).
            language: The ISO 639-1 code the word was annotated under.

        Returns:
            The stored AnnotatedWord, or None on a miss.
        """
        ...

    async def insert(self, record: AnnotatedWord) -> AnnotatedWord:
        """
        Persists a new annotation and returns it with its assigned id.

        Raises:
            DuplicateWordError: if the (word, language) pair already exists.
            RepositoryError: if the store is unreachable.
        """
        ...

    async def health_check(self) -> bool:
        """Returns True if the underlying storage is accessible."""
        ...

    # --- Review & maintenance ---

    async def get_by_id(self, word_id: str) -> Optional[AnnotatedWord]:
        ...

    async def list_words(
        self,
        query: str = "",
        language: Optional[str] = None,
        limit: int = 10,
        offset: int = 0,
    ) -> List[AnnotatedWord]:
        """
        Newest first. ``query`` matches the word or its word type as a
        case-insensitive substring; ``language`` restricts to one code.
        """
        ...

    async def count_words(self, query: str = "", language: Optional[str] = None) -> int:
        """Number of records ``list_words`` would page through."""
        ...

    async def count_by_language(self) -> Dict[str, int]:
        ...

    async def count_by_media(self) -> MediaStats:
        ...

    async def update(self, word_id: str, changes: Dict[str, Any]) -> AnnotatedWord:
        """
        Applies field changes and refreshes ``updated_at``.

        Raises:
            WordNotFoundError: if no record has ``word_id``.
        """
        ...

    async def delete(self, word_id: str) -> bool:
        """Returns False when no record had ``word_id``."""
        ...
