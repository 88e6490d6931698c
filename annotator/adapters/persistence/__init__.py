# annotator/adapters/persistence/__init__.py
from annotator.core.ports.word_repository import IWordRepository
from annotator.shared.config import Settings, StorageBackend

from .filesystem_repo import FileSystemWordRepository
from .sql_repo import SqlWordRepository


def create_word_repository(settings: Settings) -> IWordRepository:
    """Builds the store selected by STORAGE_BACKEND. One handle per process."""
    if settings.STORAGE_BACKEND == StorageBackend.SQL:
        return SqlWordRepository(settings.DATABASE_URL, echo=settings.DEBUG)
    return FileSystemWordRepository(settings.FILESYSTEM_REPO_PATH)


__all__ = ["FileSystemWordRepository", "SqlWordRepository", "create_word_repository"]
