# annotator/adapters/persistence/filesystem_repo.py
import asyncio
import json
import os
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

import aiofiles
import aiofiles.os
import structlog

from annotator.core.domain.exceptions import DuplicateWordError, RepositoryError, WordNotFoundError
from annotator.core.domain.models import AnnotatedWord, MediaStats, is_valid_language_code, utc_now
from annotator.core.ports.word_repository import IWordRepository

logger = structlog.get_logger()

_OLDEST = datetime.min.replace(tzinfo=timezone.utc)


class FileSystemWordRepository(IWordRepository):
    """
    Annotated-word store backed by one JSON file per language:
    ``<base_path>/words/<language>/words.json`` keyed by the word.

    Every read-modify-write of a language file holds that language's lock,
    and files are replaced atomically, so concurrent requests never leave
    a half-written file behind.
    """

    def __init__(self, base_path: str):
        self.base_path = Path(base_path) / "words"
        self._locks: Dict[str, asyncio.Lock] = {}

    def _lock_for(self, language: str) -> asyncio.Lock:
        return self._locks.setdefault(language, asyncio.Lock())

    def _get_file_path(self, language: str) -> Path:
        if not is_valid_language_code(language):
            raise RepositoryError(f"Invalid language code: {language!r}")

        root = self.base_path.resolve()
        path = (root / language / "words.json").resolve()
        if not path.is_relative_to(root):
            raise RepositoryError(f"Language {language!r} resolves outside the word store")
        return path

    async def _load_file(self, language: str) -> Dict[str, Any]:
        path = self._get_file_path(language)
        if not path.exists():
            return {}

        try:
            async with aiofiles.open(path, mode="r", encoding="utf-8") as f:
                content = await f.read()
                return json.loads(content) if content else {}
        except (OSError, json.JSONDecodeError) as e:
            logger.error("repo_read_failed", language=language, error=str(e))
            raise RepositoryError(f"Could not read words for '{language}': {e}") from e

    async def _save_file(self, language: str, data: Dict[str, Any]) -> None:
        path = self._get_file_path(language)
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = path.with_name(f".{path.name}.{uuid.uuid4().hex}.tmp")

        try:
            async with aiofiles.open(tmp_path, mode="w", encoding="utf-8") as f:
                await f.write(json.dumps(data, indent=2, ensure_ascii=False))
            await aiofiles.os.replace(tmp_path, path)
        except OSError as e:
            logger.error("repo_write_failed", language=language, error=str(e))
            if tmp_path.exists():
                tmp_path.unlink()
            raise RepositoryError(f"Could not save words for '{language}': {e}") from e

    def _languages(self) -> List[str]:
        if not self.base_path.is_dir():
            return []
        return sorted(
            entry.name
            for entry in self.base_path.iterdir()
            if entry.is_dir() and is_valid_language_code(entry.name) and (entry / "words.json").exists()
        )

    async def _records(self, language: Optional[str] = None) -> List[AnnotatedWord]:
        languages = [language] if language else self._languages()
        records: List[AnnotatedWord] = []
        for code in languages:
            data = await self._load_file(code)
            records.extend(AnnotatedWord.model_validate(entry) for entry in data.values())
        return records

    @staticmethod
    def _find_key(data: Dict[str, Any], word_id: str) -> Optional[str]:
        for key, entry in data.items():
            if entry.get("id") == word_id:
                return key
        return None

    async def _language_of(self, word_id: str) -> Optional[str]:
        record = await self.get_by_id(word_id)
        return record.language if record else None

    # --- Interface Implementation ---

    async def initialize(self) -> None:
        self.base_path.mkdir(parents=True, exist_ok=True)
        logger.info("repo_initialized", backend="filesystem", path=str(self.base_path))

    async def find_by_word_and_language(self, word: str, language: str) -> Optional[AnnotatedWord]:
        logger.debug("repo_lookup", word=word, language=language)
        data = await self._load_file(language)

        raw_entry = data.get(word)
        if not raw_entry:
            return None
        return AnnotatedWord.model_validate(raw_entry)

    async def insert(self, record: AnnotatedWord) -> AnnotatedWord:
        async with self._lock_for(record.language):
            data = await self._load_file(record.language)
            if record.word in data:
                raise DuplicateWordError(record.word, record.language)

            now = utc_now()
            stored = record.model_copy(update={
                "id": uuid.uuid4().hex,
                "created_at": record.created_at or now,
                "updated_at": record.updated_at or now,
            })
            data[record.word] = stored.model_dump(mode="json", by_alias=True)
            await self._save_file(record.language, data)

        logger.info("word_saved", word=record.word, language=record.language, id=stored.id)
        return stored

    async def health_check(self) -> bool:
        return self.base_path.exists() and os.access(self.base_path, os.R_OK | os.W_OK)

    async def get_by_id(self, word_id: str) -> Optional[AnnotatedWord]:
        for record in await self._records():
            if record.id == word_id:
                return record
        return None

    async def list_words(
        self,
        query: str = "",
        language: Optional[str] = None,
        limit: int = 10,
        offset: int = 0,
    ) -> List[AnnotatedWord]:
        matches = self._filter(await self._records(language), query)
        matches.sort(key=lambda r: r.created_at or _OLDEST, reverse=True)
        return matches[offset:offset + limit]

    async def count_words(self, query: str = "", language: Optional[str] = None) -> int:
        return len(self._filter(await self._records(language), query))

    async def count_by_language(self) -> Dict[str, int]:
        counts: Dict[str, int] = {}
        for record in await self._records():
            counts[record.language] = counts.get(record.language, 0) + 1
        return counts

    async def count_by_media(self) -> MediaStats:
        records = await self._records()
        return MediaStats(
            with_audio=sum(1 for r in records if r.has_audio),
            with_image=sum(1 for r in records if r.has_image),
            with_both=sum(1 for r in records if r.has_audio and r.has_image),
            with_none=sum(1 for r in records if not r.has_audio and not r.has_image),
        )

    async def update(self, word_id: str, changes: Dict[str, Any]) -> AnnotatedWord:
        language = await self._language_of(word_id)
        if language is None:
            raise WordNotFoundError(word_id)

        async with self._lock_for(language):
            data = await self._load_file(language)
            key = self._find_key(data, word_id)
            if key is None:
                raise WordNotFoundError(word_id)

            current = AnnotatedWord.model_validate(data[key])
            updated = AnnotatedWord.model_validate({
                **current.model_dump(),
                **changes,
                "updated_at": utc_now(),
            })
            data[key] = updated.model_dump(mode="json", by_alias=True)
            await self._save_file(language, data)

        logger.info("word_updated", id=word_id, fields=sorted(changes))
        return updated

    async def delete(self, word_id: str) -> bool:
        language = await self._language_of(word_id)
        if language is None:
            logger.warning("word_delete_missing", id=word_id)
            return False

        async with self._lock_for(language):
            data = await self._load_file(language)
            key = self._find_key(data, word_id)
            if key is None:
                return False
            del data[key]
            await self._save_file(language, data)

        logger.info("word_deleted", id=word_id, language=language)
        return True

    @staticmethod
    def _filter(records: List[AnnotatedWord], query: str) -> List[AnnotatedWord]:
        needle = (query or "").strip().lower()
        if not needle:
            return list(records)
        return [r for r in records if needle in r.word.lower() or needle in r.word_type.value]
