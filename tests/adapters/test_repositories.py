# tests/adapters/test_repositories.py
import asyncio
import json
from datetime import datetime, timedelta, timezone

import pytest

from annotator.adapters.persistence import (
    FileSystemWordRepository,
    SqlWordRepository,
    create_word_repository,
)
from annotator.core.domain.exceptions import DuplicateWordError, RepositoryError, WordNotFoundError
from annotator.core.domain.models import AnnotatedWord, Gender, WordRequest, WordType, utc_now
from annotator.core.use_cases import AnnotateWords, AnnotationOrchestrator
from annotator.shared.config import StorageBackend


def _record(word: str = "Katze", language: str = "de", **overrides) -> AnnotatedWord:
    data = dict(
        word=word,
        language=language,
        word_type=WordType.NOUN,
        gender=Gender.FEMININE,
        syllables=["Kat", "ze"] if word == "Katze" else [word],
        safe_letters=["k", "a", "e"],
        frequency=0.62,
        has_audio=True,
        has_image=False,
    )
    data.update(overrides)
    return AnnotatedWord(**data)


@pytest.fixture
def fs_repo(tmp_path):
    return FileSystemWordRepository(str(tmp_path))


@pytest.fixture
def sql_repo(tmp_path):
    return SqlWordRepository(f"sqlite:///{tmp_path / 'words.db'}")


@pytest.fixture(params=["filesystem", "sql"])
def repo(request, fs_repo, sql_repo):
    return fs_repo if request.param == "filesystem" else sql_repo


class TestCreateWordRepository:

    def test_filesystem_is_default(self, offline_settings):
        assert isinstance(create_word_repository(offline_settings), FileSystemWordRepository)

    def test_sql_backend(self, offline_settings, tmp_path):
        settings = offline_settings.model_copy(update={
            "STORAGE_BACKEND": StorageBackend.SQL,
            "DATABASE_URL": f"sqlite:///{tmp_path / 'x.db'}",
        })

        assert isinstance(create_word_repository(settings), SqlWordRepository)


@pytest.mark.asyncio
class TestWordRepositories:
    """Behaviour shared by every store backend."""

    async def test_lookup_miss(self, repo):
        await repo.initialize()

        assert await repo.find_by_word_and_language("Katze", "de") is None

    async def test_insert_assigns_id_and_round_trips(self, repo):
        await repo.initialize()

        stored = await repo.insert(_record())
        found = await repo.find_by_word_and_language("Katze", "de")

        assert stored.id
        assert stored.created_at is not None
        assert found is not None
        assert found.id == stored.id
        assert found.word_type == WordType.NOUN
        assert found.gender == Gender.FEMININE
        assert found.syllables == ["Kat", "ze"]
        assert found.safe_letters == ["k", "a", "e"]
        assert found.frequency == pytest.approx(0.62)
        assert found.has_audio is True
        assert found.prooved_by_therapist is False

    async def test_lookup_is_scoped_by_language(self, repo):
        await repo.initialize()
        await repo.insert(_record())

        assert await repo.find_by_word_and_language("Katze", "en") is None

    async def test_lookup_is_case_sensitive(self, repo):
        await repo.initialize()
        await repo.insert(_record())

        assert await repo.find_by_word_and_language("katze", "de") is None

    async def test_duplicate_insert_is_rejected(self, repo):
        await repo.initialize()
        await repo.insert(_record())

        with pytest.raises(DuplicateWordError, match="already exists"):
            await repo.insert(_record())

    async def test_same_word_in_another_language(self, repo):
        await repo.initialize()
        await repo.insert(_record())

        stored = await repo.insert(_record(language="en"))

        assert stored.language == "en"

    async def test_health_check(self, repo):
        await repo.initialize()

        assert await repo.health_check() is True

    async def test_timestamps_come_back_in_utc(self, repo):
        await repo.initialize()
        created = datetime(2024, 5, 1, 12, 30, tzinfo=timezone.utc)
        await repo.insert(_record(created_at=created, updated_at=created))

        found = await repo.find_by_word_and_language("Katze", "de")

        assert found.created_at == created
        assert found.created_at.utcoffset() == timedelta(0)
        assert found.updated_at.utcoffset() == timedelta(0)


@pytest.mark.asyncio
class TestWordReview:
    """Browsing and correcting stored words, shared by every store backend."""

    async def _seed(self, repo):
        await repo.initialize()
        base = datetime(2024, 1, 1, tzinfo=timezone.utc)
        words = [
            ("Katze", "de", True, True),
            ("Hund", "de", True, False),
            ("Haus", "de", False, False),
            ("running", "en", False, True),
        ]
        stored = {}
        for i, (word, language, audio, image) in enumerate(words):
            stored[word] = await repo.insert(_record(
                word,
                language,
                word_type=WordType.VERB if word == "running" else WordType.NOUN,
                has_audio=audio,
                has_image=image,
                created_at=base + timedelta(days=i),
                updated_at=base + timedelta(days=i),
            ))
        return stored

    async def test_get_by_id(self, repo):
        stored = await self._seed(repo)

        found = await repo.get_by_id(stored["Hund"].id)

        assert found.word == "Hund"
        assert await repo.get_by_id("does-not-exist") is None

    async def test_list_is_newest_first(self, repo):
        await self._seed(repo)

        words = await repo.list_words()

        assert [w.word for w in words] == ["running", "Haus", "Hund", "Katze"]

    async def test_list_filters_and_pages(self, repo):
        await self._seed(repo)

        assert [w.word for w in await repo.list_words(language="de", limit=2)] == ["Haus", "Hund"]
        assert [w.word for w in await repo.list_words(language="de", limit=2, offset=2)] == ["Katze"]
        assert [w.word for w in await repo.list_words(query="HA")] == ["Haus"]
        assert [w.word for w in await repo.list_words(query="verb")] == ["running"]

    async def test_counts(self, repo):
        await self._seed(repo)

        assert await repo.count_words() == 4
        assert await repo.count_words(query="h") == 2
        assert await repo.count_words(language="en") == 1
        assert await repo.count_by_language() == {"de": 3, "en": 1}

        media = await repo.count_by_media()
        assert (media.with_audio, media.with_image, media.with_both, media.with_none) == (2, 2, 1, 1)

    async def test_counts_on_empty_store(self, repo):
        await repo.initialize()

        assert await repo.count_words() == 0
        assert await repo.count_by_language() == {}
        assert (await repo.count_by_media()).with_none == 0

    async def test_update_sets_review_flag_and_bumps_updated_at(self, repo):
        stored = await self._seed(repo)
        before = utc_now()

        updated = await repo.update(stored["Katze"].id, {"prooved_by_therapist": True, "gender": None})

        assert updated.id == stored["Katze"].id
        assert updated.prooved_by_therapist is True
        assert updated.gender is None
        assert updated.updated_at >= before
        assert updated.created_at == stored["Katze"].created_at

        found = await repo.find_by_word_and_language("Katze", "de")
        assert found.prooved_by_therapist is True
        assert found.gender is None

    async def test_update_unknown_id(self, repo):
        await self._seed(repo)

        with pytest.raises(WordNotFoundError):
            await repo.update("999999", {"prooved_by_therapist": True})

    async def test_delete(self, repo):
        stored = await self._seed(repo)

        assert await repo.delete(stored["Hund"].id) is True
        assert await repo.get_by_id(stored["Hund"].id) is None
        assert await repo.count_words() == 3
        assert await repo.delete(stored["Hund"].id) is False


@pytest.mark.asyncio
class TestFileSystemWordRepository:

    async def test_writes_camel_case_json_per_language(self, fs_repo, tmp_path):
        await fs_repo.initialize()
        await fs_repo.insert(_record())

        path = tmp_path / "words" / "de" / "words.json"
        data = json.loads(path.read_text(encoding="utf-8"))

        assert data["Katze"]["wordType"] == "noun"
        assert data["Katze"]["safeLetters"] == ["k", "a", "e"]

    async def test_corrupt_file_raises_repository_error(self, fs_repo, tmp_path):
        path = tmp_path / "words" / "de" / "words.json"
        path.parent.mkdir(parents=True)
        path.write_text("{not json", encoding="utf-8")

        with pytest.raises(RepositoryError):
            await fs_repo.find_by_word_and_language("Katze", "de")

    async def test_health_check_before_initialize(self, fs_repo):
        assert await fs_repo.health_check() is False

    async def test_language_cannot_leave_the_store(self, fs_repo, tmp_path):
        await fs_repo.initialize()

        with pytest.raises(RepositoryError):
            await fs_repo.insert(_record(language="../../escaped"))
        with pytest.raises(RepositoryError):
            await fs_repo.find_by_word_and_language("Katze", "../escaped")

        assert not (tmp_path.parent / "escaped").exists()
        assert not (tmp_path / "escaped").exists()

    async def test_concurrent_batches_keep_every_word(self, fs_repo, tmp_path):
        """
        Arrange: eight batches for distinct German words.
        Act: run them concurrently against one language file.
        Assert: no write is lost and the file is still valid JSON.
        """
        await fs_repo.initialize()
        use_case = AnnotateWords(AnnotationOrchestrator(), fs_repo)
        words = ["Haus", "Katze", "Hund", "Buch", "Tisch", "Stuhl", "Baum", "Sonne"]

        await asyncio.gather(*(use_case.execute([WordRequest(word=w)]) for w in words))

        path = tmp_path / "words" / "de" / "words.json"
        assert sorted(json.loads(path.read_text(encoding="utf-8"))) == sorted(words)
        assert await fs_repo.count_words(language="de") == len(words)
        assert list(path.parent.glob("*.tmp")) == []

    async def test_concurrent_batches_for_the_same_word_share_one_record(self, fs_repo):
        await fs_repo.initialize()
        use_case = AnnotateWords(AnnotationOrchestrator(), fs_repo)

        first, second = await asyncio.gather(
            use_case.execute([WordRequest(word="Haus")]),
            use_case.execute([WordRequest(word="Haus")]),
        )

        assert first[0].id == second[0].id
        assert await fs_repo.count_words() == 1
