# tests/conftest.py
import pytest
from unittest.mock import AsyncMock, MagicMock

from annotator.core.domain.models import MediaStats
from annotator.core.ports.data_sources import IFrequencySource, IMediaSource
from annotator.core.ports.llm_port import ILanguageModel
from annotator.core.ports.word_repository import IWordRepository
from annotator.shared.config import Settings
from annotator.shared.container import container as app_container


@pytest.fixture(scope="function")
def offline_settings():
    """Settings with every external service unconfigured (pure fallback mode)."""
    return Settings(
        _env_file=None,
        APP_ENV="testing",
        LLM_API_KEY=None,
        LLM_ENDPOINT=None,
        GOOGLE_API_KEY=None,
        WORDFREQ_API_KEY=None,
        WORDFREQ_ENDPOINT=None,
        MEDIA_API_ENDPOINT=None,
        HTTP_RETRY_ATTEMPTS=1,
    )


@pytest.fixture(scope="function")
def production_settings():
    """Settings with all external HTTP services configured."""
    return Settings(
        _env_file=None,
        APP_ENV="production",
        LLM_API_KEY="llm-key",
        LLM_ENDPOINT="https://llm.example.test/v1/completions",
        WORDFREQ_API_KEY="freq-key",
        WORDFREQ_ENDPOINT="https://freq.example.test/frequency",
        MEDIA_API_ENDPOINT="https://media.example.test/lookup",
        HTTP_RETRY_ATTEMPTS=1,
        CIRCUIT_FAILURE_THRESHOLD=2,
    )


@pytest.fixture(scope="function")
def mock_llm():
    """A configured language model; tests set generate_text's return value."""
    llm = MagicMock(spec=ILanguageModel)
    llm.is_available = True
    llm.generate_text = AsyncMock()
    return llm


@pytest.fixture(scope="function")
def unavailable_llm():
    """A language model without credentials."""
    llm = MagicMock(spec=ILanguageModel)
    llm.is_available = False
    llm.generate_text = AsyncMock(side_effect=AssertionError("must not be called"))
    return llm


@pytest.fixture(scope="function")
def mock_frequency_source():
    source = MagicMock(spec=IFrequencySource)
    source.is_available = True
    source.query = AsyncMock(return_value={"frequency": 0.42})
    return source


@pytest.fixture(scope="function")
def mock_media_source():
    source = MagicMock(spec=IMediaSource)
    source.is_available = True
    source.query = AsyncMock(return_value={"audio": True, "image": False})
    return source


@pytest.fixture(scope="function")
def unavailable_source():
    """An external data source that is not configured; must never be queried."""
    source = MagicMock(spec=IMediaSource)
    source.is_available = False
    source.query = AsyncMock(side_effect=AssertionError("must not be called"))
    return source


@pytest.fixture(scope="function")
def mock_repo():
    """Returns a mock word repository that always misses and echoes inserts with an id."""
    repo = MagicMock(spec=IWordRepository)
    repo.initialize = AsyncMock()
    repo.find_by_word_and_language = AsyncMock(return_value=None)
    repo.insert = AsyncMock(side_effect=lambda record: record.model_copy(update={"id": "1"}))
    repo.health_check = AsyncMock(return_value=True)
    repo.get_by_id = AsyncMock(return_value=None)
    repo.list_words = AsyncMock(return_value=[])
    repo.count_words = AsyncMock(return_value=0)
    repo.count_by_language = AsyncMock(return_value={})
    repo.count_by_media = AsyncMock(return_value=MediaStats())
    repo.update = AsyncMock()
    repo.delete = AsyncMock(return_value=False)
    return repo


@pytest.fixture(scope="function")
def container(unavailable_llm, unavailable_source, mock_repo, offline_settings):
    """
    The application container with infrastructure replaced by mocks:
    no LLM credential, no external data services, an in-memory mock store.
    """
    app_container.config.override(offline_settings)
    app_container.language_model.override(unavailable_llm)
    app_container.frequency_source.override(unavailable_source)
    app_container.media_source.override(unavailable_source)
    app_container.word_repository.override(mock_repo)

    yield app_container

    app_container.reset_override()
