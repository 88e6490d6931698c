# tests/adapters/test_api_endpoints.py
from datetime import datetime, timezone

import pytest
from fastapi import status
from fastapi.testclient import TestClient
from unittest.mock import AsyncMock

from annotator.core.domain.exceptions import RepositoryError
from annotator.core.domain.models import AnnotatedWord, Gender, MediaStats, WordType
from annotator.core.use_cases import INITIAL_WORDS
from annotator.main import create_app
from annotator.shared.config import AppEnv, settings


@pytest.fixture
def client(container, monkeypatch):
    """
    Returns a FastAPI TestClient.

    The 'container' fixture (from conftest.py) has already replaced the
    LLM, the data services and the word store with mocks.
    """
    # Keep structlog bound to pytest's stream set up by earlier tests
    monkeypatch.setattr("annotator.main.configure_logging", lambda *args, **kwargs: None)
    app = create_app()
    with TestClient(app) as c:
        yield c


@pytest.fixture
def no_admin_secret(monkeypatch):
    monkeypatch.setattr(settings, "API_SECRET", None)
    monkeypatch.setattr(settings, "APP_ENV", AppEnv.TESTING)


@pytest.fixture
def admin_secret(monkeypatch):
    monkeypatch.setattr(settings, "API_SECRET", "s3cret")
    return "s3cret"


class TestAnnotateEndpoint:

    def test_single_word(self, client):
        """
        Scenario: One German word, everything offline.
        Expected: 200 with a camelCase record built from heuristics.
        """
        # Act
        response = client.post("/api/v1/words/annotate", json={"word": "Lehrer", "language": "de"})

        # Assert
        assert response.status_code == status.HTTP_200_OK
        body = response.json()
        assert body["success"] is True
        assert isinstance(body["processingTimeMs"], int)
        record = body["data"][0]
        assert record["id"] == "1"
        assert record["word"] == "Lehrer"
        assert record["wordType"] == "noun"
        assert record["gender"] == "masculine"
        assert record["syllables"] == ["Leh", "rer"]
        assert record["safeLetters"] == ["l", "e", "r"]
        assert record["proovedByTherapist"] is False

    def test_language_defaults_to_german(self, client):
        response = client.post("/api/v1/words/annotate", json={"word": "Haus"})

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["data"][0]["language"] == "de"

    def test_list_of_words_keeps_order(self, client):
        payload = [{"word": "Katze"}, {"word": "running", "language": "en"}]

        response = client.post("/api/v1/words/annotate", json=payload)

        assert response.status_code == status.HTTP_200_OK
        data = response.json()["data"]
        assert [r["word"] for r in data] == ["Katze", "running"]
        assert data[1]["wordType"] == "verb"

    def test_empty_list_is_bad_request(self, client):
        response = client.post("/api/v1/words/annotate", json=[])

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        body = response.json()
        assert body["status"] == "error"
        assert body["code"] == 400
        assert "No words provided" in body["message"]

    def test_too_many_words_is_bad_request(self, client):
        payload = [{"word": f"Wort{i}"} for i in range(51)]

        response = client.post("/api/v1/words/annotate", json=payload)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert "max: 50" in response.json()["message"]

    def test_blank_word_is_rejected(self, client):
        response = client.post("/api/v1/words/annotate", json={"word": "   "})

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    def test_language_must_be_a_language_code(self, client, mock_repo):
        response = client.post("/api/v1/words/annotate", json={"word": "Haus", "language": "../../x"})

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        mock_repo.find_by_word_and_language.assert_not_awaited()

    def test_llm_failure_is_bad_gateway(self, client, container, mock_llm):
        mock_llm.generate_text = AsyncMock(side_effect=ConnectionError("unreachable"))
        container.language_model.override(mock_llm)

        response = client.post("/api/v1/words/annotate", json={"word": "Haus"})

        assert response.status_code == status.HTTP_502_BAD_GATEWAY
        assert "Failed to process word annotation request" in response.json()["message"]

    def test_store_failure_is_service_unavailable(self, client, mock_repo):
        mock_repo.find_by_word_and_language.side_effect = RepositoryError("disk full")

        response = client.post("/api/v1/words/annotate", json={"word": "Haus"})

        assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE


class TestAdminEndpoints:

    def test_populate_with_dev_bypass(self, client, no_admin_secret):
        response = client.post("/api/v1/words/populate")

        assert response.status_code == status.HTTP_200_OK
        assert [r["word"] for r in response.json()["data"]] == list(INITIAL_WORDS)

    def test_init_requires_key_when_secret_is_set(self, client, admin_secret):
        response = client.post("/api/v1/words/init")

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json()["code"] == 401

    def test_init_rejects_wrong_key(self, client, admin_secret):
        response = client.post("/api/v1/words/init", headers={"X-API-Key": "wrong"})

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_init_with_valid_key(self, client, admin_secret, mock_repo):
        response = client.post("/api/v1/words/init", headers={"X-API-Key": admin_secret})

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"success": True, "message": "Word store initialized"}
        # once at startup, once for the request
        assert mock_repo.initialize.await_count == 2

    def test_production_without_secret_fails_closed(self, client, monkeypatch):
        monkeypatch.setattr(settings, "API_SECRET", None)
        monkeypatch.setattr(settings, "APP_ENV", AppEnv.PRODUCTION)

        response = client.post("/api/v1/words/init")

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR


def _stored(word: str = "Haus", **overrides) -> AnnotatedWord:
    data = dict(
        id="7",
        word=word,
        language="de",
        word_type=WordType.NOUN,
        gender=Gender.NEUTER,
        syllables=[word],
        safe_letters=["h", "a"],
        frequency=0.8,
        created_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
        updated_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
    )
    data.update(overrides)
    return AnnotatedWord(**data)


class TestReviewEndpoints:

    def test_search_returns_a_page(self, client, no_admin_secret, mock_repo):
        mock_repo.list_words.return_value = [_stored()]
        mock_repo.count_words.return_value = 11

        response = client.get("/api/v1/words", params={"query": "ha", "language": "de", "page": 2})

        assert response.status_code == status.HTTP_200_OK
        body = response.json()
        assert body["total"] == 11
        assert body["page"] == 2
        assert body["totalPages"] == 2
        assert body["items"][0]["wordType"] == "noun"
        mock_repo.list_words.assert_awaited_once_with("ha", "de", 10, 10)

    def test_search_rejects_bad_language(self, client, no_admin_secret):
        response = client.get("/api/v1/words", params={"language": "../de"})

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    def test_stats(self, client, no_admin_secret, mock_repo):
        mock_repo.count_words.return_value = 3
        mock_repo.count_by_language.return_value = {"de": 2, "en": 1}
        mock_repo.count_by_media.return_value = MediaStats(with_audio=1, with_none=2)

        response = client.get("/api/v1/words/stats")

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {
            "totalWords": 3,
            "byLanguage": {"de": 2, "en": 1},
            "media": {"withAudio": 1, "withImage": 0, "withBoth": 0, "withNone": 2},
        }

    def test_get_unknown_word(self, client, no_admin_secret):
        response = client.get("/api/v1/words/404")

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["code"] == 404

    def test_mark_word_as_reviewed(self, client, no_admin_secret, mock_repo):
        mock_repo.get_by_id.return_value = _stored()
        mock_repo.update.return_value = _stored(prooved_by_therapist=True)

        response = client.patch("/api/v1/words/7", json={"proovedByTherapist": True})

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["proovedByTherapist"] is True
        mock_repo.update.assert_awaited_once_with("7", {"prooved_by_therapist": True})

    def test_word_itself_cannot_be_changed(self, client, no_admin_secret, mock_repo):
        response = client.patch("/api/v1/words/7", json={"word": "Maus"})

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        mock_repo.update.assert_not_awaited()

    def test_syllables_must_spell_the_word(self, client, no_admin_secret, mock_repo):
        mock_repo.get_by_id.return_value = _stored()

        response = client.patch("/api/v1/words/7", json={"syllables": ["Ma", "us"]})

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_delete(self, client, no_admin_secret, mock_repo):
        mock_repo.delete.return_value = True

        response = client.delete("/api/v1/words/7")

        assert response.status_code == status.HTTP_204_NO_CONTENT
        assert response.content == b""

    def test_delete_unknown_word(self, client, no_admin_secret):
        response = client.delete("/api/v1/words/7")

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_review_requires_key_when_secret_is_set(self, client, admin_secret, mock_repo):
        assert client.get("/api/v1/words").status_code == status.HTTP_401_UNAUTHORIZED
        assert client.patch("/api/v1/words/7", json={}).status_code == status.HTTP_401_UNAUTHORIZED
        assert client.delete("/api/v1/words/7").status_code == status.HTTP_401_UNAUTHORIZED
        mock_repo.delete.assert_not_awaited()


class TestHealthEndpoints:

    def test_liveness(self, client):
        response = client.get("/api/v1/health/live")

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"status": "ok", "service": "word-annotator"}

    def test_readiness(self, client):
        response = client.get("/api/v1/health/ready")

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"storage": "up"}

    def test_readiness_with_broken_store(self, client, mock_repo):
        mock_repo.health_check.return_value = False

        response = client.get("/api/v1/health/ready")

        assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
        assert response.json() == {"storage": "down"}
