# annotator/shared/config.py
from enum import Enum
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class AppEnv(str, Enum):
    DEVELOPMENT = "development"
    PRODUCTION = "production"
    TESTING = "testing"


class StorageBackend(str, Enum):
    FILESYSTEM = "filesystem"
    SQL = "sql"


class LlmProvider(str, Enum):
    HTTP = "http"      # Generic text-completion endpoint
    GEMINI = "gemini"  # Google Gemini via google-generativeai


class Settings(BaseSettings):
    """
    Central Configuration Registry.
    Strictly typed and validated via Pydantic.
    """

    # --- Application Meta ---
    APP_NAME: str = "word-annotator"
    APP_ENV: AppEnv = AppEnv.DEVELOPMENT
    DEBUG: bool = False

    # --- Security ---
    # Unset in development means admin endpoints are open (dev bypass).
    API_SECRET: Optional[str] = None

    # --- Logging & Observability ---
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "json"
    OTEL_SERVICE_NAME: str = "word-annotator"
    OTEL_EXPORTER_OTLP_ENDPOINT: Optional[str] = None

    # --- LLM ---
    LLM_PROVIDER: LlmProvider = LlmProvider.HTTP
    LLM_API_KEY: Optional[str] = None
    LLM_ENDPOINT: Optional[str] = None
    LLM_MODEL: str = "gpt-3.5-turbo-instruct"
    GOOGLE_API_KEY: Optional[str] = None
    AI_MODEL_NAME: str = "gemini-1.5-pro"
    LLM_MAX_TOKENS: int = 100
    LLM_TEMPERATURE: float = 0.2
    LLM_TIMEOUT: float = 30.0

    # --- External Data Services ---
    WORDFREQ_API_KEY: Optional[str] = None
    WORDFREQ_ENDPOINT: Optional[str] = None
    MEDIA_API_ENDPOINT: Optional[str] = None
    EXTERNAL_TIMEOUT: float = 10.0

    # --- Resilience ---
    HTTP_RETRY_ATTEMPTS: int = 3
    CIRCUIT_FAILURE_THRESHOLD: int = 5
    CIRCUIT_RECOVERY_TIMEOUT: int = 30

    # --- Annotation ---
    ANNOTATION_TIMEOUT_SEC: float = 60.0
    MAX_WORDS_PER_REQUEST: int = 50
    WORDS_PAGE_SIZE: int = 10

    # --- Persistence ---
    STORAGE_BACKEND: StorageBackend = StorageBackend.FILESYSTEM
    FILESYSTEM_REPO_PATH: str = "./data"
    DATABASE_URL: str = "sqlite:///./annotated_words.db"

    @property
    def is_production(self) -> bool:
        return self.APP_ENV == AppEnv.PRODUCTION

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


settings = Settings()
