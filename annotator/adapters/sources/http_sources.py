# annotator/adapters/sources/http_sources.py
from typing import Any, Dict, Optional

import httpx
import structlog

from annotator.shared.config import Settings
from annotator.shared.resilience import CircuitBreaker, external_call_retrying

logger = structlog.get_logger()


class _HttpWordLookup:
    """
    Shared GET ``{endpoint}?word=...&lang=...`` client for word-level data
    services. Network errors are retried, then counted by the breaker.
    """

    service_name = "word-lookup"

    def __init__(self, settings: Settings, endpoint: Optional[str], api_key: Optional[str] = None):
        self.endpoint = endpoint or None
        self.api_key = api_key or None
        self.timeout = settings.EXTERNAL_TIMEOUT
        self.retry_attempts = settings.HTTP_RETRY_ATTEMPTS
        # External services are only consulted in production; other
        # environments always use the deterministic mocks.
        self.enabled = settings.is_production
        self.circuit_breaker = CircuitBreaker(
            name=self.service_name,
            failure_threshold=settings.CIRCUIT_FAILURE_THRESHOLD,
            recovery_timeout=settings.CIRCUIT_RECOVERY_TIMEOUT,
        )

    @property
    def is_available(self) -> bool:
        return self.enabled and bool(self.endpoint)

    async def query(self, word: str, language: str) -> Dict[str, Any]:
        return await self.circuit_breaker.a_call(self._fetch, word, language)

    async def _fetch(self, word: str, language: str) -> Dict[str, Any]:
        headers = {}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"

        async for attempt in external_call_retrying(self.retry_attempts):
            with attempt:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.get(
                        self.endpoint,
                        params={"word": word, "lang": language},
                        headers=headers,
                    )
                    response.raise_for_status()
                    data = response.json()

        if not isinstance(data, dict):
            raise ValueError(f"{self.service_name} returned a non-object payload")
        return data


class HttpFrequencySource(_HttpWordLookup):
    """Driven Adapter: word frequency API (needs endpoint and API key)."""

    service_name = "frequency"

    def __init__(self, settings: Settings):
        super().__init__(settings, settings.WORDFREQ_ENDPOINT, settings.WORDFREQ_API_KEY)

    @property
    def is_available(self) -> bool:
        return super().is_available and bool(self.api_key)


class HttpMediaSource(_HttpWordLookup):
    """Driven Adapter: media catalogue API (audio/image availability)."""

    service_name = "media"

    def __init__(self, settings: Settings):
        super().__init__(settings, settings.MEDIA_API_ENDPOINT)
