# annotator/adapters/llm/http_completion.py
from typing import Optional

import httpx
import structlog

from annotator.core.domain.exceptions import LanguageModelError
from annotator.core.ports.llm_port import ILanguageModel
from annotator.shared.config import Settings
from annotator.shared.resilience import external_call_retrying

logger = structlog.get_logger()


class HttpCompletionAdapter(ILanguageModel):
    """
    Driven Adapter for a generic text-completion HTTP endpoint
    (OpenAI-style ``POST {model, prompt, max_tokens, temperature}``,
    answer in ``choices[0].text``).
    """

    def __init__(self, settings: Settings):
        self.api_key: Optional[str] = settings.LLM_API_KEY or None
        self.endpoint: Optional[str] = settings.LLM_ENDPOINT or None
        self.model = settings.LLM_MODEL
        self.timeout = settings.LLM_TIMEOUT
        self.retry_attempts = settings.HTTP_RETRY_ATTEMPTS

        if not self.api_key:
            logger.warning("llm_init_skipped", msg="LLM API key not configured. Using fallback mode.")

    @property
    def is_available(self) -> bool:
        return bool(self.api_key)

    async def generate_text(self, prompt: str, *, max_tokens: int, temperature: float) -> str:
        if not self.is_available:
            raise LanguageModelError("LLM API key not configured")
        if not self.endpoint:
            raise LanguageModelError("LLM endpoint not configured")

        payload = {
            "model": self.model,
            "prompt": prompt,
            "max_tokens": max_tokens,
            "temperature": temperature,
        }
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.api_key}",
        }

        try:
            async for attempt in external_call_retrying(self.retry_attempts):
                with attempt:
                    async with httpx.AsyncClient(timeout=self.timeout) as client:
                        response = await client.post(self.endpoint, json=payload, headers=headers)
                        response.raise_for_status()
                        data = response.json()
        except httpx.HTTPStatusError as e:
            status_code = e.response.status_code
            if status_code in (401, 403):
                raise LanguageModelError(f"LLM authentication failed ({status_code})") from e
            if status_code == 429:
                raise LanguageModelError("LLM quota exceeded") from e
            raise LanguageModelError(f"LLM API error: {status_code} {e.response.text}") from e
        except httpx.HTTPError as e:
            raise LanguageModelError(f"LLM request failed: {e}") from e

        try:
            return data["choices"][0]["text"]
        except (KeyError, IndexError, TypeError) as e:
            raise LanguageModelError("LLM response has no completion text") from e
