# annotator/adapters/llm/gemini.py
from typing import Optional

import google.generativeai as genai
import structlog

from annotator.core.domain.exceptions import LanguageModelError
from annotator.core.ports.llm_port import ILanguageModel
from annotator.shared.config import Settings

logger = structlog.get_logger()

_PLACEHOLDER_KEY = "your_gemini_api_key_here"


class GeminiAdapter(ILanguageModel):
    """
    Driven Adapter for Google Gemini.
    Without a valid GOOGLE_API_KEY the adapter stays unavailable and the
    annotation core uses its offline fallback.
    """

    def __init__(self, settings: Settings):
        self.model = None
        self.api_key: Optional[str] = None

        key = settings.GOOGLE_API_KEY
        if key and key != _PLACEHOLDER_KEY:
            self.api_key = key

        if not self.api_key:
            logger.warning("llm_init_skipped", msg="No valid Google API Key found. Using fallback mode.")
            return

        try:
            genai.configure(api_key=self.api_key)
            self.model = genai.GenerativeModel(settings.AI_MODEL_NAME)
        except Exception as e:
            logger.error("llm_config_failed", error=str(e))
            self.model = None

    @property
    def is_available(self) -> bool:
        return self.model is not None

    async def generate_text(self, prompt: str, *, max_tokens: int, temperature: float) -> str:
        if not self.is_available:
            raise LanguageModelError("Gemini model not configured")

        config = genai.GenerationConfig(max_output_tokens=max_tokens, temperature=temperature)
        try:
            response = await self.model.generate_content_async(prompt, generation_config=config)
            return response.text
        except Exception as e:
            # Quota errors surface as HTTP 429 inside the SDK message
            if "429" in str(e):
                raise LanguageModelError("Gemini API key quota is exceeded") from e
            raise LanguageModelError(f"Gemini request failed: {e}") from e
