# annotator/adapters/llm/__init__.py
from annotator.core.ports.llm_port import ILanguageModel
from annotator.shared.config import LlmProvider, Settings

from .http_completion import HttpCompletionAdapter


def create_language_model(settings: Settings) -> ILanguageModel:
    """Builds the language model adapter selected by LLM_PROVIDER."""
    if settings.LLM_PROVIDER == LlmProvider.GEMINI:
        # Imported lazily so the Google SDK is only loaded when selected
        from .gemini import GeminiAdapter

        return GeminiAdapter(settings)
    return HttpCompletionAdapter(settings)


__all__ = ["HttpCompletionAdapter", "create_language_model"]
