# annotator/core/ports/llm_port.py
from abc import ABC, abstractmethod


class ILanguageModel(ABC):
    """
    Port (Interface) for Language Model interactions.
    Adapters (HttpCompletionAdapter, GeminiAdapter) must implement this.
    """

    @property
    @abstractmethod
    def is_available(self) -> bool:
        """
        False when no credential is configured. Callers must then skip the
        request entirely and use their offline fallback.
        """
        ...

    @abstractmethod
    async def generate_text(self, prompt: str, *, max_tokens: int, temperature: float) -> str:
        """
        Sends a prompt and returns the raw completion text.

        Raises:
            LanguageModelError: on transport, authentication or quota failures.
        """
        ...
