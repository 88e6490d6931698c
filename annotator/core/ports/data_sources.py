# annotator/core/ports/data_sources.py
from typing import Any, Dict, Protocol


class IFrequencySource(Protocol):
    """
    Port for an external word-frequency service.
    Returns the raw payload, e.g. ``{"frequency": 0.42}``.
    """

    @property
    def is_available(self) -> bool:
        ...

    async def query(self, word: str, language: str) -> Dict[str, Any]:
        ...


class IMediaSource(Protocol):
    """
    Port for an external media catalogue.
    Returns the raw payload, e.g. ``{"audio": true, "image": false}``.
    """

    @property
    def is_available(self) -> bool:
        ...

    async def query(self, word: str, language: str) -> Dict[str, Any]:
        ...
