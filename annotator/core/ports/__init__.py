# annotator/core/ports/__init__.py
"""
Core Ports (Interfaces).

The abstract capabilities the annotation core consumes. Infrastructure
adapters implement them so the core never knows whether it talks to an
HTTP service, Gemini, a JSON file or a SQL database.
"""

from .data_sources import IFrequencySource, IMediaSource
from .llm_port import ILanguageModel
from .word_repository import IWordRepository

__all__ = [
    "IFrequencySource",
    "ILanguageModel",
    "IMediaSource",
    "IWordRepository",
]
