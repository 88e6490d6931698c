# annotator/core/strategies/__init__.py
"""
Language strategies.

The set of supported languages is closed (see ``Language``), so selection
is a fixed enum-to-strategy table rather than an open registry.
"""

from typing import Dict, Optional, Union

from annotator.core.domain.models import Language
from annotator.core.strategies.base import AnnotationStrategy, extract_json_object
from annotator.core.strategies.english import EnglishAnnotationStrategy
from annotator.core.strategies.german import GermanAnnotationStrategy

_STRATEGIES: Dict[Language, AnnotationStrategy] = {
    Language.DE: GermanAnnotationStrategy(),
    Language.EN: EnglishAnnotationStrategy(),
}


def get_strategy(language: Optional[Union[str, Language]]) -> AnnotationStrategy:
    """Returns the strategy for ``language``; unsupported codes get German."""
    if not isinstance(language, Language):
        language = Language.resolve(language)
    return _STRATEGIES[language]


__all__ = [
    "AnnotationStrategy",
    "EnglishAnnotationStrategy",
    "GermanAnnotationStrategy",
    "extract_json_object",
    "get_strategy",
]
