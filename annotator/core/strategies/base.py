# annotator/core/strategies/base.py
import json
import re
from abc import ABC, abstractmethod
from typing import Any, ClassVar, Dict, FrozenSet, Optional

import structlog

from annotator.core.domain.exceptions import ResponseParseError
from annotator.core.domain.models import Gender, Language, LexicalAnnotation, WordType
from annotator.core.domain.syllables import split_syllables

logger = structlog.get_logger()

_OPENING_BRACE = re.compile(r"\{")


def extract_json_object(text: str) -> Dict[str, Any]:
    """
    Returns the first balanced ``{...}`` JSON object embedded in ``text``.
    LLMs like to wrap their answer in prose or code fences, so every opening
    brace is tried until one decodes into an object.
    """
    decoder = json.JSONDecoder()
    for match in _OPENING_BRACE.finditer(text or ""):
        try:
            candidate, _ = decoder.raw_decode(text, match.start())
        except json.JSONDecodeError:
            continue
        if isinstance(candidate, dict):
            return candidate
    raise ResponseParseError("No JSON object found in LLM response")


class AnnotationStrategy(ABC):
    """
    Language-specific annotation algorithm bundle.

    Encapsulates the three things that differ per language: how the LLM is
    asked, how its answer is read, and which heuristic stands in when the
    LLM cannot be used.
    """

    language: ClassVar[Language]
    vowels: ClassVar[FrozenSet[str]]
    has_grammatical_gender: ClassVar[bool] = False

    @abstractmethod
    def create_prompt(self, word: str) -> str:
        """Builds the LLM instruction for ``word``."""
        ...

    @abstractmethod
    def infer_word_type(self, word: str) -> WordType:
        ...

    def infer_gender(self, word: str, word_type: WordType) -> Optional[Gender]:
        return None

    def split_syllables(self, word: str):
        return split_syllables(word, self.vowels)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def fallback(self, word: str) -> LexicalAnnotation:
        """Deterministic annotation from the word's surface form alone."""
        logger.debug("fallback_annotation", word=word, language=self.language.value)

        word_type = self.infer_word_type(word)
        return LexicalAnnotation(
            word_type=word_type,
            gender=self.infer_gender(word, word_type),
            syllables=self.split_syllables(word),
        )

    def parse_response(self, raw_text: str, original_word: str) -> LexicalAnnotation:
        """
        Reads the LLM answer for ``original_word``.
        Unusable answers are logged and replaced by the fallback annotation.
        """
        try:
            return self._parse(raw_text, original_word)
        except ResponseParseError as e:
            logger.warning(
                "llm_parse_failed",
                word=original_word,
                language=self.language.value,
                error=str(e),
            )
            logger.debug("llm_raw_response", word=original_word, response=raw_text)
            return self.fallback(original_word)

    # ------------------------------------------------------------------
    # Parsing helpers
    # ------------------------------------------------------------------

    def _parse(self, raw_text: str, original_word: str) -> LexicalAnnotation:
        payload = extract_json_object(raw_text)

        raw_type = payload.get("wordType")
        if not raw_type or not isinstance(raw_type, str):
            raise ResponseParseError("No word type found in LLM response")

        syllables = payload.get("syllables")
        if not isinstance(syllables, list) or not syllables:
            raise ResponseParseError("Invalid syllables in LLM response")
        if not all(isinstance(s, str) and s for s in syllables):
            raise ResponseParseError("Syllables must be non-empty strings")
        if "".join(syllables) != original_word:
            raise ResponseParseError(
                f"Syllables {syllables!r} do not reconstruct '{original_word}'"
            )

        word_type = self._coerce_word_type(raw_type)
        gender = self._coerce_gender(payload.get("gender"), word_type)

        return LexicalAnnotation(word_type=word_type, gender=gender, syllables=syllables)

    def _coerce_word_type(self, raw_type: str) -> WordType:
        value = raw_type.strip().lower()
        try:
            return WordType(value)
        except ValueError:
            logger.info("llm_unknown_word_type", word_type=value)
            return WordType.OTHER

    def _coerce_gender(self, raw_gender: Any, word_type: WordType) -> Optional[Gender]:
        if not self.has_grammatical_gender or word_type != WordType.NOUN:
            return None
        if not isinstance(raw_gender, str):
            return None
        try:
            return Gender(raw_gender.strip().lower())
        except ValueError:
            return None
