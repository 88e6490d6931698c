# annotator/core/strategies/german.py
import re
from typing import Optional

from annotator.core.domain.models import Gender, Language, WordType
from annotator.core.domain.syllables import GERMAN_VOWELS
from annotator.core.strategies.base import AnnotationStrategy

# German nouns are capitalised.
_NOUN_PATTERN = re.compile(r"^[A-ZÄÖÜ]")

# Checked in this order; the first matching group wins.
_GENDER_SUFFIXES = (
    (Gender.MASCULINE, ("er", "ig", "or")),
    (Gender.FEMININE, ("ung", "heit", "keit", "schaft", "tät")),
    (Gender.NEUTER, ("chen", "lein", "ment")),
)


class GermanAnnotationStrategy(AnnotationStrategy):
    """
    Annotation strategy for German.
    Handles noun gender in addition to word type and syllables.
    """

    language = Language.DE
    vowels = GERMAN_VOWELS
    has_grammatical_gender = True

    def create_prompt(self, word: str) -> str:
        # The instruction itself is in English, only the analysed word is German.
        return f"""
Analyze the German word "{word}" and provide the following information in JSON format:

1. wordType: The grammatical type (noun, verb, adjective, etc.)
2. gender: For nouns, specify the gender (masculine, feminine, neuter)
3. syllables: Break the word into syllables

Example response format:
{{
  "wordType": "noun",
  "gender": "masculine",
  "syllables": ["Ap", "fel"]
}}
""".strip()

    def infer_word_type(self, word: str) -> WordType:
        return WordType.NOUN if _NOUN_PATTERN.match(word) else WordType.OTHER

    def infer_gender(self, word: str, word_type: WordType) -> Optional[Gender]:
        if word_type != WordType.NOUN:
            return None
        for gender, suffixes in _GENDER_SUFFIXES:
            if word.endswith(suffixes):
                return gender
        return None
