# annotator/core/strategies/english.py
from annotator.core.domain.models import Language, WordType
from annotator.core.domain.syllables import ENGLISH_VOWELS
from annotator.core.strategies.base import AnnotationStrategy

_NOUN_SUFFIXES = ("ment", "ness", "ity")
_ADJECTIVE_SUFFIXES = ("ful", "less", "ish", "ive", "ous", "able")


class EnglishAnnotationStrategy(AnnotationStrategy):
    """Annotation strategy for English. English nouns carry no gender."""

    language = Language.EN
    vowels = ENGLISH_VOWELS

    def create_prompt(self, word: str) -> str:
        return f"""
Analyze the English word "{word}" and provide the following information in JSON format:

1. wordType: The grammatical type (noun, verb, adjective, etc.)
2. syllables: Break the word into syllables

Example response format:
{{
  "wordType": "noun",
  "syllables": ["ap", "ple"]
}}
""".strip()

    def infer_word_type(self, word: str) -> WordType:
        # Common suffix patterns only
        if word.endswith("ing") and len(word) > 4:
            return WordType.VERB
        if word.endswith("ly") and len(word) > 3:
            return WordType.ADVERB
        if word.endswith(_NOUN_SUFFIXES):
            return WordType.NOUN
        if word.endswith(_ADJECTIVE_SUFFIXES):
            return WordType.ADJECTIVE
        return WordType.OTHER
