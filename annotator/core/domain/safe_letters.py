# annotator/core/domain/safe_letters.py
import math
from typing import List

import structlog

logger = structlog.get_logger()

# Umlauts are included for every language.
SAFE_VOWELS = frozenset("aeiouäöü")

# At most this share of a word's letters may be given away as hints.
MAX_SAFE_RATIO = 0.6


def select_safe_letters(word: str) -> List[str]:
    """
    Picks the letters of ``word`` that may be shown as hints in a
    word-completion exercise.

    Always the first letter, every vowel and the last letter (lower-cased,
    deduplicated in first-seen order), capped at ``ceil(0.6 * len(word))``.

    Never raises: on any unexpected error the result degrades to the first
    and last letter.
    """
    try:
        return _select(word)
    except Exception as e:
        logger.error("safe_letters_failed", word=word, error=str(e))
        return _degraded(word)


def _select(word: str) -> List[str]:
    normalized = word.lower()
    candidates = [normalized[0]]

    for letter in normalized[1:]:
        if letter in SAFE_VOWELS:
            candidates.append(letter)

    last = normalized[-1]
    if last not in candidates:
        candidates.append(last)

    limit = math.ceil(len(normalized) * MAX_SAFE_RATIO)
    unique = list(dict.fromkeys(candidates))
    result = unique[:limit]

    logger.debug("safe_letters_selected", word=word, letters=result)
    return result


def _degraded(word: str) -> List[str]:
    if not word:
        return []
    return [word[0].lower(), word[-1].lower()]
