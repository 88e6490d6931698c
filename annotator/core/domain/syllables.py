# annotator/core/domain/syllables.py
"""
Vowel/consonant transition splitter shared by every language strategy.

This is an approximation for fallback purposes, not a hyphenation
dictionary: a syllable is closed whenever a consonant follows a vowel,
provided the running syllable already holds two characters and the
consonant is not the final letter.
"""

from __future__ import annotations

from typing import FrozenSet, List

GERMAN_VOWELS: FrozenSet[str] = frozenset("aeiouäöü")
ENGLISH_VOWELS: FrozenSet[str] = frozenset("aeiouy")

# Words shorter than this are never split.
MIN_SPLIT_LENGTH = 4


def split_syllables(word: str, vowels: FrozenSet[str]) -> List[str]:
    """
    Split ``word`` into syllable-like chunks.

    The chunks always concatenate back to ``word`` and the result is never
    empty. Vowel membership is checked case-insensitively, the returned
    chunks keep the original casing.
    """
    if len(word) < MIN_SPLIT_LENGTH:
        return [word]

    syllables: List[str] = []
    current = ""
    last_index = len(word) - 1

    for i, char in enumerate(word):
        current += char

        if (
            i > 0
            and word[i - 1].lower() in vowels
            and char.lower() not in vowels
            and len(current) >= 2
            and i < last_index
        ):
            syllables.append(current)
            current = ""

    if current:
        syllables.append(current)

    return syllables or [word]
