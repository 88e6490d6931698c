# annotator/core/services/frequency.py
from typing import Optional

import structlog

from annotator.core.ports.data_sources import IFrequencySource

logger = structlog.get_logger()

MIN_MOCK_FREQUENCY = 0.01
MAX_MOCK_FREQUENCY = 0.99


def mock_frequency(word: str) -> float:
    """
    Deterministic stand-in for a real frequency lookup.

    Mid-length words (5-8 letters) score highest, the character code sum
    adds a stable per-word jitter. Same word, same value, so tests and
    offline runs are reproducible.
    """
    normalized = word.lower()
    length = len(normalized)

    if 5 <= length <= 8:
        length_factor = 0.7
    elif length < 5:
        length_factor = 0.5 + length * 0.1
    else:
        length_factor = 0.9 - (length - 8) * 0.05

    char_sum = sum(ord(char) for char in normalized)
    random_factor = (char_sum % 100) / 100

    frequency = length_factor * 0.7 + random_factor * 0.3
    return max(MIN_MOCK_FREQUENCY, min(MAX_MOCK_FREQUENCY, frequency))


class FrequencyEstimator:
    """
    Determines how common a word is, on a 0-1 scale.

    Uses the external frequency service when it is available; any failure
    there is absorbed and answered with the deterministic mock.
    """

    def __init__(self, source: Optional[IFrequencySource] = None):
        self.source = source

    async def estimate(self, word: str, language: str) -> float:
        logger.debug("frequency_lookup", word=word, language=language)

        if self.source is None or not self.source.is_available:
            return self._mock(word)

        try:
            data = await self.source.query(word, language)
            value = float(data.get("frequency") or 0)
        except Exception as e:
            logger.warning("frequency_lookup_failed", word=word, error=str(e))
            return self._mock(word)

        return max(0.0, min(1.0, value))

    def _mock(self, word: str) -> float:
        frequency = mock_frequency(word)
        logger.debug("frequency_mocked", word=word, frequency=frequency)
        return frequency
