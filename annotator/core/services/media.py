# annotator/core/services/media.py
from typing import Optional

import structlog

from annotator.core.domain.exceptions import MediaAvailabilityError
from annotator.core.domain.models import MediaAvailability
from annotator.core.ports.data_sources import IMediaSource

logger = structlog.get_logger()


def mock_media_availability(word: str) -> MediaAvailability:
    """
    Deterministic stand-in for the media catalogue.
    Shorter words are assumed to be more likely to have media.
    """
    normalized = word.lower()
    word_sum = sum(ord(char) for char in normalized)

    length = len(normalized)
    length_factor = 0.8 if length <= 6 else (16 - min(length, 15)) / 10

    return MediaAvailability(
        has_audio=(word_sum % 5 > 1) and (length_factor > 0.7),
        has_image=(word_sum % 7 > 2) and (length_factor > 0.6),
    )


class MediaAvailabilityEstimator:
    """
    Checks whether audio and image resources exist for a word.

    Unlike the frequency estimator, a failing media service is NOT hidden
    behind the mock: the error surfaces as MediaAvailabilityError and fails
    the annotation of that word.
    """

    def __init__(self, source: Optional[IMediaSource] = None):
        self.source = source

    async def estimate(self, word: str, language: str) -> MediaAvailability:
        logger.debug("media_lookup", word=word, language=language)

        if self.source is None or not self.source.is_available:
            availability = mock_media_availability(word)
            logger.debug(
                "media_mocked",
                word=word,
                audio=availability.has_audio,
                image=availability.has_image,
            )
            return availability

        try:
            data = await self.source.query(word, language)
            return MediaAvailability(
                has_audio=bool(data.get("audio", False)),
                has_image=bool(data.get("image", False)),
            )
        except Exception as e:
            logger.warning("media_lookup_failed", word=word, error=str(e))
            raise MediaAvailabilityError(word, str(e)) from e
