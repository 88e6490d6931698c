from .frequency import FrequencyEstimator, mock_frequency
from .llm_annotator import LlmAnnotator
from .media import MediaAvailabilityEstimator, mock_media_availability

__all__ = [
    "FrequencyEstimator",
    "LlmAnnotator",
    "MediaAvailabilityEstimator",
    "mock_frequency",
    "mock_media_availability",
]
