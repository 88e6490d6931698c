from .http_sources import HttpFrequencySource, HttpMediaSource

__all__ = ["HttpFrequencySource", "HttpMediaSource"]
