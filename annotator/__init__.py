"""Linguistic annotation service for speech-therapy vocabulary."""

__version__ = "1.0.0"
