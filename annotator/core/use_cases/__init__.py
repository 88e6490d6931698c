from .annotate_word import AnnotationOrchestrator
from .annotate_words import INITIAL_WORDS, AnnotateWords, PopulateWords
from .manage_words import ManageWords

__all__ = [
    "AnnotateWords",
    "AnnotationOrchestrator",
    "INITIAL_WORDS",
    "ManageWords",
    "PopulateWords",
]
