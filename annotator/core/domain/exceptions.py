# annotator/core/domain/exceptions.py
class DomainError(Exception):
    """Base class for all domain-level exceptions."""
    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)

# --- Annotation Errors ---

class AnnotationError(DomainError):
    """Raised when a word cannot be annotated at all (e.g. the LLM is unreachable)."""
    def __init__(self, word: str, reason: str):
        self.word = word
        super().__init__(f"Annotation failed for '{word}': {reason}")

class AnnotationTimeoutError(AnnotationError):
    """Raised when the annotation of a single word exceeds its time budget."""
    def __init__(self, word: str, timeout: float):
        self.timeout = timeout
        super().__init__(word, f"timed out after {timeout}s")

class ResponseParseError(DomainError):
    """Raised when an LLM response does not contain a usable annotation payload."""
    pass

# --- External Capability Errors ---

class LanguageModelError(DomainError):
    """Transport, authentication or quota failure of the language model."""
    pass

class MediaAvailabilityError(DomainError):
    """Raised when the external media service fails. Not absorbed by a fallback."""
    def __init__(self, word: str, reason: str):
        self.word = word
        super().__init__(f"Media availability check failed for '{word}': {reason}")

class RepositoryError(DomainError):
    """Raised when the annotated-word store cannot read or write."""
    pass

class DuplicateWordError(RepositoryError):
    """Raised when the (word, language) pair is already stored."""
    def __init__(self, word: str, language: str):
        self.word = word
        self.language = language
        super().__init__(f"Word '{word}' already exists for language '{language}'")

# --- Validation Errors ---

class InvalidWordBatchError(DomainError):
    """Raised when a batch request is empty or exceeds the configured limit."""
    def __init__(self, reason: str):
        super().__init__(f"Invalid word batch: {reason}")

class InvalidWordUpdateError(DomainError):
    """Raised when a correction would break an annotation invariant."""
    def __init__(self, reason: str):
        super().__init__(f"Invalid word update: {reason}")

# --- Store Errors ---

class WordNotFoundError(DomainError):
    """Raised when no stored annotation has the requested id."""
    def __init__(self, word_id: str):
        self.word_id = word_id
        super().__init__(f"Word with ID {word_id} not found")
