# annotator/core/domain/models.py
import math
import re
from datetime import datetime, timezone
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator
from pydantic.alias_generators import to_camel

# --- Enums ---

class Language(str, Enum):
    """Languages with a dedicated annotation strategy."""
    DE = "de"
    EN = "en"

    @classmethod
    def resolve(cls, code: Optional[str]) -> "Language":
        """
        Maps a language code onto a supported language.
        Unsupported or empty codes fall back to German.
        """
        normalized = (code or "").strip().lower()
        for member in cls:
            if member.value == normalized:
                return member
        return cls.DE


DEFAULT_LANGUAGE = Language.DE

# ISO 639 code with an optional region ("de", "en", "gsw", "pt-br").
# Codes are used as storage keys, so anything else is rejected.
LANGUAGE_CODE_PATTERN = re.compile(r"^[a-z]{2,3}(-[a-z]{2,4})?$")


def is_valid_language_code(code: Optional[str]) -> bool:
    return bool(code) and LANGUAGE_CODE_PATTERN.fullmatch(code) is not None


class WordType(str, Enum):
    NOUN = "noun"
    VERB = "verb"
    ADJECTIVE = "adjective"
    ADVERB = "adverb"
    PRONOUN = "pronoun"
    PREPOSITION = "preposition"
    CONJUNCTION = "conjunction"
    INTERJECTION = "interjection"
    ARTICLE = "article"
    NUMERAL = "numeral"
    OTHER = "other"


class Gender(str, Enum):
    """Grammatical gender. A word without gender carries None, not a member."""
    MASCULINE = "masculine"
    FEMININE = "feminine"
    NEUTER = "neuter"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)

# --- Value Objects ---

class LexicalAnnotation(BaseModel):
    """
    The language-dependent part of an annotation: what the LLM (or the
    strategy's fallback heuristic) says about the word.
    """
    model_config = ConfigDict(frozen=True)

    word_type: WordType
    gender: Optional[Gender] = None
    syllables: List[str] = Field(..., min_length=1)


class MediaAvailability(BaseModel):
    model_config = ConfigDict(frozen=True)

    has_audio: bool = False
    has_image: bool = False

# --- Entities ---

class AnnotatedWord(BaseModel):
    """
    A fully annotated word.

    Produced by the orchestrator without an id; the word repository assigns
    the id (and may refresh the timestamps) on insert. Serialised with
    camelCase keys for API consumers.
    """
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    id: Optional[str] = None
    word: str
    language: str
    word_type: WordType
    gender: Optional[Gender] = None
    syllables: List[str] = Field(..., min_length=1)
    safe_letters: List[str] = Field(default_factory=list)
    frequency: float = Field(..., ge=0.0, le=1.0)
    has_audio: bool = False
    has_image: bool = False
    prooved_by_therapist: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class WordRequest(BaseModel):
    """A single word submitted for annotation."""
    word: str = Field(..., min_length=1, description="The word to annotate")
    language: str = Field(DEFAULT_LANGUAGE.value, description="ISO 639-1 code, defaults to German")

    @field_validator("word")
    @classmethod
    def _strip_word(cls, value: str) -> str:
        stripped = value.strip()
        if not stripped:
            raise ValueError("word must not be blank")
        return stripped

    @field_validator("language")
    @classmethod
    def _normalize_language(cls, value: str) -> str:
        normalized = (value or DEFAULT_LANGUAGE.value).strip().lower()
        if not is_valid_language_code(normalized):
            raise ValueError("language must be an ISO 639 code such as 'de' or 'en'")
        return normalized


class WordUpdate(BaseModel):
    """
    Reviewer corrections to a stored annotation (all fields optional).
    The word and its language identify the record and cannot be changed.
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="forbid")

    word_type: Optional[WordType] = None
    gender: Optional[Gender] = None
    syllables: Optional[List[str]] = Field(None, min_length=1)
    safe_letters: Optional[List[str]] = None
    frequency: Optional[float] = Field(None, ge=0.0, le=1.0)
    has_audio: Optional[bool] = None
    has_image: Optional[bool] = None
    prooved_by_therapist: Optional[bool] = None

    def changes(self) -> Dict[str, object]:
        """Only the fields the caller actually sent (an explicit null gender clears it)."""
        changes = self.model_dump(exclude_unset=True)
        return {key: value for key, value in changes.items() if value is not None or key == "gender"}

# --- Read Models ---

class MediaStats(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    with_audio: int = 0
    with_image: int = 0
    with_both: int = 0
    with_none: int = 0


class WordStats(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    total_words: int
    by_language: Dict[str, int]
    media: MediaStats


class WordPage(BaseModel):
    """One page of a filtered word listing."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    items: List[AnnotatedWord]
    total: int
    page: int
    page_size: int

    @computed_field
    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.page_size) if self.page_size else 0
