# annotator/adapters/api/schemas.py
from typing import List

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from annotator.core.domain.models import AnnotatedWord


class AnnotationResponse(BaseModel):
    """Envelope returned by the annotation endpoints."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    success: bool = True
    processing_time_ms: int
    data: List[AnnotatedWord]


class StoreInitResponse(BaseModel):
    success: bool = True
    message: str
