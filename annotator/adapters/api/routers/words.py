# annotator/adapters/api/routers/words.py
import time
from typing import List, Optional, Union

import structlog
from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Body, Depends, HTTPException, Query, Response, status

from annotator.adapters.api.dependencies import verify_api_key
from annotator.adapters.api.schemas import AnnotationResponse, StoreInitResponse
from annotator.core.domain.exceptions import (
    AnnotationError,
    DomainError,
    InvalidWordBatchError,
    InvalidWordUpdateError,
    MediaAvailabilityError,
    RepositoryError,
    WordNotFoundError,
)
from annotator.core.domain.models import (
    LANGUAGE_CODE_PATTERN,
    AnnotatedWord,
    WordPage,
    WordRequest,
    WordStats,
    WordUpdate,
)
from annotator.core.ports.word_repository import IWordRepository
from annotator.core.use_cases.annotate_words import AnnotateWords, PopulateWords
from annotator.core.use_cases.manage_words import ManageWords
from annotator.shared.container import Container

logger = structlog.get_logger()

router = APIRouter(prefix="/words", tags=["Words"])


def _to_http_error(error: DomainError) -> HTTPException:
    """Maps domain failures onto HTTP status codes."""
    if isinstance(error, WordNotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(error))
    if isinstance(error, (InvalidWordBatchError, InvalidWordUpdateError)):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(error))
    if isinstance(error, (AnnotationError, MediaAvailabilityError)):
        return HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"Failed to process word annotation request: {error}",
        )
    if isinstance(error, RepositoryError):
        return HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=f"Word store unavailable: {error}",
        )
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(error))


@router.post(
    "/annotate",
    response_model=AnnotationResponse,
    status_code=status.HTTP_200_OK,
    summary="Annotate one or more words",
)
@inject
async def annotate_words(
    payload: Union[List[WordRequest], WordRequest] = Body(..., description="A word request or a list of them"),
    use_case: AnnotateWords = Depends(Provide[Container.annotate_words_use_case]),
):
    """
    Annotates the submitted words, reusing stored annotations.

    **Body:** `{"word": "Haus", "language": "de"}` or a list of such objects.

    **Returns:** the annotated records in request order. The batch is
    all-or-nothing: the first failing word fails the request.
    """
    logger.info("annotation_request_received")
    started = time.perf_counter()

    requests = payload if isinstance(payload, list) else [payload]

    try:
        results = await use_case.execute(requests)
    except DomainError as e:
        logger.error("annotation_request_failed", error=str(e))
        raise _to_http_error(e) from e

    elapsed_ms = round((time.perf_counter() - started) * 1000)
    logger.info("annotation_request_completed", count=len(results), processing_time_ms=elapsed_ms)
    return AnnotationResponse(processing_time_ms=elapsed_ms, data=results)


@router.post(
    "/populate",
    response_model=AnnotationResponse,
    summary="Seed the store with the starter vocabulary",
    dependencies=[Depends(verify_api_key)],
)
@inject
async def populate_words(
    use_case: PopulateWords = Depends(Provide[Container.populate_words_use_case]),
):
    started = time.perf_counter()
    try:
        results = await use_case.execute()
    except DomainError as e:
        logger.error("populate_failed", error=str(e))
        raise _to_http_error(e) from e

    elapsed_ms = round((time.perf_counter() - started) * 1000)
    return AnnotationResponse(processing_time_ms=elapsed_ms, data=results)


@router.post(
    "/init",
    response_model=StoreInitResponse,
    summary="Create the word store schema",
    dependencies=[Depends(verify_api_key)],
)
@inject
async def init_store(
    repository: IWordRepository = Depends(Provide[Container.word_repository]),
):
    try:
        await repository.initialize()
    except RepositoryError as e:
        raise _to_http_error(e) from e
    return StoreInitResponse(message="Word store initialized")


# --- Therapist review (admin) ---

@router.get(
    "",
    response_model=WordPage,
    summary="Search stored words",
    dependencies=[Depends(verify_api_key)],
)
@inject
async def search_words(
    query: str = Query("", description="Substring of the word or its word type"),
    language: Optional[str] = Query(None, pattern=LANGUAGE_CODE_PATTERN.pattern),
    page: int = Query(1, ge=1),
    use_case: ManageWords = Depends(Provide[Container.manage_words_use_case]),
):
    try:
        return await use_case.search(query, language, page)
    except DomainError as e:
        raise _to_http_error(e) from e


@router.get(
    "/recent",
    response_model=List[AnnotatedWord],
    summary="Most recently annotated words",
    dependencies=[Depends(verify_api_key)],
)
@inject
async def recent_words(
    limit: int = Query(5, ge=1, le=50),
    use_case: ManageWords = Depends(Provide[Container.manage_words_use_case]),
):
    try:
        return await use_case.recent(limit)
    except DomainError as e:
        raise _to_http_error(e) from e


@router.get(
    "/stats",
    response_model=WordStats,
    summary="Word counts by language and media availability",
    dependencies=[Depends(verify_api_key)],
)
@inject
async def word_stats(
    use_case: ManageWords = Depends(Provide[Container.manage_words_use_case]),
):
    try:
        return await use_case.stats()
    except DomainError as e:
        raise _to_http_error(e) from e


@router.get(
    "/{word_id}",
    response_model=AnnotatedWord,
    summary="Fetch one stored word",
    dependencies=[Depends(verify_api_key)],
)
@inject
async def get_word(
    word_id: str,
    use_case: ManageWords = Depends(Provide[Container.manage_words_use_case]),
):
    try:
        return await use_case.get(word_id)
    except DomainError as e:
        raise _to_http_error(e) from e


@router.patch(
    "/{word_id}",
    response_model=AnnotatedWord,
    summary="Correct a stored annotation",
    dependencies=[Depends(verify_api_key)],
)
@inject
async def update_word(
    word_id: str,
    update: WordUpdate,
    use_case: ManageWords = Depends(Provide[Container.manage_words_use_case]),
):
    """
    Applies reviewer corrections, e.g. `{"proovedByTherapist": true}`.
    The word and its language cannot be changed.
    """
    try:
        updated = await use_case.update(word_id, update)
    except DomainError as e:
        logger.error("word_update_failed", id=word_id, error=str(e))
        raise _to_http_error(e) from e

    logger.info("word_reviewed", id=word_id, prooved=updated.prooved_by_therapist)
    return updated


@router.delete(
    "/{word_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a stored word",
    dependencies=[Depends(verify_api_key)],
)
@inject
async def delete_word(
    word_id: str,
    use_case: ManageWords = Depends(Provide[Container.manage_words_use_case]),
):
    try:
        await use_case.delete(word_id)
    except DomainError as e:
        raise _to_http_error(e) from e
    return Response(status_code=status.HTTP_204_NO_CONTENT)
