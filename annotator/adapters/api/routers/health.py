# annotator/adapters/api/routers/health.py
from typing import Dict

import structlog
from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends, Response, status

from annotator.core.ports.word_repository import IWordRepository
from annotator.shared.container import Container

logger = structlog.get_logger()

router = APIRouter(prefix="/health", tags=["System"])


@router.get("/live", status_code=status.HTTP_200_OK)
async def liveness_check():
    """Returns 200 OK if the service process is up."""
    return {"status": "ok", "service": "word-annotator"}


@router.get("/ready", status_code=status.HTTP_200_OK)
@inject
async def readiness_check(
    response: Response,
    repo: IWordRepository = Depends(Provide[Container.word_repository]),
) -> Dict[str, str]:
    """
    Checks the word store. The external LLM / data services are optional
    (the core falls back to heuristics), so they do not gate readiness.
    """
    health_status = {"storage": "down"}

    try:
        if await repo.health_check():
            health_status["storage"] = "up"
    except Exception as e:
        logger.error("health_check_failed", component="storage", error=str(e))

    if health_status["storage"] != "up":
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    return health_status
