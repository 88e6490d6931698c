# annotator/adapters/api/dependencies.py
from __future__ import annotations

import re
import secrets
from typing import Optional

from fastapi import HTTPException, Security, status
from fastapi.security import APIKeyHeader

from annotator.shared.config import AppEnv, settings

# -----------------------------------------------------------------------------
# Security: Admin API key
# -----------------------------------------------------------------------------
api_key_scheme = APIKeyHeader(name="X-API-Key", auto_error=False)


def _normalize_presented_key(x_api_key: Optional[str]) -> Optional[str]:
    if not x_api_key:
        return None
    key = x_api_key.strip()
    if key.lower().startswith("bearer "):
        key = key[7:].strip()
    return key or None


def _split_secrets(configured: str) -> list[str]:
    # Comma- or whitespace-separated lists allow key rotation.
    parts = re.split(r"[,\s]+", configured.strip())
    return [p for p in parts if p]


def _is_valid_key(presented: str, configured: str) -> bool:
    for candidate in _split_secrets(configured):
        if secrets.compare_digest(presented, candidate):
            return True
    return False


async def verify_api_key(x_api_key: Optional[str] = Security(api_key_scheme)) -> str:
    """
    Validates the admin API key for store maintenance endpoints.

    - In PRODUCTION: fails closed if API_SECRET is missing.
    - Elsewhere: a missing API_SECRET bypasses auth ("dev-bypass").
    """
    configured = settings.API_SECRET
    presented = _normalize_presented_key(x_api_key)

    if not configured:
        if settings.APP_ENV == AppEnv.PRODUCTION:
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Server misconfiguration: API_SECRET is not set",
            )
        return "dev-bypass"

    if not presented:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing X-API-Key header",
        )

    if not _is_valid_key(presented, configured):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Invalid X-API-Key credentials",
        )

    return presented
