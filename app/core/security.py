"""Provides API key-based security for FastAPI endpoints."""

import logging

from fastapi import Depends
from fastapi import HTTPException
from fastapi.security import APIKeyHeader

from app.core.config import settings

# Initialize logger
logger = logging.getLogger(__name__)

api_key_header = APIKeyHeader(name="X-API-Key", auto_error=False)


async def verify_api_key(key: str | None = Depends(api_key_header)) -> bool:
    """Verifies the provided API key against the server's configured API key.

    Used as a FastAPI dependency to protect routes. When no API key is
    configured the embedding endpoints are served to any local host.

    Args:
        key: The API key extracted from the 'X-API-Key' header, if any.

    Returns:
        True if the request is allowed.

    Raises:
        HTTPException: With status code 403 if a key is configured and the
                       provided one is missing or does not match.
    """
    if not settings.api_key:
        logger.debug("No API_KEY configured; embedding endpoints are unauthenticated")
        return True

    if key != settings.api_key:
        raise HTTPException(status_code=403, detail="Invalid API Key")
    return True
